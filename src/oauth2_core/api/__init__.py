# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""FastAPI binding for the OAuth2 engine."""

from .bindings import to_oauth_request, to_starlette_response
from .router import create_oauth2_router

__all__ = ["create_oauth2_router", "to_oauth_request", "to_starlette_response"]
