# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Endpoint handlers: authenticate, authorize and token."""

from .authenticate import AuthenticateHandler
from .authorize import AuthorizeHandler
from .token import TokenHandler, parse_basic_auth

__all__ = [
    "AuthenticateHandler",
    "AuthorizeHandler",
    "TokenHandler",
    "parse_basic_auth",
]
