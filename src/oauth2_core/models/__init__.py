# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Records and model contracts."""

from .base import RecordModel
from .entities import AuthorizationCode, Client, RefreshToken, Token
from .token import TokenModel

__all__ = [
    "RecordModel",
    "AuthorizationCode",
    "Client",
    "RefreshToken",
    "Token",
    "TokenModel",
]
