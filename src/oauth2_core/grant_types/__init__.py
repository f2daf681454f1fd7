# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Grant types and the token endpoint registry."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from .abstract import AbstractGrantType
from .authorization_code import AuthorizationCodeGrantType
from .client_credentials import ClientCredentialsGrantType
from .implicit import ImplicitGrantType
from .password import PasswordGrantType
from .refresh_token import RefreshTokenGrantType


class GrantType(str, Enum):
    """Grant types defined by RFC 6749."""

    AUTHORIZATION_CODE = "authorization_code"
    CLIENT_CREDENTIALS = "client_credentials"
    PASSWORD = "password"
    REFRESH_TOKEN = "refresh_token"
    IMPLICIT = "implicit"


# Grant types reachable through the token endpoint. ``implicit`` is only
# issued by the authorize endpoint.
GRANT_TYPES: Mapping[str, type[AbstractGrantType]] = MappingProxyType(
    {
        GrantType.AUTHORIZATION_CODE.value: AuthorizationCodeGrantType,
        GrantType.CLIENT_CREDENTIALS.value: ClientCredentialsGrantType,
        GrantType.PASSWORD.value: PasswordGrantType,
        GrantType.REFRESH_TOKEN.value: RefreshTokenGrantType,
    }
)

__all__ = [
    "GRANT_TYPES",
    "GrantType",
    "AbstractGrantType",
    "AuthorizationCodeGrantType",
    "ClientCredentialsGrantType",
    "ImplicitGrantType",
    "PasswordGrantType",
    "RefreshTokenGrantType",
]
