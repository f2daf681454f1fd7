# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""OAuth2 (RFC 6749) authorization server protocol engine.

The FastAPI binding lives in ``oauth2_core.api``.
"""

import logging

from .core.config import OAuth2Settings, get_settings
from .errors import (
    AccessDeniedError,
    InsufficientScopeError,
    InvalidArgumentError,
    InvalidClientError,
    InvalidGrantError,
    InvalidRequestError,
    InvalidScopeError,
    InvalidTokenError,
    OAuthError,
    ServerError,
    UnauthorizedClientError,
    UnauthorizedRequestError,
    UnsupportedGrantTypeError,
    UnsupportedResponseTypeError,
)
from .handlers import AuthenticateHandler, AuthorizeHandler, TokenHandler
from .models import AuthorizationCode, Client, RefreshToken, Token, TokenModel
from .request import Request
from .response import Response
from .server import OAuth2Server

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "OAuth2Server",
    "OAuth2Settings",
    "get_settings",
    "Request",
    "Response",
    "AuthenticateHandler",
    "AuthorizeHandler",
    "TokenHandler",
    "AuthorizationCode",
    "Client",
    "RefreshToken",
    "Token",
    "TokenModel",
    "OAuthError",
    "AccessDeniedError",
    "InsufficientScopeError",
    "InvalidArgumentError",
    "InvalidClientError",
    "InvalidGrantError",
    "InvalidRequestError",
    "InvalidScopeError",
    "InvalidTokenError",
    "ServerError",
    "UnauthorizedClientError",
    "UnauthorizedRequestError",
    "UnsupportedGrantTypeError",
    "UnsupportedResponseTypeError",
]
