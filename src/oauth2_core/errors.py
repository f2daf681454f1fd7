# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""OAuth2 error taxonomy.

Every error carries a stable ``name`` (the OAuth2 ``error`` value used in JSON
bodies and redirect parameters), an HTTP ``code``, a human readable
``message`` and, when built from another exception, the ``inner`` exception.

See https://tools.ietf.org/html/rfc6749#section-4.1.2.1 and
https://tools.ietf.org/html/rfc6749#section-5.2 for the wire semantics.
"""

from http import HTTPStatus
from typing import ClassVar

from beartype import beartype

__all__ = [
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


@beartype
def _reason_phrase(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


class OAuthError(Exception):
    """Base OAuth2 error.

    Args:
        message: Human readable description, or an exception to wrap. A wrapped
            exception becomes ``inner`` and lends its text as the message.
        code: HTTP status override. Only used where RFC 6749 mandates a
            different status for the same error name.
    """

    error_name: ClassVar[str] = "server_error"
    default_code: ClassVar[int] = 500

    @beartype
    def __init__(
        self,
        message: str | BaseException | None = None,
        *,
        code: int | None = None,
    ) -> None:
        """Initialize OAuth2 error."""
        inner = message if isinstance(message, BaseException) else None
        text = str(inner) if inner is not None else message

        self._code = code or self.default_code
        self._message = text or _reason_phrase(self._code)
        self._inner = inner
        super().__init__(self._message)

    @property
    def name(self) -> str:
        """OAuth2 error identifier."""
        return self.error_name

    @property
    def code(self) -> int:
        """HTTP status code."""
        return self._code

    @property
    def status_code(self) -> int:
        """Alias of ``code`` for HTTP bindings."""
        return self._code

    @property
    def message(self) -> str:
        """Human readable description."""
        return self._message

    @property
    def inner(self) -> BaseException | None:
        """Wrapped source exception, if any."""
        return self._inner

    @beartype
    def to_dict(self) -> dict[str, str]:
        """Convert to OAuth2 error response body."""
        return {"error": self.name, "error_description": self.message}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, code={self.code}, message={self.message!r})"


class AccessDeniedError(OAuthError):
    """The resource owner or authorization server denied the request."""

    error_name = "access_denied"
    default_code = 400


class InsufficientScopeError(OAuthError):
    """The request requires higher privileges than provided by the access token.

    See https://tools.ietf.org/html/rfc6750#section-3.1
    """

    error_name = "insufficient_scope"
    default_code = 403


class InvalidArgumentError(OAuthError):
    """Programmer or integration error: a handler was called or built incorrectly."""

    error_name = "invalid_argument"
    default_code = 500


class InvalidClientError(OAuthError):
    """Client authentication failed."""

    error_name = "invalid_client"
    default_code = 400


class InvalidGrantError(OAuthError):
    """The authorization grant or refresh token is invalid, expired or revoked."""

    error_name = "invalid_grant"
    default_code = 400


class InvalidRequestError(OAuthError):
    """The request is missing a required parameter or is otherwise malformed."""

    error_name = "invalid_request"
    default_code = 400


class InvalidScopeError(OAuthError):
    """The requested scope is invalid, unknown, or malformed."""

    error_name = "invalid_scope"
    default_code = 400


class InvalidTokenError(OAuthError):
    """The access token provided is expired, revoked, malformed, or invalid.

    See https://tools.ietf.org/html/rfc6750#section-3.1
    """

    error_name = "invalid_token"
    default_code = 401


class ServerError(OAuthError):
    """The authorization server encountered an unexpected condition."""

    error_name = "server_error"
    default_code = 503


class UnauthorizedClientError(OAuthError):
    """The client is not authorized to use the requested grant or response type."""

    error_name = "unauthorized_client"
    default_code = 400


class UnauthorizedRequestError(OAuthError):
    """The request lacks any authentication information.

    See https://tools.ietf.org/html/rfc6750#section-3.1
    """

    error_name = "unauthorized_request"
    default_code = 401


class UnsupportedGrantTypeError(OAuthError):
    """The grant type is not supported by the authorization server."""

    error_name = "unsupported_grant_type"
    default_code = 400


class UnsupportedResponseTypeError(OAuthError):
    """The authorization server does not support the requested response type."""

    error_name = "unsupported_response_type"
    default_code = 400
