# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Bearer token authentication for protected resources.

See https://tools.ietf.org/html/rfc6750
"""

import re

from beartype import beartype

from ..core.awaitables import require_capability, require_model, resolve
from ..core.logging_utils import get_logger
from ..core.tokens import has_expired
from ..errors import (
    InsufficientScopeError,
    InvalidArgumentError,
    InvalidRequestError,
    InvalidTokenError,
    OAuthError,
    ServerError,
    UnauthorizedRequestError,
)
from ..models.entities import Token
from ..models.protocol import AccessTokenModel
from ..request import Request
from ..response import Response

logger = get_logger(__name__)

_BEARER_HEADER = re.compile(r"Bearer\s(\S+)")


class AuthenticateHandler:
    """Resolve and validate the access token of a request.

    Args:
        model: Storage model; must implement ``get_access_token``, and
            ``verify_scope`` when ``scope`` is given.
        scope: Scope the protected resource requires.
        allow_bearer_tokens_in_query_string: Accept ``access_token`` in the
            query string (RFC 6750 section 2.3, discouraged).
        add_accepted_scopes_header: Send ``X-Accepted-OAuth-Scopes``.
        add_authorized_scopes_header: Send ``X-OAuth-Scopes``.
    """

    def __init__(
        self,
        *,
        model: AccessTokenModel | None = None,
        scope: str | None = None,
        allow_bearer_tokens_in_query_string: bool = False,
        add_accepted_scopes_header: bool = True,
        add_authorized_scopes_header: bool = True,
    ) -> None:
        self.model = require_model(model)
        require_capability(self.model, "get_access_token")

        if scope:
            require_capability(self.model, "verify_scope")

        self.scope = scope
        self.allow_bearer_tokens_in_query_string = allow_bearer_tokens_in_query_string
        self.add_accepted_scopes_header = add_accepted_scopes_header
        self.add_authorized_scopes_header = add_authorized_scopes_header

    async def handle(self, request: Request, response: Response) -> Token:
        """Authenticate the request and return its access token record."""
        if not isinstance(request, Request):
            raise InvalidArgumentError("Invalid argument: `request` must be an instance of Request")

        if not isinstance(response, Response):
            raise InvalidArgumentError("Invalid argument: `response` must be an instance of Response")

        try:
            token = self.get_token_from_request(request)
            access_token = await self.get_access_token(token)
            self.validate_access_token(access_token)

            if self.scope:
                await self.verify_scope(access_token)

            self.update_response(response, access_token)
            return access_token
        except UnauthorizedRequestError:
            response.set("WWW-Authenticate", 'Bearer realm="Service"')
            raise
        except Exception as exc:
            if isinstance(exc, OAuthError) and not isinstance(exc, InvalidArgumentError):
                raise
            logger.warning("Unexpected error while authenticating a request", exc_info=exc)
            raise ServerError(exc) from exc

    def get_token_from_request(self, request: Request) -> str:
        """Get the token from the header, query string or body.

        Only one method of sending the token is allowed.

        See https://tools.ietf.org/html/rfc6750#section-2
        """
        header_token = request.get("authorization")
        query_token = request.query.get("access_token")
        body_token = request.body.get("access_token")

        if sum(1 for token in (header_token, query_token, body_token) if token) > 1:
            raise InvalidRequestError("Invalid request: only one authentication method is allowed")

        if header_token:
            return self.get_token_from_request_header(request)

        if query_token:
            return self.get_token_from_request_query(request)

        if body_token:
            return self.get_token_from_request_body(request)

        raise UnauthorizedRequestError("Unauthorized request: no authentication given")

    @beartype
    def get_token_from_request_header(self, request: Request) -> str:
        """See https://tools.ietf.org/html/rfc6750#section-2.1"""
        matches = _BEARER_HEADER.search(str(request.get("authorization")))

        if not matches:
            raise InvalidRequestError("Invalid request: malformed authorization header")

        return matches.group(1)

    @beartype
    def get_token_from_request_query(self, request: Request) -> str:
        """See https://tools.ietf.org/html/rfc6750#section-2.3"""
        if not self.allow_bearer_tokens_in_query_string:
            raise InvalidRequestError("Invalid request: do not send bearer tokens in query URLs")

        return request.query["access_token"]

    @beartype
    def get_token_from_request_body(self, request: Request) -> str:
        """See https://tools.ietf.org/html/rfc6750#section-2.2"""
        if request.method == "GET":
            raise InvalidRequestError(
                "Invalid request: token may not be passed in the body when using the GET verb"
            )

        if not request.is_type("application/x-www-form-urlencoded"):
            raise InvalidRequestError(
                "Invalid request: content must be application/x-www-form-urlencoded"
            )

        return request.body["access_token"]

    async def get_access_token(self, token: str) -> Token:
        """Look the token up through the model."""
        access_token = Token.coerce(await resolve(self.model.get_access_token(token)))

        if access_token is None:
            raise InvalidTokenError("Invalid token: access token is invalid")

        if access_token.user is None:
            raise ServerError("Server error: `get_access_token()` did not return a `user` object")

        return access_token

    @beartype
    def validate_access_token(self, access_token: Token) -> None:
        """Reject expired tokens. Tokens without an expiry never expire."""
        expires_at = access_token.access_token_expires_at
        if expires_at is not None and has_expired(expires_at):
            raise InvalidTokenError("Invalid token: access token has expired")

    async def verify_scope(self, access_token: Token) -> None:
        scope = await resolve(self.model.verify_scope(access_token, self.scope))

        if not scope:
            raise InsufficientScopeError("Insufficient scope: authorized scope is insufficient")

    @beartype
    def update_response(self, response: Response, access_token: Token) -> None:
        if self.scope and self.add_accepted_scopes_header:
            response.set("X-Accepted-OAuth-Scopes", self.scope)

        if self.scope and self.add_authorized_scopes_header:
            response.set("X-OAuth-Scopes", access_token.scope or "")