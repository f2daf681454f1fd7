# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Authorization code grant.

See https://tools.ietf.org/html/rfc6749#section-4.1
"""

import asyncio
from typing import Any

from .. import validators
from ..core.awaitables import require_capability, resolve
from ..core.tokens import has_expired
from ..errors import InvalidGrantError, InvalidRequestError, ServerError
from ..models.entities import AuthorizationCode, Client, Token
from ..models.protocol import AuthorizationCodeModel
from ..request import Request
from .abstract import AbstractGrantType


class AuthorizationCodeGrantType(AbstractGrantType):
    """Exchange a single-use authorization code for an access and refresh token."""

    def __init__(
        self, *, model: AuthorizationCodeModel | None = None, **options: Any
    ) -> None:
        super().__init__(model=model, **options)
        require_capability(
            self.model,
            "get_authorization_code",
            "revoke_authorization_code",
            "save_token",
        )

    async def handle(self, request: Request, client: Client) -> Token:
        """Handle authorization code grant.

        See https://tools.ietf.org/html/rfc6749#section-4.1.3
        """
        self.check_arguments(request, client)

        code = await self.get_authorization_code(request, client)
        self.validate_redirect_uri(request, code)
        await self.revoke_authorization_code(code)

        return await self.save_token(code.user, client, code.authorization_code, code.scope)

    async def get_authorization_code(self, request: Request, client: Client) -> AuthorizationCode:
        """Get the authorization code and check it belongs to ``client``."""
        value = request.body.get("code")

        if not value:
            raise InvalidRequestError("Missing parameter: `code`")

        if not validators.vschar(value):
            raise InvalidRequestError("Invalid parameter: `code`")

        code = AuthorizationCode.coerce(
            await resolve(self.model.get_authorization_code(value))
        )

        if code is None:
            raise InvalidGrantError("Invalid grant: authorization code is invalid")

        if code.client is None:
            raise ServerError(
                "Server error: `get_authorization_code()` did not return a `client` object"
            )

        if code.user is None:
            raise ServerError(
                "Server error: `get_authorization_code()` did not return a `user` object"
            )

        if code.client.id != client.id:
            raise InvalidGrantError("Invalid grant: authorization code is invalid")

        if code.expires_at is None:
            raise ServerError("Server error: `expires_at` must be a datetime instance")

        if has_expired(code.expires_at):
            raise InvalidGrantError("Invalid grant: authorization code has expired")

        if code.redirect_uri and not validators.uri(code.redirect_uri):
            raise InvalidGrantError("Invalid grant: `redirect_uri` is not a valid URI")

        return code

    @staticmethod
    def validate_redirect_uri(request: Request, code: AuthorizationCode) -> None:
        """Require the same ``redirect_uri`` that was used to obtain the code.

        See https://tools.ietf.org/html/rfc6749#section-4.1.3
        """
        if not code.redirect_uri:
            return

        redirect_uri = request.param("redirect_uri")

        if not validators.uri(redirect_uri):
            raise InvalidRequestError("Invalid request: `redirect_uri` is not a valid URI")

        if redirect_uri != code.redirect_uri:
            raise InvalidRequestError("Invalid request: `redirect_uri` is invalid")

    async def revoke_authorization_code(self, code: AuthorizationCode) -> AuthorizationCode:
        """Consume the code; a code that cannot be revoked was already used."""
        status = await resolve(self.model.revoke_authorization_code(code))
        if not status:
            raise InvalidGrantError("Invalid grant: authorization code is invalid")

        return code

    async def save_token(
        self,
        user: Any,
        client: Client,
        authorization_code: str,
        scope: str | None,
    ) -> Token:
        """Generate and save an access/refresh token pair."""
        access_scope, access_token, refresh_token = await asyncio.gather(
            self.validate_scope(user, client, scope),
            self.generate_access_token(client, user, scope),
            self.generate_refresh_token(client, user, scope),
        )

        token = Token(
            access_token=access_token,
            authorization_code=authorization_code,
            access_token_expires_at=self.get_access_token_expires_at(),
            refresh_token=refresh_token,
            refresh_token_expires_at=self.get_refresh_token_expires_at(),
            scope=access_scope,
        )

        return await self.persist_token(token, client, user)
