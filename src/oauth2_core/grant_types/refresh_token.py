# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Refresh token grant.

See https://tools.ietf.org/html/rfc6749#section-6
"""

import asyncio
from typing import Any

from .. import validators
from ..core.awaitables import require_capability, resolve
from ..core.tokens import has_expired
from ..errors import InvalidGrantError, InvalidRequestError, InvalidScopeError, ServerError
from ..models.entities import Client, RefreshToken, Token
from ..models.protocol import RefreshTokenModel
from ..request import Request
from .abstract import AbstractGrantType


class RefreshTokenGrantType(AbstractGrantType):
    """Exchange a refresh token for a new access token.

    With ``always_issue_new_refresh_token`` (the default) the old refresh
    token is revoked and a new one is issued alongside the access token.
    """

    def __init__(self, *, model: RefreshTokenModel | None = None, **options: Any) -> None:
        super().__init__(model=model, **options)
        require_capability(self.model, "get_refresh_token", "revoke_token", "save_token")

    async def handle(self, request: Request, client: Client) -> Token:
        """Handle refresh token grant.

        See https://tools.ietf.org/html/rfc6749#section-6
        """
        self.check_arguments(request, client)

        token = await self.get_refresh_token(request, client)
        scope = self.get_refreshed_scope(request, token)
        token = await self.revoke_token(token)

        return await self.save_token(token.user, client, scope)

    async def get_refresh_token(self, request: Request, client: Client) -> RefreshToken:
        """Get the refresh token and check it belongs to ``client``."""
        value = request.body.get("refresh_token")

        if not value:
            raise InvalidRequestError("Missing parameter: `refresh_token`")

        if not validators.vschar(value):
            raise InvalidRequestError("Invalid parameter: `refresh_token`")

        token = RefreshToken.coerce(await resolve(self.model.get_refresh_token(value)))

        if token is None:
            raise InvalidGrantError("Invalid grant: refresh token is invalid")

        if token.client is None:
            raise ServerError(
                "Server error: `get_refresh_token()` did not return a `client` object"
            )

        if token.user is None:
            raise ServerError(
                "Server error: `get_refresh_token()` did not return a `user` object"
            )

        if token.client.id != client.id:
            raise InvalidGrantError("Invalid grant: refresh token is invalid")

        if token.refresh_token_expires_at and has_expired(token.refresh_token_expires_at):
            raise InvalidGrantError("Invalid grant: refresh token has expired")

        return token

    def get_refreshed_scope(self, request: Request, token: RefreshToken) -> str | None:
        """Resolve the scope of the new token.

        A missing ``scope`` keeps the original grant; a requested scope must
        not add anything the original grant did not have.
        """
        requested = self.get_scope(request)
        if not requested:
            return token.scope

        original = set((token.scope or "").split())
        if not set(requested.split()) <= original:
            raise InvalidScopeError("Invalid scope: Unable to add extra scopes")

        return requested

    async def revoke_token(self, token: RefreshToken) -> RefreshToken:
        """Revoke the old refresh token unless rotation is disabled."""
        if not self.always_issue_new_refresh_token:
            return token

        status = await resolve(self.model.revoke_token(token))
        if not status:
            raise InvalidGrantError("Invalid grant: refresh token is invalid")

        return token

    async def save_token(self, user: Any, client: Client, scope: str | None) -> Token:
        """Save the new token, with a fresh refresh token when rotating."""
        if self.always_issue_new_refresh_token:
            access_scope, access_token, refresh_token = await asyncio.gather(
                self.validate_scope(user, client, scope),
                self.generate_access_token(client, user, scope),
                self.generate_refresh_token(client, user, scope),
            )
            token = Token(
                access_token=access_token,
                access_token_expires_at=self.get_access_token_expires_at(),
                refresh_token=refresh_token,
                refresh_token_expires_at=self.get_refresh_token_expires_at(),
                scope=access_scope,
            )
        else:
            access_scope, access_token = await asyncio.gather(
                self.validate_scope(user, client, scope),
                self.generate_access_token(client, user, scope),
            )
            token = Token(
                access_token=access_token,
                access_token_expires_at=self.get_access_token_expires_at(),
                scope=access_scope,
            )

        return await self.persist_token(token, client, user)
