# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Client credentials grant.

See https://tools.ietf.org/html/rfc6749#section-4.4
"""

import asyncio
from typing import Any

from ..core.awaitables import require_capability, resolve
from ..errors import InvalidGrantError
from ..models.entities import Client, Token
from ..models.protocol import ClientCredentialsModel
from ..request import Request
from .abstract import AbstractGrantType


class ClientCredentialsGrantType(AbstractGrantType):
    """Issue an access token to an authenticated client acting on its own behalf."""

    def __init__(
        self, *, model: ClientCredentialsModel | None = None, **options: Any
    ) -> None:
        super().__init__(model=model, **options)
        require_capability(self.model, "get_user_from_client", "save_token")

    async def handle(self, request: Request, client: Client) -> Token:
        """Handle client credentials grant.

        See https://tools.ietf.org/html/rfc6749#section-4.4.2
        """
        self.check_arguments(request, client)

        scope = self.get_scope(request)
        user = await self.get_user_from_client(client)

        return await self.save_token(user, client, scope)

    async def get_user_from_client(self, client: Client) -> Any:
        """Retrieve the user the client acts as."""
        user = await resolve(self.model.get_user_from_client(client))
        if not user:
            raise InvalidGrantError("Invalid grant: user credentials are invalid")

        return user

    async def save_token(self, user: Any, client: Client, scope: str | None) -> Token:
        """Save an access token; no refresh token is issued for this grant."""
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
