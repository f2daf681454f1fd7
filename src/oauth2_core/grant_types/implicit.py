# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Implicit grant, driven by the ``token`` response type.

See https://tools.ietf.org/html/rfc6749#section-4.2
"""

import asyncio
from typing import Any

from ..core.awaitables import require_capability
from ..errors import InvalidArgumentError
from ..models.entities import Client, Token
from ..models.protocol import SaveTokenModel
from ..request import Request
from .abstract import AbstractGrantType


class ImplicitGrantType(AbstractGrantType):
    """Issue an access token for an already authenticated user.

    The user and the validated scope come from the authorize flow, not from
    the request. Never issues a refresh token.
    """

    def __init__(
        self,
        *,
        model: SaveTokenModel | None = None,
        user: Any = None,
        scope: str | None = None,
        **options: Any,
    ) -> None:
        super().__init__(model=model, **options)
        require_capability(self.model, "save_token")

        if user is None:
            raise InvalidArgumentError("Missing parameter: `user`")

        self.user = user
        self.scope = scope

    async def handle(self, request: Request, client: Client) -> Token:
        """Save a token for the user given at construction."""
        self.check_arguments(request, client)

        return await self.save_token(self.user, client, self.scope)

    async def save_token(self, user: Any, client: Client, scope: str | None) -> Token:
        """Save an access token."""
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
