# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Resource owner password credentials grant.

See https://tools.ietf.org/html/rfc6749#section-4.3
"""

import asyncio
from typing import Any

from .. import validators
from ..core.awaitables import require_capability, resolve
from ..errors import InvalidGrantError, InvalidRequestError
from ..models.entities import Client, Token
from ..models.protocol import PasswordModel
from ..request import Request
from .abstract import AbstractGrantType


class PasswordGrantType(AbstractGrantType):
    """Exchange a username/password pair for an access and refresh token."""

    def __init__(self, *, model: PasswordModel | None = None, **options: Any) -> None:
        super().__init__(model=model, **options)
        require_capability(self.model, "get_user", "save_token")

    async def handle(self, request: Request, client: Client) -> Token:
        """Retrieve the user from the model using a username/password combination.

        See https://tools.ietf.org/html/rfc6749#section-4.3.2
        """
        self.check_arguments(request, client)

        scope = self.get_scope(request)
        user = await self.get_user(request)

        return await self.save_token(user, client, scope)

    async def get_user(self, request: Request) -> Any:
        """Get user using a username/password combination.

        Unknown users and wrong passwords are reported the same way.
        """
        username = request.body.get("username")
        password = request.body.get("password")

        if not username:
            raise InvalidRequestError("Missing parameter: `username`")

        if not password:
            raise InvalidRequestError("Missing parameter: `password`")

        if not validators.uchar(username):
            raise InvalidRequestError("Invalid parameter: `username`")

        if not validators.uchar(password):
            raise InvalidRequestError("Invalid parameter: `password`")

        user = await resolve(self.model.get_user(username, password))
        if not user:
            raise InvalidGrantError("Invalid grant: user credentials are invalid")

        return user

    async def save_token(self, user: Any, client: Client, scope: str | None) -> Token:
        """Generate and save an access/refresh token pair."""
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

        return await self.persist_token(token, client, user)
