# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""``code`` response type: issue an authorization code in the query string.

See https://tools.ietf.org/html/rfc6749#section-4.1.2
"""

from datetime import datetime
from typing import Any

from beartype import beartype

from ..core.awaitables import has_capability, require_capability, require_model, resolve
from ..core.tokens import expires_at, generate_random_token
from ..errors import InvalidArgumentError, ServerError
from ..models.entities import AuthorizationCode, Client
from ..models.protocol import SaveAuthorizationCodeModel
from ..redirect_uri import RedirectUri
from ..request import Request
from .abstract import AbstractResponseType


class CodeResponseType(AbstractResponseType):
    """Issue and persist a single-use authorization code."""

    def __init__(
        self,
        *,
        model: SaveAuthorizationCodeModel | None = None,
        authorization_code_lifetime: int | None = None,
        **_options: Any,
    ) -> None:
        if not authorization_code_lifetime:
            raise InvalidArgumentError("Missing parameter: `authorization_code_lifetime`")

        self.model = require_model(model)
        require_capability(self.model, "save_authorization_code")

        self.authorization_code_lifetime = authorization_code_lifetime
        self.code: str | None = None

    async def handle(
        self,
        request: Request,
        client: Client,
        user: Any,
        uri: str,
        scope: str | None,
    ) -> AuthorizationCode:
        """Generate, save and remember an authorization code."""
        self.check_arguments(request, client, user, uri)

        authorization_code = await self.generate_authorization_code(client, user, scope)
        code = AuthorizationCode(
            authorization_code=authorization_code,
            expires_at=self.get_authorization_code_expires_at(client),
            redirect_uri=uri,
            scope=scope,
        )

        saved = AuthorizationCode.coerce(
            await resolve(self.model.save_authorization_code(code, client, user))
        )
        if saved is None:
            raise ServerError(
                "Server error: `save_authorization_code()` did not return a code"
            )

        self.code = saved.authorization_code
        return saved

    async def generate_authorization_code(
        self, client: Client, user: Any, scope: str | None
    ) -> str:
        """Generate an authorization code, preferring the model's generator."""
        if has_capability(self.model, "generate_authorization_code"):
            code = await resolve(self.model.generate_authorization_code(client, user, scope))
            if code:
                return code
        return generate_random_token()

    @beartype
    def get_authorization_code_lifetime(self, client: Client) -> int:
        """Per-client lifetime, falling back to the configured one."""
        return client.authorization_code_lifetime or self.authorization_code_lifetime

    @beartype
    def get_authorization_code_expires_at(self, client: Client) -> datetime | None:
        """Get authorization code expiration date."""
        return expires_at(self.get_authorization_code_lifetime(client))

    def build_redirect_uri(self, redirect_uri: RedirectUri) -> RedirectUri:
        """Add ``code`` to the query string."""
        return self.set_redirect_uri_param(redirect_uri, "code", self.code)

    @beartype
    def add_param(self, redirect_uri: RedirectUri, key: str, value: str) -> RedirectUri:
        return redirect_uri.with_query_param(key, value)
