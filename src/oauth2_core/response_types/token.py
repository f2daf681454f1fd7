# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""``token`` response type: issue an access token in the URI fragment.

Implicit flow parameters never go in the query string, where they could leak
through referrer headers or server logs.

See https://tools.ietf.org/html/rfc6749#section-4.2.2
"""

import math
from typing import Any

from beartype import beartype

from ..core.awaitables import require_model
from ..core.tokens import as_utc, utcnow
from ..errors import InvalidArgumentError
from ..grant_types.implicit import ImplicitGrantType
from ..models.entities import Client, Token
from ..models.protocol import SaveTokenModel
from ..redirect_uri import RedirectUri
from ..request import Request
from .abstract import AbstractResponseType


class TokenResponseType(AbstractResponseType):
    """Run the implicit grant and hand the access token back via redirect."""

    def __init__(
        self,
        *,
        model: SaveTokenModel | None = None,
        access_token_lifetime: int | None = None,
        **_options: Any,
    ) -> None:
        if not access_token_lifetime:
            raise InvalidArgumentError("Missing parameter: `access_token_lifetime`")

        self.model = require_model(model)
        self.access_token_lifetime = access_token_lifetime
        self.token: Token | None = None

    @property
    def access_token(self) -> str | None:
        """The issued access token, once ``handle`` ran."""
        return self.token.access_token if self.token else None

    async def handle(
        self,
        request: Request,
        client: Client,
        user: Any,
        uri: str,
        scope: str | None,
    ) -> Token:
        """Issue an access token through the implicit grant."""
        if request is None:
            raise InvalidArgumentError("Missing parameter: `request`")

        if client is None:
            raise InvalidArgumentError("Missing parameter: `client`")

        grant_type = ImplicitGrantType(
            model=self.model,
            user=user,
            scope=scope,
            access_token_lifetime=self.get_access_token_lifetime(client),
        )
        self.token = await grant_type.handle(request, client)

        return self.token

    @beartype
    def get_access_token_lifetime(self, client: Client) -> int:
        """Per-client lifetime, falling back to the configured one."""
        return client.access_token_lifetime or self.access_token_lifetime

    def build_redirect_uri(self, redirect_uri: RedirectUri) -> RedirectUri:
        """Add ``access_token``, ``token_type`` and, if known, ``expires_in`` and ``scope``."""
        redirect_uri = self.set_redirect_uri_param(redirect_uri, "access_token", self.access_token)
        redirect_uri = self.set_redirect_uri_param(redirect_uri, "token_type", "Bearer")

        if self.token is not None and self.token.access_token_expires_at is not None:
            remaining = as_utc(self.token.access_token_expires_at) - utcnow()
            redirect_uri = self.set_redirect_uri_param(
                redirect_uri, "expires_in", math.floor(remaining.total_seconds())
            )

        if self.token is not None and self.token.scope:
            redirect_uri = self.set_redirect_uri_param(redirect_uri, "scope", self.token.scope)

        return redirect_uri

    @beartype
    def add_param(self, redirect_uri: RedirectUri, key: str, value: str) -> RedirectUri:
        return redirect_uri.with_fragment_param(key, value)
