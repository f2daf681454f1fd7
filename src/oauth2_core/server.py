# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""OAuth2 authorization server facade."""

from collections.abc import Mapping
from typing import Any

from .core.awaitables import require_model
from .core.config import OAuth2Settings, get_settings
from .grant_types import AbstractGrantType
from .handlers import AuthenticateHandler, AuthorizeHandler, TokenHandler
from .models.entities import AuthorizationCode, Token
from .request import Request
from .response import Response


class OAuth2Server:
    """Entry point wiring a model and settings into the endpoint handlers.

    Every call builds a fresh handler; keyword overrides passed to a call are
    merged into the server settings for that call only.

    Example:
        server = OAuth2Server(model=MyModel())
        token = await server.token(request, response)
    """

    def __init__(self, *, model: Any = None, settings: OAuth2Settings | None = None) -> None:
        self.model = require_model(model)
        self.settings = settings or get_settings()

    async def authenticate(
        self,
        request: Request,
        response: Response | None = None,
        *,
        scope: str | None = None,
        **overrides: Any,
    ) -> Token:
        """Authenticate a request to a protected resource."""
        settings = self.settings.merged(**overrides)
        handler = AuthenticateHandler(
            model=self.model,
            scope=scope,
            allow_bearer_tokens_in_query_string=settings.allow_bearer_tokens_in_query_string,
            add_accepted_scopes_header=settings.add_accepted_scopes_header,
            add_authorized_scopes_header=settings.add_authorized_scopes_header,
        )
        return await handler.handle(request, response if response is not None else Response())

    async def authorize(
        self,
        request: Request,
        response: Response,
        *,
        authenticate_handler: Any = None,
        **overrides: Any,
    ) -> AuthorizationCode | Token:
        """Authorize a request to the authorization endpoint."""
        settings = self.settings.merged(**overrides)
        handler = AuthorizeHandler(
            model=self.model,
            authenticate_handler=authenticate_handler,
            authorization_code_lifetime=settings.authorization_code_lifetime,
            access_token_lifetime=settings.access_token_lifetime,
            allow_empty_state=settings.allow_empty_state,
            allow_bearer_tokens_in_query_string=settings.allow_bearer_tokens_in_query_string,
            add_accepted_scopes_header=settings.add_accepted_scopes_header,
            add_authorized_scopes_header=settings.add_authorized_scopes_header,
        )
        return await handler.handle(request, response)

    async def token(
        self,
        request: Request,
        response: Response,
        *,
        extended_grant_types: Mapping[str, type[AbstractGrantType]] | None = None,
        **overrides: Any,
    ) -> Token:
        """Issue a token at the token endpoint."""
        settings = self.settings.merged(**overrides)
        handler = TokenHandler(
            model=self.model,
            access_token_lifetime=settings.access_token_lifetime,
            refresh_token_lifetime=settings.refresh_token_lifetime,
            always_issue_new_refresh_token=settings.always_issue_new_refresh_token,
            allow_extended_token_attributes=settings.allow_extended_token_attributes,
            require_client_authentication=settings.require_client_authentication,
            extended_grant_types=extended_grant_types,
        )
        return await handler.handle(request, response)
