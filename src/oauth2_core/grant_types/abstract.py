# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Shared contract of every grant type."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from beartype import beartype

from .. import validators
from ..core.awaitables import has_capability, require_model, resolve
from ..core.tokens import expires_at, generate_random_token
from ..errors import InvalidArgumentError, InvalidScopeError, ServerError
from ..models.entities import Client, Token
from ..request import Request


class AbstractGrantType(ABC):
    """Base grant type.

    Args:
        model: Storage/identity model. Each subclass checks the hooks it needs.
        access_token_lifetime: Access token lifetime in seconds.
        refresh_token_lifetime: Refresh token lifetime in seconds; ``None``
            issues refresh tokens that do not expire.
        always_issue_new_refresh_token: Rotate refresh tokens on refresh.

    Raises:
        InvalidArgumentError: If ``access_token_lifetime`` or ``model`` is missing.
    """

    def __init__(
        self,
        *,
        model: Any = None,
        access_token_lifetime: int | None = None,
        refresh_token_lifetime: int | None = None,
        always_issue_new_refresh_token: bool = True,
    ) -> None:
        """Initialize grant type."""
        if not access_token_lifetime:
            raise InvalidArgumentError("Missing parameter: `access_token_lifetime`")

        self.model = require_model(model)
        self.access_token_lifetime = access_token_lifetime
        self.refresh_token_lifetime = refresh_token_lifetime
        self.always_issue_new_refresh_token = always_issue_new_refresh_token

    @abstractmethod
    async def handle(self, request: Request, client: Client) -> Token:
        """Run the grant and return the saved token."""

    async def generate_access_token(
        self, client: Client | None, user: Any, scope: str | None
    ) -> str:
        """Generate an access token, preferring the model's generator."""
        if has_capability(self.model, "generate_access_token"):
            access_token = await resolve(
                self.model.generate_access_token(client, user, scope)
            )
            if access_token:
                return access_token
        return generate_random_token()

    async def generate_refresh_token(
        self, client: Client | None, user: Any, scope: str | None
    ) -> str:
        """Generate a refresh token, preferring the model's generator."""
        if has_capability(self.model, "generate_refresh_token"):
            refresh_token = await resolve(
                self.model.generate_refresh_token(client, user, scope)
            )
            if refresh_token:
                return refresh_token
        return generate_random_token()

    @beartype
    def get_access_token_expires_at(self) -> datetime | None:
        """Get access token expiration date."""
        return expires_at(self.access_token_lifetime)

    @beartype
    def get_refresh_token_expires_at(self) -> datetime | None:
        """Get refresh token expiration date."""
        return expires_at(self.refresh_token_lifetime)

    @staticmethod
    def get_scope(request: Request) -> str | None:
        """Get scope from the request.

        Raises:
            InvalidScopeError: If the scope contains characters outside NQSCHAR.
        """
        scope = request.param("scope")
        if scope is not None and not validators.nqschar(scope):
            raise InvalidScopeError("Invalid parameter: `scope`")
        return scope

    async def validate_scope(self, user: Any, client: Client, scope: str | None) -> str | None:
        """Let the model narrow the requested scope; pass it through otherwise."""
        if has_capability(self.model, "validate_scope"):
            validated = await resolve(self.model.validate_scope(user, client, scope))
            if not validated:
                raise InvalidScopeError("Invalid scope: Requested scope is invalid")
            return validated
        return scope

    async def persist_token(self, token: Token, client: Client, user: Any) -> Token:
        """Hand the token to ``save_token`` and return what the model saved."""
        saved = Token.coerce(await resolve(self.model.save_token(token, client, user)))
        if saved is None:
            raise ServerError("Server error: `save_token()` did not return a token")
        return saved

    @staticmethod
    def check_arguments(request: Request | None, client: Client | None) -> None:
        """Fail fast on malformed calls."""
        if request is None:
            raise InvalidArgumentError("Missing parameter: `request`")

        if client is None:
            raise InvalidArgumentError("Missing parameter: `client`")
