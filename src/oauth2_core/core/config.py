# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Configuration management using Pydantic Settings."""

from typing import Any

from beartype import beartype
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OAuth2Settings(BaseSettings):
    """Authorization server settings with immutable configuration.

    Values are read from ``OAUTH2_*`` environment variables. Lifetimes are in
    seconds; per-client lifetimes returned by the model take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="OAUTH2_",
        env_file=None,
        frozen=True,
        validate_default=True,
        extra="forbid",
    )

    # Token lifetimes
    access_token_lifetime: int = Field(
        default=3600,
        ge=1,
        description="Access token lifetime in seconds",
    )
    refresh_token_lifetime: int = Field(
        default=1209600,
        ge=1,
        description="Refresh token lifetime in seconds (two weeks)",
    )
    authorization_code_lifetime: int = Field(
        default=300,
        ge=1,
        description="Authorization code lifetime in seconds",
    )

    # Authorize endpoint
    allow_empty_state: bool = Field(
        default=False,
        description="Accept authorization requests without a `state` parameter",
    )

    # Token endpoint
    allow_extended_token_attributes: bool = Field(
        default=False,
        description="Copy non-standard token fields into the token response",
    )
    always_issue_new_refresh_token: bool = Field(
        default=True,
        description="Rotate refresh tokens on every refresh_token grant",
    )
    require_client_authentication: dict[str, bool] = Field(
        default_factory=dict,
        description="Per grant type switch for requiring a client secret",
    )

    # Authenticate (protected resources)
    allow_bearer_tokens_in_query_string: bool = Field(
        default=False,
        description="Accept `access_token` in the query string",
    )
    add_accepted_scopes_header: bool = Field(
        default=True,
        description="Send X-Accepted-OAuth-Scopes on authenticated responses",
    )
    add_authorized_scopes_header: bool = Field(
        default=True,
        description="Send X-OAuth-Scopes on authenticated responses",
    )

    @beartype
    def merged(self, **overrides: Any) -> "OAuth2Settings":
        """Return validated settings with the given overrides applied."""
        if not overrides:
            return self
        return type(self)(**{**self.model_dump(), **overrides})


_settings: OAuth2Settings | None = None


def get_settings() -> OAuth2Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = OAuth2Settings()
    return _settings
