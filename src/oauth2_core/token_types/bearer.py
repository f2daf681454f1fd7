# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Bearer token response envelope (RFC 6750)."""

from typing import Any

from attrs import field, frozen
from beartype import beartype

from ..errors import InvalidArgumentError
from ..models.token import TokenModel


@frozen
class BearerTokenType:
    """Wire shape of an issued token.

    ``expires_in``, ``refresh_token`` and ``scope`` are only emitted when set.
    Custom attributes are appended but never replace a standard key.
    """

    access_token: str
    access_token_lifetime: int | None = None
    refresh_token: str | None = None
    scope: str | None = None
    custom_attributes: dict[str, Any] | None = field(default=None)

    def __attrs_post_init__(self) -> None:
        if not self.access_token:
            raise InvalidArgumentError("Missing parameter: `access_token`")

    @classmethod
    @beartype
    def from_token_model(cls, model: TokenModel) -> "BearerTokenType":
        """Build the envelope for a validated token."""
        return cls(
            access_token=model.access_token,
            access_token_lifetime=model.access_token_lifetime,
            refresh_token=model.refresh_token,
            scope=model.scope,
            custom_attributes=model.custom_attributes,
        )

    @beartype
    def to_dict(self) -> dict[str, Any]:
        """Retrieve the JSON-ready representation."""
        body: dict[str, Any] = {
            "access_token": self.access_token,
            "token_type": "Bearer",
        }

        if self.access_token_lifetime is not None:
            body["expires_in"] = self.access_token_lifetime

        if self.refresh_token:
            body["refresh_token"] = self.refresh_token

        if self.scope:
            body["scope"] = self.scope

        for key, value in (self.custom_attributes or {}).items():
            body.setdefault(key, value)

        return body
