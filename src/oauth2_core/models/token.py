# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Validated view of a saved token, ready for the token response."""

import math
from datetime import datetime
from typing import Any

from attrs import frozen
from beartype import beartype

from ..core.tokens import as_utc, utcnow
from ..errors import InvalidArgumentError
from .entities import Client, Token


@frozen
class TokenModel:
    """Token as issued to the client.

    ``access_token_lifetime`` is the number of whole seconds left until
    ``access_token_expires_at``. ``custom_attributes`` holds the non-standard
    fields of the saved record and is only populated when extended token
    attributes are allowed.
    """

    access_token: str
    client: Client
    user: Any
    access_token_expires_at: datetime | None = None
    access_token_lifetime: int | None = None
    refresh_token: str | None = None
    refresh_token_expires_at: datetime | None = None
    scope: str | None = None
    authorization_code: str | None = None
    custom_attributes: dict[str, Any] | None = None

    @classmethod
    @beartype
    def from_token(
        cls, token: Token, *, allow_extended_token_attributes: bool = False
    ) -> "TokenModel":
        """Validate a saved token record."""
        if not token.access_token:
            raise InvalidArgumentError("Missing parameter: `access_token`")

        if token.client is None:
            raise InvalidArgumentError("Missing parameter: `client`")

        if token.user is None:
            raise InvalidArgumentError("Missing parameter: `user`")

        lifetime = None
        if token.access_token_expires_at is not None:
            remaining = as_utc(token.access_token_expires_at) - utcnow()
            lifetime = math.floor(remaining.total_seconds())

        custom_attributes = None
        if allow_extended_token_attributes and token.model_extra:
            custom_attributes = dict(token.model_extra)

        return cls(
            access_token=token.access_token,
            client=token.client,
            user=token.user,
            access_token_expires_at=token.access_token_expires_at,
            access_token_lifetime=lifetime,
            refresh_token=token.refresh_token,
            refresh_token_expires_at=token.refresh_token_expires_at,
            scope=token.scope,
            authorization_code=token.authorization_code,
            custom_attributes=custom_attributes,
        )
