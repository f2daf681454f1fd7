# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Records exchanged with the storage adapter.

The engine never mutates these; it builds new ones and hands them to the
model for persistence. ``user`` is opaque and only passed through.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from .base import RecordModel


class Client(RecordModel):
    """Registered OAuth2 client as returned by ``get_client``."""

    id: str = Field(..., min_length=1, description="Client identifier")
    grants: list[str] | None = Field(
        default=None, description="Grant types the client may use"
    )
    redirect_uris: list[str] | None = Field(
        default=None, description="Registered redirect URIs"
    )
    access_token_lifetime: int | None = Field(
        default=None, ge=1, description="Per-client access token lifetime in seconds"
    )
    refresh_token_lifetime: int | None = Field(
        default=None, ge=1, description="Per-client refresh token lifetime in seconds"
    )
    authorization_code_lifetime: int | None = Field(
        default=None, ge=1, description="Per-client authorization code lifetime in seconds"
    )
    scope: str | None = None


class Token(RecordModel):
    """Access token record.

    Built by a grant type and passed to ``save_token``; the record returned by
    ``save_token`` (or ``get_access_token``) also carries ``client`` and
    ``user``. Extra fields are custom token attributes.
    """

    access_token: str = Field(..., min_length=1)
    access_token_expires_at: datetime | None = None
    refresh_token: str | None = None
    refresh_token_expires_at: datetime | None = None
    scope: str | None = None
    authorization_code: str | None = None
    client: Client | None = None
    user: Any = None


class RefreshToken(RecordModel):
    """Refresh token record as returned by ``get_refresh_token``."""

    refresh_token: str = Field(..., min_length=1)
    refresh_token_expires_at: datetime | None = None
    access_token: str | None = None
    scope: str | None = None
    client: Client | None = None
    user: Any = None


class AuthorizationCode(RecordModel):
    """Authorization code record.

    Single use: the adapter is expected to reject a code once
    ``revoke_authorization_code`` succeeded for it.
    """

    authorization_code: str = Field(..., min_length=1)
    expires_at: datetime | None = None
    redirect_uri: str | None = None
    scope: str | None = None
    client: Client | None = None
    user: Any = None
