# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Framework-independent response value object."""

from collections.abc import Mapping
from typing import Any

from beartype import beartype


class Response:
    """Response filled in by the handlers.

    Starts as ``200`` with empty headers and body; handlers set the body,
    headers and status, and ``redirect`` for the authorize flow.
    """

    def __init__(
        self,
        *,
        headers: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
        extensions: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize response."""
        self.body: dict[str, Any] = dict(body or {})
        self.headers: dict[str, Any] = {
            str(field).lower(): value for field, value in (headers or {}).items()
        }
        self.status = 200
        self.extensions: dict[str, Any] = dict(extensions or {})

    @beartype
    def get(self, field: str) -> Any:
        """Get a response header (case-insensitive)."""
        return self.headers.get(field.lower())

    @beartype
    def set(self, field: str, value: str) -> None:
        """Set a response header."""
        self.headers[field.lower()] = value

    @beartype
    def redirect(self, url: str) -> None:
        """Redirect the user-agent with ``302 Found``."""
        self.set("Location", url)
        self.status = 302

    def __repr__(self) -> str:
        return f"Response(status={self.status}, headers={self.headers!r})"
