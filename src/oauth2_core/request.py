# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Framework-independent request value object."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from beartype import beartype

from .errors import InvalidArgumentError

# Shorthands accepted by ``Request.is_type``.
_MIME_SHORTHANDS: dict[str, str] = {
    "urlencoded": "application/x-www-form-urlencoded",
    "json": "application/json",
    "multipart": "multipart/*",
    "text": "text/*",
}


@beartype
def _normalize_mime(value: str) -> str:
    value = value.strip().lower()
    if value in _MIME_SHORTHANDS:
        return _MIME_SHORTHANDS[value]
    if value.startswith("+"):
        return f"*/*{value}"
    if "/" not in value:
        return ""
    return value


@beartype
def _mime_matches(expected: str, actual: str) -> bool:
    if not expected:
        return False
    expected_type, _, expected_subtype = expected.partition("/")
    actual_type, _, actual_subtype = actual.partition("/")

    if expected_type not in ("*", actual_type):
        return False

    if expected_subtype.startswith("*+"):
        return actual_subtype.endswith(expected_subtype[1:])

    return expected_subtype in ("*", actual_subtype)


class Request:
    """Normalized HTTP request handed to the handlers.

    Header names are lower-cased and the method upper-cased. ``body`` and
    ``query`` are read-only mappings. ``extensions`` is a free-form side
    channel for framework bindings; the engine never reads it.
    """

    def __init__(
        self,
        *,
        headers: Mapping[str, Any] | None = None,
        method: str | None = None,
        query: Mapping[str, Any] | None = None,
        body: Mapping[str, Any] | None = None,
        extensions: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize request.

        Raises:
            InvalidArgumentError: If ``headers``, ``method`` or ``query`` is
                missing, or ``method`` is not a string.
        """
        if headers is None:
            raise InvalidArgumentError("Missing parameter: `headers`")

        if not method:
            raise InvalidArgumentError("Missing parameter: `method`")

        if not isinstance(method, str):
            raise InvalidArgumentError("Invalid parameter: `method`")

        if query is None:
            raise InvalidArgumentError("Missing parameter: `query`")

        self.body: Mapping[str, Any] = MappingProxyType(dict(body or {}))
        self.headers: Mapping[str, Any] = MappingProxyType(
            {str(field).lower(): value for field, value in headers.items()}
        )
        self.method = method.upper()
        self.query: Mapping[str, Any] = MappingProxyType(dict(query))
        self.extensions: dict[str, Any] = dict(extensions or {})

    @beartype
    def get(self, field: str) -> Any:
        """Get a request header (case-insensitive)."""
        return self.headers.get(field.lower())

    @beartype
    def param(self, name: str) -> Any:
        """Get a parameter from the body, falling back to the query string."""
        return self.body.get(name) or self.query.get(name)

    @beartype
    def is_type(self, *types: str | list[str] | tuple[str, ...]) -> str | None:
        """Check if the content-type matches any of the given mime types.

        Returns the first matching entry of ``types`` (or the actual mime type
        when called without arguments), ``None`` if there is no match or no
        content-type at all.
        """
        content_type = self.get("content-type")
        if not content_type:
            return None

        actual = str(content_type).split(";", 1)[0].strip().lower()
        if len(types) == 1 and isinstance(types[0], (list, tuple)):
            candidates: tuple[str, ...] = tuple(types[0])
        else:
            candidates = tuple(t for t in types if isinstance(t, str))

        if not candidates:
            return actual

        for candidate in candidates:
            if _mime_matches(_normalize_mime(candidate), actual):
                return candidate
        return None

    def __repr__(self) -> str:
        return f"Request(method={self.method!r}, headers={dict(self.headers)!r})"
