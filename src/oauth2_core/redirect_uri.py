# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Immutable redirect URI with separate query and fragment parameters."""

from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from attrs import evolve, frozen
from beartype import beartype

Params = tuple[tuple[str, str], ...]

# Characters ``encodeURIComponent`` leaves alone besides the unreserved set.
_SAFE = "!*'()"


@beartype
def _encode(params: Params) -> str:
    return "&".join(
        f"{quote(key, safe=_SAFE)}={quote(value, safe=_SAFE)}" for key, value in params
    )


@beartype
def _replace(params: Params, key: str, value: str) -> Params:
    return tuple((k, v) for k, v in params if k != key) + ((key, value),)


@frozen
class RedirectUri:
    """Parsed redirect URI.

    Adding a parameter returns a new value; setting a key that is already
    present replaces it.
    """

    scheme: str
    netloc: str
    path: str
    query: Params = ()
    fragment: Params = ()

    @classmethod
    @beartype
    def parse(cls, uri: str) -> "RedirectUri":
        """Parse an absolute URI."""
        parts = urlsplit(uri)
        return cls(
            scheme=parts.scheme,
            netloc=parts.netloc,
            path=parts.path,
            query=tuple(parse_qsl(parts.query, keep_blank_values=True)),
            fragment=tuple(parse_qsl(parts.fragment, keep_blank_values=True)),
        )

    @beartype
    def with_query_param(self, key: str, value: str) -> "RedirectUri":
        """Return a copy with ``key=value`` in the query string."""
        return evolve(self, query=_replace(self.query, key, value))

    @beartype
    def with_fragment_param(self, key: str, value: str) -> "RedirectUri":
        """Return a copy with ``key=value`` in the fragment."""
        return evolve(self, fragment=_replace(self.fragment, key, value))

    @beartype
    def query_dict(self) -> dict[str, str]:
        """Query parameters as a dict (last value wins)."""
        return dict(self.query)

    @beartype
    def fragment_dict(self) -> dict[str, str]:
        """Fragment parameters as a dict (last value wins)."""
        return dict(self.fragment)

    @beartype
    def to_url(self) -> str:
        """Format the URI with percent-encoded parameters."""
        return urlunsplit(
            (self.scheme, self.netloc, self.path, _encode(self.query), _encode(self.fragment))
        )

    def __str__(self) -> str:
        return self.to_url()
