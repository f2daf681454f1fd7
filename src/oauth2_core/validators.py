# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Syntax validation rules from RFC 6749 Appendix A."""

import re
from typing import Any, Final

from beartype import beartype

_NCHAR: Final = re.compile(r"^[-._\w]+$", re.ASCII)
_NQCHAR: Final = re.compile(r"^[\x21\x23-\x5B\x5D-\x7E]+$")
_NQSCHAR: Final = re.compile(r"^[\x20-\x21\x23-\x5B\x5D-\x7E]+$")
_UCHAR: Final = re.compile(r"^[\t\x20-\x7E\x80-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]+$")
_URI: Final = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]+:")
_VSCHAR: Final = re.compile(r"^[\x20-\x7E]+$")


@beartype
def _matches(pattern: re.Pattern[str], value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


@beartype
def nchar(value: Any) -> bool:
    """Validate if a value matches NCHAR (e.g. ``grant_type``)."""
    return _matches(_NCHAR, value)


@beartype
def nqchar(value: Any) -> bool:
    """Validate if a value matches NQCHAR."""
    return _matches(_NQCHAR, value)


@beartype
def nqschar(value: Any) -> bool:
    """Validate if a value matches NQSCHAR (e.g. ``scope``)."""
    return _matches(_NQSCHAR, value)


@beartype
def uchar(value: Any) -> bool:
    """Validate if a value matches UNICODECHARNOCRLF (e.g. ``username``)."""
    return _matches(_UCHAR, value)


@beartype
def uri(value: Any) -> bool:
    """Validate if a value looks like an absolute URI with a scheme."""
    return isinstance(value, str) and _URI.match(value) is not None


@beartype
def vschar(value: Any) -> bool:
    """Validate if a value matches VSCHAR (e.g. ``client_id``, ``state``)."""
    return _matches(_VSCHAR, value)
