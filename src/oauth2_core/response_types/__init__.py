# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Response types of the authorize endpoint."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from .abstract import AbstractResponseType
from .code import CodeResponseType
from .token import TokenResponseType


class ResponseType(str, Enum):
    """Response types defined by RFC 6749."""

    CODE = "code"
    TOKEN = "token"


RESPONSE_TYPES: Mapping[str, type[AbstractResponseType]] = MappingProxyType(
    {
        ResponseType.CODE.value: CodeResponseType,
        ResponseType.TOKEN.value: TokenResponseType,
    }
)

__all__ = [
    "RESPONSE_TYPES",
    "ResponseType",
    "AbstractResponseType",
    "CodeResponseType",
    "TokenResponseType",
]
