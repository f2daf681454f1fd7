# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Base Pydantic model configuration for OAuth2 records.

Records cross the boundary between the engine and the caller-supplied model,
so they are immutable once built and accept adapter-specific extra fields.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

R = TypeVar("R", bound="RecordModel")


class RecordModel(BaseModel):
    """Base model for records owned by the storage adapter.

    Unknown fields are kept (``model_extra``) so adapters can attach their own
    data, e.g. custom token attributes.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        validate_default=True,
        arbitrary_types_allowed=True,
    )

    @classmethod
    def coerce(cls: type[R], value: Any) -> R | None:
        """Build a record from whatever the model returned.

        Accepts an instance, a mapping, or any object exposing matching
        attributes. ``None`` and other falsy results pass through as ``None``.
        """
        if not value:
            return None
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        return cls.model_validate(value, from_attributes=True)
