# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Helpers for calling into caller-supplied models.

Model hooks may be plain functions or coroutines; the engine always awaits
``resolve(...)`` so both behave the same.
"""

import inspect
from typing import Any

from beartype import beartype

from ..errors import InvalidArgumentError


async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


@beartype
def has_capability(model: Any, name: str) -> bool:
    """Check whether the model implements the hook ``name``."""
    return callable(getattr(model, name, None))


@beartype
def require_model(model: Any) -> Any:
    """Fail fast when no model was supplied."""
    if model is None:
        raise InvalidArgumentError("Missing parameter: `model`")
    return model


@beartype
def require_capability(model: Any, *names: str) -> None:
    """Fail fast naming the first hook the model does not implement."""
    for name in names:
        if not has_capability(model, name):
            raise InvalidArgumentError(
                f"Invalid argument: model does not implement `{name}()`"
            )
