# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Central logging utilities for the OAuth2 engine.

1. configure_logging(): opt-in, idempotent initialization for applications
   that want the engine to set up logging for them.
2. get_logger(name): typed helper returning a logger under the
   ``oauth2_core`` namespace.

The package only attaches a ``NullHandler`` to its own logger; handlers and
levels belong to the embedding application.
"""

from __future__ import annotations

import logging
from typing import Final

from beartype import beartype

__all__: Final = [
    "configure_logging",
    "get_logger",
]

ROOT_LOGGER_NAME: Final = "oauth2_core"
_DEFAULT_LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_is_configured: bool = False


@beartype
def configure_logging(
    *,
    level: int = logging.INFO,
    fmt: str = _DEFAULT_LOG_FORMAT,
    install_handler: bool = True,
) -> None:
    """Configure logging exactly once.

    Calling this function multiple times is safe; configuration is only
    applied on the first invocation.
    """
    global _is_configured
    if _is_configured:
        return

    if install_handler:
        logging.basicConfig(level=level, format=fmt)
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
    _is_configured = True


@beartype
def get_logger(name: str | None = None, *, level: int | None = None) -> logging.Logger:
    """Return a module-scoped logger under the package namespace."""
    if not name:
        name = ROOT_LOGGER_NAME
    elif not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
