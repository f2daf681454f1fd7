# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Core infrastructure components for the OAuth2 engine."""

from .config import OAuth2Settings, get_settings
from .logging_utils import configure_logging, get_logger

__all__ = ["OAuth2Settings", "get_settings", "configure_logging", "get_logger"]
