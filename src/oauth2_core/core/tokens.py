# PolicyCore - Policy Decision Management System
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Random token generation and expiry arithmetic."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from beartype import beartype


@beartype
def generate_random_token() -> str:
    """Generate a random 40 character lowercase hex token (SHA-1 of 256 random bytes)."""
    return hashlib.sha1(secrets.token_bytes(256)).hexdigest()  # nosec B324 - not used for integrity


@beartype
def utcnow() -> datetime:
    """Current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


@beartype
def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes from models as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@beartype
def expires_at(lifetime: int | None) -> datetime | None:
    """Absolute expiry ``lifetime`` seconds from now; ``None`` means no expiry."""
    if lifetime is None:
        return None
    return utcnow() + timedelta(seconds=lifetime)


@beartype
def has_expired(value: datetime) -> bool:
    """Check whether an absolute expiry lies in the past."""
    return as_utc(value) < utcnow()
