"""
Unix-seconds conversion shared by every wire format.

The wire carries ``confirmed_at`` as a signed count of seconds since the
epoch with no notion of "unset", so an absent timestamp is encoded as the
epoch-zero sentinel and decoded back to ``None``. A confirmation recorded at
exactly 1970-01-01T00:00:00Z is therefore indistinguishable from "pending".
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from domain.common.exceptions import DomainValidationException


SENTINEL_SECONDS = 0


def ensure_utc(dt: datetime) -> datetime:
    """Naive datetimes are treated as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def encode_timestamp(dt: Optional[datetime]) -> int:
    """datetime -> whole seconds; sub-second precision is dropped."""
    if dt is None:
        return SENTINEL_SECONDS
    return int(ensure_utc(dt).replace(microsecond=0).timestamp())


def decode_timestamp(seconds: Optional[int]) -> Optional[datetime]:
    """Seconds outside the range ``datetime`` can represent are a caller error."""
    if not seconds:
        return None
    try:
        return datetime.fromtimestamp(int(seconds), tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise DomainValidationException(
            f"confirmed_at out of range: {seconds}",
            field="confirmed_at",
            details={"confirmed_at": seconds},
        ) from exc


__all__ = ["SENTINEL_SECONDS", "ensure_utc", "encode_timestamp", "decode_timestamp"]
