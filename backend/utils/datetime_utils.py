"""
Datetime utility functions for knowledge-unit timestamps
"""
from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# Epoch values above this are taken as milliseconds (year 2286 in seconds)
_EPOCH_MS_CUTOFF = 10_000_000_000


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def to_utc_datetime(value) -> Optional[datetime]:
    """
    Convert a unit timestamp to an aware UTC datetime

    Handles multiple cases:
    - None -> None
    - Python datetime -> as-is (naive values are taken as UTC)
    - int/float epoch seconds or milliseconds -> datetime
    - String ISO format (trailing 'Z' allowed) -> parse to datetime
    - Other -> None

    Args:
        value: datetime, epoch number, ISO string, or None

    Returns:
        Aware datetime in UTC or None
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    # bool is an int subclass; a flag is not a timestamp
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        seconds = value / 1000.0 if abs(value) >= _EPOCH_MS_CUTOFF else float(value)
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            logger.debug(f"Failed to convert epoch value {value!r}: {e}")
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return to_utc_datetime(datetime.fromisoformat(text.replace('Z', '+00:00')))
        except ValueError as e:
            logger.debug(f"Failed to parse datetime string '{value}': {e}")
            return None

    logger.debug(f"Cannot convert {type(value)} to datetime: {value!r}")
    return None


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    """Serialize an optional datetime."""
    return value.isoformat() if value is not None else None
