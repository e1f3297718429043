"""Timestamp helpers shared by the progress evaluator."""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a feed timestamp into an aware datetime.

    The feed publishes ISO-8601 strings. A trailing "Z" is accepted and
    naive values are taken as UTC.

    Args:
        value: Timestamp string, or None.

    Returns:
        Aware datetime, or None if the value is missing or unparseable.
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f"Ignoring unparseable timestamp {value!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_aware(moment: datetime) -> datetime:
    """Treat a naive reference time as UTC so it compares with feed times."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def is_reached(value: Optional[str], now: datetime) -> bool:
    """True if the timestamp is present and at or before ``now``."""
    moment = parse_timestamp(value)
    if moment is None:
        return False
    return moment <= as_aware(now)
