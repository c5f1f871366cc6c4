"""Timezone utilities for displaying timestamps.

Timestamps come back from Supabase in UTC; the screens and log files show
them in the configured local timezone.
"""

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

logger = logging.getLogger(__name__)


def get_display_timezone() -> ZoneInfo:
    """Get the configured display timezone object.

    Returns:
        ZoneInfo for the configured name, UTC when the name is unknown
    """
    from config.settings import get_settings
    name = get_settings().get_timezone_name()
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning(f"Unknown timezone '{name}', falling back to UTC")
        return ZoneInfo("UTC")


def to_display_timezone(dt: datetime) -> datetime:
    """Convert an aware datetime to the display timezone (naive values are assumed UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(get_display_timezone())


def format_timestamp_for_display(dt: Optional[datetime] = None) -> str:
    """Format a timestamp for page captions ("2025-01-15 08:30 CST")."""
    if dt is None:
        dt = datetime.now(timezone.utc)
    local = to_display_timezone(dt)
    return local.strftime('%Y-%m-%d %H:%M %Z')
