"""
Timezone utilities for the scheduling subsystem.

Session times are wall-clock values with no timezone; "today" and "now"
for booking-horizon checks are taken in a configured timezone.
"""

from datetime import date, datetime

import pytz

from .config import settings


def get_timezone(tz_name: str | None = None) -> pytz.tzinfo.BaseTzInfo:
    """
    Resolve a timezone name, falling back to the configured default.

    Args:
        tz_name: IANA timezone name or None

    Returns:
        pytz timezone object
    """
    return pytz.timezone(tz_name or settings.default_timezone)


def get_now(tz_name: str | None = None) -> datetime:
    """Current datetime in the given (or default) timezone."""
    return datetime.now(get_timezone(tz_name))


def get_today(tz_name: str | None = None) -> date:
    """'Today' in the given (or default) timezone."""
    return get_now(tz_name).date()
