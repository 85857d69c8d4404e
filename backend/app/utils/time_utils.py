from __future__ import annotations

from datetime import time
import re

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import InvalidTimeFormatException

# Zero-padded 24-hour wall-clock value, e.g. "09:30"
_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
_END_OF_DAY = "24:00"


def parse_time_str(value: str, *, allow_end_of_day: bool = False) -> int:
    """
    Convert an "HH:MM" string to minutes since midnight.

    Args:
        value: Zero-padded 24-hour time string.
        allow_end_of_day: Accept "24:00" (1440) as an end-of-window value.

    Returns:
        Minutes since midnight (0-1439, or 1440 for "24:00").

    Raises:
        InvalidTimeFormatException: If the value is not a valid HH:MM string.
    """
    if not isinstance(value, str):
        raise InvalidTimeFormatException(value)
    if allow_end_of_day and value == _END_OF_DAY:
        return MINUTES_PER_DAY
    match = _HHMM_RE.match(value)
    if not match:
        raise InvalidTimeFormatException(value)
    return int(match.group(1)) * 60 + int(match.group(2))


def is_valid_time_str(value: str, *, allow_end_of_day: bool = False) -> bool:
    try:
        parse_time_str(value, allow_end_of_day=allow_end_of_day)
    except InvalidTimeFormatException:
        return False
    return True


def time_to_minutes(t: time, *, is_end_time: bool = False) -> int:
    """
    Minute offset of a datetime.time value.

    With is_end_time, midnight maps to 1440 so a window ending at 00:00 closes
    the day instead of opening it.
    """
    minutes = t.hour * 60 + t.minute
    if is_end_time and minutes == 0:
        return MINUTES_PER_DAY
    return minutes


def minutes_to_time_str(minutes: int) -> str:
    """Render a minute offset (0-1440) as HH:MM; 1440 becomes "24:00"."""
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range: {minutes}")
    if minutes == MINUTES_PER_DAY:
        return _END_OF_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def duration_minutes(start_time: str, end_time: str) -> int:
    """Signed length of [start_time, end_time) in minutes."""
    return parse_time_str(end_time, allow_end_of_day=True) - parse_time_str(start_time)
