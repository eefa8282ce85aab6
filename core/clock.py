"""
Calendar and clock helpers.

Weekdays use Monday=1 .. Sunday=7 throughout Arise. Times of day are held as
minutes since midnight in memory and as "military" integers (hour*100+minute)
in stored user documents.
"""
import re
from datetime import date
from typing import Any, Optional

from core.exceptions import StateError

MINUTES_PER_DAY = 24 * 60
WEEKEND_DAYS = frozenset({6, 7})
DATE_KEY_FORMAT = "%Y-%m-%d"

_HHMM_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def iso_weekday(day: date) -> int:
    """Weekday index for ``day``: Monday=1 .. Sunday=7."""
    return day.isoweekday()


def convert_calendar_weekday(raw: int) -> int:
    """Remap a Sunday=1 calendar weekday to Monday=1 .. Sunday=7."""
    return 7 if raw == 1 else raw - 1


def is_weekend(day: date) -> bool:
    return iso_weekday(day) in WEEKEND_DAYS


def date_key(day: date) -> str:
    return day.strftime(DATE_KEY_FORMAT)


def parse_date_key(value: Optional[str]) -> Optional[date]:
    """
    Parse a stored ``yyyy-MM-dd`` date.

    Empty values mean "never reset" and come back as None. Anything else that
    does not parse is corrupted state.
    """
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise StateError(f"Malformed stored date: {value!r}", corrupted_data=str(value))


def minutes_from_military(value: int) -> Optional[int]:
    hour, minute = divmod(value, 100)
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return hour * 60 + minute
    return None


def military_from_minutes(minutes: int) -> int:
    hour, minute = divmod(minutes % MINUTES_PER_DAY, 60)
    return hour * 100 + minute


def parse_time_of_day(value: Any) -> Optional[int]:
    """
    Read a stored time of day into minutes since midnight.

    Accepts military integers (700, 2330) and "HH:MM" strings. Malformed
    values give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return minutes_from_military(value)
    if isinstance(value, float) and value.is_integer():
        return minutes_from_military(int(value))
    if isinstance(value, str):
        match = _HHMM_PATTERN.match(value.strip())
        if match:
            hour, minute = map(int, match.groups())
            if 0 <= hour <= 23 and 0 <= minute <= 59:
                return hour * 60 + minute
    return None


def format_clock(minutes: int) -> str:
    """Format minutes since midnight as a 12-hour clock, e.g. "7:00 AM"."""
    minutes %= MINUTES_PER_DAY
    hour, minute = divmod(minutes, 60)
    suffix = "PM" if hour >= 12 else "AM"
    display_hour = 12 if hour == 0 else (hour - 12 if hour > 12 else hour)
    return f"{display_hour}:{minute:02d} {suffix}"


def round_to_step(minutes: int, step: int = 15) -> int:
    """
    Round to the nearest ``step`` mark on the clock.

    The remainder rounds down below the half step and up from it, so for a
    15 minute step a remainder of 7 rounds down and 8 rounds up.
    """
    remainder = minutes % step
    if remainder < (step + 1) // 2:
        rounded = minutes - remainder
    else:
        rounded = minutes + (step - remainder)
    return rounded % MINUTES_PER_DAY
