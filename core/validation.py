"""
Preference validation at the entry boundary.

The task generator tolerates missing data, but values a user saves must be in
range: weekdays in 1..7, times inside the day, non-negative hours, and at most
the configured number of extra activities, each one of the offered options.
"""
from typing import Iterable, Optional

from core.clock import MINUTES_PER_DAY
from core.config_manager import config
from core.exceptions import PreferenceError
from core.models import Preferences
from core.task_generator import ACTIVITY_OPTIONS


def _check_days(days: Iterable[int], field: str) -> None:
    for day in days:
        if not 1 <= day <= 7:
            raise PreferenceError(f"{field} contains weekday {day}, expected 1 (Mon) .. 7 (Sun)", field)


def _check_hours(value: Optional[float], field: str, upper: float = 24.0) -> None:
    if value is None:
        return
    if value < 0:
        raise PreferenceError(f"{field} cannot be negative ({value})", field)
    if value > upper:
        raise PreferenceError(f"{field} cannot exceed {upper:g} hours ({value})", field)


def _check_time(value: Optional[int], field: str) -> None:
    if value is not None and not 0 <= value < MINUTES_PER_DAY:
        raise PreferenceError(f"{field} is outside the day ({value} minutes)", field)


def validate_preferences(prefs: Preferences) -> Preferences:
    """
    Reject out-of-range preferences.

    Returns:
        The same preferences object, for chaining.

    Raises:
        PreferenceError: naming the first offending field.
    """
    _check_time(prefs.wake_weekday, "wakeWeekday")
    _check_time(prefs.wake_weekend, "wakeWeekend")
    _check_hours(prefs.sleep_hours_weekday, "sleepHoursWeekday")
    _check_hours(prefs.sleep_hours_weekend, "sleepHoursWeekend")
    _check_hours(prefs.workout_hours_per_day, "workoutHoursPerDay")
    _check_hours(prefs.screen_limit_hours, "screenLimitHours")

    if prefs.weight_lbs is not None and prefs.weight_lbs <= 0:
        raise PreferenceError(f"weightLbs must be positive ({prefs.weight_lbs})", "weightLbs")

    if prefs.addiction_days_per_week is not None and not 0 <= prefs.addiction_days_per_week <= 7:
        raise PreferenceError(
            f"addictionDaysPerWeek must be 0..7 ({prefs.addiction_days_per_week})",
            "addictionDaysPerWeek",
        )

    _check_days(prefs.workout_days, "workoutDays")
    _check_days(prefs.cold_shower_days, "coldShowerDays")

    if len(prefs.selected_activities) > config.MAX_SELECTED_ACTIVITIES:
        raise PreferenceError(
            f"At most {config.MAX_SELECTED_ACTIVITIES} activities can be selected "
            f"({len(prefs.selected_activities)} given)",
            "selectedActivities",
        )
    seen = set()
    for name, days in prefs.selected_activities.items():
        normalized = name.strip().title()
        if normalized not in ACTIVITY_OPTIONS:
            raise PreferenceError(
                f"Unknown activity {name!r}, choose from: {', '.join(ACTIVITY_OPTIONS)}",
                "selectedActivities",
            )
        if normalized in seen:
            raise PreferenceError(f"Activity {normalized} selected twice", "selectedActivities")
        seen.add(normalized)
        _check_days(days, f"selectedActivities.{name}")

    return prefs
