import pytest

from core.exceptions import PreferenceError
from core.models import Preferences
from core.validation import validate_preferences


def test_valid_preferences_pass_through():
    prefs = Preferences(
        wake_weekday=420,
        sleep_hours_weekday=8,
        workout_days={1, 3, 5},
        selected_activities={"Reading": [1], "Run": [2]},
    )
    assert validate_preferences(prefs) is prefs


@pytest.mark.parametrize(
    "prefs, field",
    [
        (Preferences(wake_weekday=24 * 60), "wakeWeekday"),
        (Preferences(sleep_hours_weekend=-1), "sleepHoursWeekend"),
        (Preferences(screen_limit_hours=25), "screenLimitHours"),
        (Preferences(weight_lbs=0), "weightLbs"),
        (Preferences(addiction_days_per_week=8), "addictionDaysPerWeek"),
        (Preferences(workout_days={0}), "workoutDays"),
        (Preferences(cold_shower_days={8}), "coldShowerDays"),
        (Preferences(selected_activities={"Reading": [1], "Run": [2], "Pray": [3]}), "selectedActivities"),
        (Preferences(selected_activities={"Reading": [9]}), "selectedActivities.Reading"),
        (Preferences(selected_activities={"Workout": [1]}), "selectedActivities"),
        (Preferences(selected_activities={"guitar": [2]}), "selectedActivities"),
        (Preferences(selected_activities={"reading": [1], "Reading ": [2]}), "selectedActivities"),
    ],
)
def test_out_of_range_values_are_rejected(prefs, field):
    with pytest.raises(PreferenceError) as exc:
        validate_preferences(prefs)
    assert exc.value.field == field
    assert field in exc.value.get_user_message()


def test_activity_names_are_case_insensitive():
    prefs = Preferences(selected_activities={"meditation": [1], " walk": [2]})
    assert validate_preferences(prefs) is prefs
