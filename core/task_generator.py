"""
Task Generator for Arise.

Maps a user's stored preferences and a calendar day to that day's ordered
task list. Pure function: the same preferences and day always give the same
tasks, ids included.

Order:
1. Daily tasks: Wake Up, Sleep, Drink Water, Screen Time Limit
2. Set-day tasks: Workout, Cold Shower, then extra activities in stored order

A missing preference field omits its task; it never raises.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from core.clock import date_key, format_clock, is_weekend, iso_weekday, round_to_step
from core.config_manager import config
from core.logger import get_logger
from core.models import Preferences, Task, TaskType

logger = get_logger("task_generator")


@dataclass(frozen=True)
class TaskTemplate:
    name: str
    xp: int
    expires_in_hours: int
    type: TaskType
    skill: str


WAKE_UP = TaskTemplate("Wake Up", 25, 6, TaskType.DAILY, "Discipline")
SLEEP = TaskTemplate("Sleep", 25, 12, TaskType.DAILY, "Resilience")
DRINK_WATER = TaskTemplate("Drink Water", 20, 10, TaskType.DAILY, "Fuel")
SCREEN_TIME = TaskTemplate("Screen Time Limit", 20, 10, TaskType.DAILY, "Discipline")
WORKOUT = TaskTemplate("Workout", 50, 12, TaskType.SET_DAY, "Fitness")
COLD_SHOWER = TaskTemplate("Cold Shower", 35, 12, TaskType.SET_DAY, "Resilience")

ACTIVITY_XP = 30
ACTIVITY_EXPIRES_IN_HOURS = 12

# 额外活动 → 训练的技能；未列出的活动计入 Network
ACTIVITY_SKILLS: Dict[str, str] = {
    "Meditation": "Resilience",
    "Pray": "Resilience",
    "Reading": "Wisdom",
    "Study": "Wisdom",
    "Walk": "Fitness",
    "Run": "Fitness",
}
DEFAULT_ACTIVITY_SKILL = "Network"

# 录入时可选的活动（旧文档里的其他名字仍会生成任务）
ACTIVITY_OPTIONS = ("Meditation", "Reading", "Pray", "Study", "Walk", "Run")

# 额外活动的 id 单独加前缀，避免与内置任务重名
ACTIVITY_ID_PREFIX = "activity-"


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _task(template: TaskTemplate, day: date, description: str, id_prefix: str = "") -> Task:
    return Task(
        id=f"{date_key(day)}:{id_prefix}{_slug(template.name)}",
        name=template.name,
        description=description,
        xp=template.xp,
        expires_in_hours=template.expires_in_hours,
        type=template.type,
        skill=template.skill,
    )


def _format_hours(hours: float) -> str:
    text = f"{hours:g}"
    return f"{text} hour" if hours == 1 else f"{text} hours"


def bedtime_minutes(wake_minutes: int, sleep_hours: float, step: Optional[int] = None) -> int:
    """
    Bedtime for a wake time and sleep duration, rounded to the nearest step.

    07:00 with 8h gives 23:00; 07:00 with 7.8h is 23:12 raw and rounds to 23:15.
    """
    step = step or config.BEDTIME_ROUNDING_MINUTES
    raw = wake_minutes - int(round(sleep_hours * 60))
    return round_to_step(raw, step)


def active_sleep_schedule(prefs: Preferences, day: date) -> Tuple[Optional[int], Optional[float]]:
    """Wake time and sleep hours for the day type (weekday or weekend)."""
    if is_weekend(day):
        return prefs.wake_weekend, prefs.sleep_hours_weekend
    return prefs.wake_weekday, prefs.sleep_hours_weekday


def _daily_tasks(prefs: Preferences, day: date) -> List[Task]:
    tasks: List[Task] = []

    wake, sleep_hours = active_sleep_schedule(prefs, day)
    if wake is not None and sleep_hours is not None:
        tasks.append(_task(WAKE_UP, day, f"Wake up at {format_clock(wake)}"))
        bedtime = bedtime_minutes(wake, sleep_hours)
        tasks.append(_task(SLEEP, day, f"Go to bed by {format_clock(bedtime)}"))

    water = prefs.water_ounces
    if water is not None:
        tasks.append(_task(DRINK_WATER, day, f"Drink {water} oz of water"))

    if prefs.screen_limit_hours is not None:
        tasks.append(_task(
            SCREEN_TIME, day,
            f"Keep screen time under {_format_hours(prefs.screen_limit_hours)}",
        ))

    return tasks


def _set_day_tasks(prefs: Preferences, day: date) -> List[Task]:
    tasks: List[Task] = []
    weekday = iso_weekday(day)

    if weekday in prefs.workout_days and prefs.workout_hours_per_day is not None:
        minutes = int(round(prefs.workout_hours_per_day * 60))
        tasks.append(_task(WORKOUT, day, f"Work out for {minutes} minutes"))

    if prefs.take_cold_showers and weekday in prefs.cold_shower_days:
        tasks.append(_task(COLD_SHOWER, day, "Take a cold shower"))

    for raw_name, days in prefs.selected_activities.items():
        if weekday not in days:
            continue
        name = raw_name.strip().title()
        template = TaskTemplate(
            name=name,
            xp=ACTIVITY_XP,
            expires_in_hours=ACTIVITY_EXPIRES_IN_HOURS,
            type=TaskType.SET_DAY,
            skill=ACTIVITY_SKILLS.get(name, DEFAULT_ACTIVITY_SKILL),
        )
        tasks.append(_task(template, day, f"Make time for {name} today", ACTIVITY_ID_PREFIX))

    return tasks


def generate_tasks(prefs: Preferences, day: date) -> List[Task]:
    """
    Build the ordered task list for ``day``.

    Args:
        prefs: Stored user preferences (fields may be missing).
        day: Local calendar day; only its weekday matters.

    Returns:
        Daily tasks followed by set-day tasks, all unfinished.
    """
    tasks = _daily_tasks(prefs, day) + _set_day_tasks(prefs, day)
    logger.debug(
        "Generated %d tasks for %s: %s",
        len(tasks), date_key(day), ", ".join(t.name for t in tasks),
    )
    return tasks
