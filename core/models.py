"""
Core Data Models for Arise.
Defines user preferences, daily tasks and the persisted progress snapshot.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from core.clock import date_key, military_from_minutes, parse_date_key, parse_time_of_day

SKILL_NAMES = ("Resilience", "Fuel", "Fitness", "Wisdom", "Discipline", "Network")

WATER_OUNCES_PER_LB = 2 / 3


class TaskType(str, Enum):
    DAILY = "Daily"      # 每天都有（只要有对应偏好数据）
    SET_DAY = "SetDay"   # 仅在用户选择的星期几出现


def _optional_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _optional_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _day_set(value: Any) -> Set[int]:
    if isinstance(value, bool):
        return set()
    if isinstance(value, int):
        return {value}
    if isinstance(value, (list, tuple, set, frozenset)):
        return {v for v in value if isinstance(v, int) and not isinstance(v, bool)}
    return set()


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


@dataclass
class Preferences:
    """
    User-entered lifestyle configuration, read-only to the engine.

    Every field is optional: a missing value means the matching task is simply
    not generated. Wake times are minutes since midnight.
    """
    wake_weekday: Optional[int] = None
    wake_weekend: Optional[int] = None
    sleep_hours_weekday: Optional[float] = None
    sleep_hours_weekend: Optional[float] = None
    workout_hours_per_day: Optional[float] = None
    workout_days: Set[int] = field(default_factory=set)
    screen_limit_hours: Optional[float] = None
    weight_lbs: Optional[int] = None
    stored_water_ounces: Optional[int] = None
    take_cold_showers: bool = False
    cold_shower_days: Set[int] = field(default_factory=set)
    selected_activities: Dict[str, List[int]] = field(default_factory=dict)
    major_focus: str = ""
    addiction_days_per_week: Optional[int] = None

    @property
    def water_ounces(self) -> Optional[int]:
        if self.weight_lbs is not None:
            return _round_half_up(self.weight_lbs * WATER_OUNCES_PER_LB)
        return self.stored_water_ounces

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> "Preferences":
        """Lenient read of a stored user document; malformed fields become absent."""
        doc = doc or {}

        activities: Dict[str, List[int]] = {}
        raw_activities = doc.get("selectedActivities")
        if isinstance(raw_activities, dict):
            for name, days in raw_activities.items():
                if not isinstance(name, str) or not name.strip():
                    continue
                activities[name.strip().title()] = sorted(_day_set(days))

        take_cold = doc.get("takeColdShowers")
        if not isinstance(take_cold, bool):
            # 旧文档只存了 coldShowerDays，有天数即视为开启
            take_cold = bool(_day_set(doc.get("coldShowerDays")))

        return cls(
            wake_weekday=parse_time_of_day(doc.get("wakeWeekday")),
            wake_weekend=parse_time_of_day(doc.get("wakeWeekend")),
            sleep_hours_weekday=_optional_float(doc.get("sleepHoursWeekday")),
            sleep_hours_weekend=_optional_float(doc.get("sleepHoursWeekend")),
            workout_hours_per_day=_optional_float(doc.get("workoutHoursPerDay")),
            workout_days=_day_set(doc.get("workoutDays")),
            screen_limit_hours=_optional_float(doc.get("screenLimitHours")),
            weight_lbs=_optional_int(doc.get("weightLbs")),
            stored_water_ounces=_optional_int(doc.get("waterOunces")),
            take_cold_showers=take_cold,
            cold_shower_days=_day_set(doc.get("coldShowerDays")),
            selected_activities=activities,
            major_focus=doc.get("majorFocus") if isinstance(doc.get("majorFocus"), str) else "",
            addiction_days_per_week=_optional_int(doc.get("addictionDaysPerWeek")),
        )

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "workoutDays": sorted(self.workout_days),
            "takeColdShowers": self.take_cold_showers,
            "coldShowerDays": sorted(self.cold_shower_days),
            # 存储时 key 统一小写，读取时再首字母大写
            "selectedActivities": {
                name.lower(): sorted(days) for name, days in self.selected_activities.items()
            },
            "majorFocus": self.major_focus,
        }
        optional = {
            "wakeWeekday": None if self.wake_weekday is None else military_from_minutes(self.wake_weekday),
            "wakeWeekend": None if self.wake_weekend is None else military_from_minutes(self.wake_weekend),
            "sleepHoursWeekday": self.sleep_hours_weekday,
            "sleepHoursWeekend": self.sleep_hours_weekend,
            "workoutHoursPerDay": self.workout_hours_per_day,
            "screenLimitHours": self.screen_limit_hours,
            "weightLbs": self.weight_lbs,
            "waterOunces": self.water_ounces,
            "addictionDaysPerWeek": self.addiction_days_per_week,
        }
        doc.update({k: v for k, v in optional.items() if v is not None})
        return doc


@dataclass
class Task:
    """任务（每日生成，不单独持久化）"""
    id: str
    name: str
    description: str
    xp: int
    expires_in_hours: int
    type: TaskType
    skill: str
    is_completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "xp": self.xp,
            "expiresInHours": self.expires_in_hours,
            "type": self.type.value,
            "skill": self.skill,
            "isCompleted": self.is_completed,
        }


@dataclass
class SkillState:
    level: int = 1
    xp: int = 0


def default_skills() -> Dict[str, SkillState]:
    return {name: SkillState() for name in SKILL_NAMES}


@dataclass
class ProgressState:
    """
    Persisted completion/streak/XP snapshot for one user.

    A missing or partial document falls back to the first-use defaults:
    zero XP, zero streak, every skill at level 1 and no reset date, which
    forces task generation on the first check.
    """
    total_xp: int = 0
    streak: int = 0
    last_reset_date: Optional[date] = None
    last_streak_date: Optional[date] = None
    completed_task_ids: List[str] = field(default_factory=list)
    skills: Dict[str, SkillState] = field(default_factory=default_skills)
    rank: str = ""
    achievements: Dict[str, date] = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> "ProgressState":
        doc = doc or {}

        skills = default_skills()
        raw_skills = doc.get("skills")
        if isinstance(raw_skills, dict):
            for name, values in raw_skills.items():
                if name not in skills or not isinstance(values, dict):
                    continue
                level = _optional_int(values.get("level"))
                xp = _optional_int(values.get("xp"))
                skills[name] = SkillState(
                    level=level if level is not None and level >= 1 else 1,
                    xp=xp if xp is not None and xp >= 0 else 0,
                )

        achievements: Dict[str, date] = {}
        raw_achievements = doc.get("achievements")
        if isinstance(raw_achievements, dict):
            for achievement_id, unlocked_on in raw_achievements.items():
                parsed = parse_date_key(unlocked_on)
                if parsed is not None:
                    achievements[achievement_id] = parsed

        completed = doc.get("completedTaskIds")
        total_xp = _optional_int(doc.get("xp"))
        streak = _optional_int(doc.get("streak"))

        return cls(
            total_xp=max(total_xp or 0, 0),
            streak=max(streak or 0, 0),
            last_reset_date=parse_date_key(doc.get("lastResetDate")),
            last_streak_date=parse_date_key(doc.get("lastStreakDate")),
            completed_task_ids=[str(t) for t in completed] if isinstance(completed, list) else [],
            skills=skills,
            rank=doc.get("rank") if isinstance(doc.get("rank"), str) else "",
            achievements=achievements,
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "xp": self.total_xp,
            "rank": self.rank,
            "streak": self.streak,
            "lastResetDate": date_key(self.last_reset_date) if self.last_reset_date else "",
            "lastStreakDate": date_key(self.last_streak_date) if self.last_streak_date else "",
            "completedTaskIds": list(self.completed_task_ids),
            "skills": {
                name: {"level": s.level, "xp": s.xp} for name, s in self.skills.items()
            },
            "achievements": {k: date_key(v) for k, v in self.achievements.items()},
        }
