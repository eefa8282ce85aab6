"""
Progression Calculator for Arise.

Pure views over an XP/skill snapshot: rank, progress to the next rank,
journey progress, per-skill level curve and best/attention skills.
Awarding XP is done by the caller; nothing here mutates state.
"""
from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from core.models import SKILL_NAMES, SkillState, Task

JOURNEY_XP_GOAL = 20100


@dataclass(frozen=True)
class Rank:
    id: int
    name: str
    required_xp: int
    subtitle: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "requiredXP": self.required_xp,
            "subtitle": self.subtitle,
        }


RANKS: Tuple[Rank, ...] = (
    Rank(1, "Seeker", 0, "Every journey begins with a single step."),
    Rank(2, "Initiate", 2000, "Commitment is your first victory."),
    Rank(3, "Pioneer", 4000, "Forge new paths, leave a mark."),
    Rank(4, "Explorer", 8000, "Seek the unknown, learn from everything."),
    Rank(5, "Challenger", 12000, "You only lose when you stop fighting."),
    Rank(6, "Refiner", 16000, "Strength is forged in relentless practice."),
    Rank(7, "Master", 18000, "Discipline shapes mastery."),
    Rank(8, "Conquerer", 19000, "Pain is the path to triumph."),
    Rank(9, "Ascendant", 19500, "Only by fighting do you rise."),
    Rank(10, "Transcendent", 19800, "All limits fall before you."),
)

# 每个等级所需的累计 XP（下标 0 = Level 1），XP 跨等级累计不清零
SKILL_LEVEL_THRESHOLDS: Tuple[int, ...] = (0, 150, 350, 500, 850, 1150, 1500, 2000, 2500, 3350)
MAX_SKILL_LEVEL = len(SKILL_LEVEL_THRESHOLDS)


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return min(max(value, low), high)


# ---------------------------------------------------------------------------
# Ranks
# ---------------------------------------------------------------------------

def current_rank(total_xp: int) -> Rank:
    """Highest rank whose threshold is <= total_xp; Seeker if none."""
    reached = [r for r in RANKS if r.required_xp <= total_xp]
    return reached[-1] if reached else RANKS[0]


def next_rank(total_xp: int) -> Rank:
    """Lowest rank whose threshold is > total_xp; the current rank at max."""
    for rank in RANKS:
        if rank.required_xp > total_xp:
            return rank
    return current_rank(total_xp)


def progress_to_next_rank(total_xp: int) -> float:
    current = current_rank(total_xp)
    upcoming = next_rank(total_xp)
    span = upcoming.required_xp - current.required_xp
    if span == 0:
        return 0.0
    return _clamp((total_xp - current.required_xp) / span)


def journey_progress(total_xp: int) -> float:
    return _clamp(total_xp / JOURNEY_XP_GOAL)


def xp_display(total_xp: int) -> str:
    current = current_rank(total_xp)
    if current.id == RANKS[-1].id:
        return f"{total_xp} / {current.required_xp} XP"
    return f"{total_xp} / {next_rank(total_xp).required_xp} XP"


# ---------------------------------------------------------------------------
# Skills
# ---------------------------------------------------------------------------

def skill_level(xp: int) -> int:
    level = 1
    for index, threshold in enumerate(SKILL_LEVEL_THRESHOLDS):
        if xp >= threshold:
            level = index + 1
    return level


def skill_progress(xp: int) -> float:
    """
    Fraction of the way through the current skill level.

    Uses the level threshold table; a maxed skill reports 1.0.
    """
    level = skill_level(xp)
    if level >= MAX_SKILL_LEVEL:
        return 1.0
    floor = SKILL_LEVEL_THRESHOLDS[level - 1]
    ceiling = SKILL_LEVEL_THRESHOLDS[level]
    return _clamp((xp - floor) / (ceiling - floor))


def add_skill_xp(skill: SkillState, xp: int) -> SkillState:
    """Return a new skill state with ``xp`` added and the level recomputed."""
    new_xp = skill.xp + xp
    return SkillState(level=max(skill.level, skill_level(new_xp)), xp=new_xp)


def _ranked_skills(skills: Mapping[str, SkillState]) -> List[Tuple[str, int]]:
    entries = [(name, skills[name].xp if name in skills else 0) for name in SKILL_NAMES]
    return sorted(entries, key=lambda item: item[0])


def best_skill(skills: Mapping[str, SkillState]) -> str:
    """Skill with the most XP; ties go to the alphabetically first name."""
    entries = _ranked_skills(skills)
    top = max(xp for _, xp in entries)
    return next(name for name, xp in entries if xp == top)


def attention_skill(skills: Mapping[str, SkillState]) -> str:
    """Skill with the least XP; ties go to the alphabetically first name."""
    entries = _ranked_skills(skills)
    bottom = min(xp for _, xp in entries)
    return next(name for name, xp in entries if xp == bottom)


# ---------------------------------------------------------------------------
# Today
# ---------------------------------------------------------------------------

def daily_completion(tasks: List[Task]) -> Dict[str, int]:
    """Completed/total counts and XP for today's task list."""
    done = [t for t in tasks if t.is_completed]
    return {
        "completed": len(done),
        "total": len(tasks),
        "xp_earned": sum(t.xp for t in done),
        "xp_possible": sum(t.xp for t in tasks),
    }
