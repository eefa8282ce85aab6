"""
Achievement badges.

Each badge has a fixed unlock condition over the progress snapshot. Unlock
dates are recorded the first time a condition holds and kept afterwards,
even if the condition later stops holding.
"""
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional

from core.clock import date_key
from core.models import ProgressState


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    title: str
    description: str
    quote: str
    condition: Callable[[ProgressState], bool]


@dataclass
class Achievement:
    id: str
    title: str
    description: str
    quote: str
    unlocked: bool = False
    unlocked_on: Optional[date] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "quote": self.quote,
            "unlocked": self.unlocked,
            "unlockedOn": date_key(self.unlocked_on) if self.unlocked_on else None,
        }


ACHIEVEMENTS: List[AchievementDefinition] = [
    AchievementDefinition(
        id="first_steps",
        title="First Steps",
        description="You earned your very first XP!",
        quote="Every journey begins with a single step.",
        condition=lambda p: p.total_xp > 0,
    ),
    AchievementDefinition(
        id="disciplined",
        title="Disciplined",
        description="Reached level 2 in Discipline.",
        quote="Consistency beats intensity.",
        condition=lambda p: p.skills["Discipline"].level >= 2,
    ),
    AchievementDefinition(
        id="fuel_up",
        title="Fuel Up",
        description="Earned your first Fuel XP.",
        quote="What you put in is what you get out.",
        condition=lambda p: p.skills["Fuel"].xp > 0,
    ),
]


def evaluate_achievements(progress: ProgressState, today: date) -> List[Achievement]:
    """Every badge with its unlock state as of ``today``."""
    result = []
    for definition in ACHIEVEMENTS:
        unlocked_on = progress.achievements.get(definition.id)
        if unlocked_on is None and definition.condition(progress):
            unlocked_on = today
        result.append(Achievement(
            id=definition.id,
            title=definition.title,
            description=definition.description,
            quote=definition.quote,
            unlocked=unlocked_on is not None,
            unlocked_on=unlocked_on,
        ))
    return result


def newly_unlocked(progress: ProgressState, today: date) -> Dict[str, date]:
    """Badges whose condition holds but have no recorded unlock date yet."""
    return {
        a.id: a.unlocked_on
        for a in evaluate_achievements(progress, today)
        if a.unlocked and a.id not in progress.achievements
    }
