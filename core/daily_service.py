"""
Daily application service.

Glues the pure engine (task generator, completion tracker, progression,
achievements) to the user store. Presentation layers (web API, CLI) call this
service and never touch storage directly.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from core.achievements import evaluate_achievements, newly_unlocked
from core.clock import date_key
from core.completion_tracker import CompletionTracker
from core.document_store import deep_merge
from core.logger import get_logger
from core.models import SKILL_NAMES, Preferences, ProgressState, SkillState, Task
from core.progression import (
    add_skill_xp,
    attention_skill,
    best_skill,
    current_rank,
    daily_completion,
    journey_progress,
    next_rank,
    progress_to_next_rank,
    skill_progress,
    xp_display,
)
from core.task_generator import generate_tasks
from core.user_store import UserStore

logger = get_logger("daily_service")


@dataclass
class DailySnapshot:
    """Today's tasks as the presentation layer renders them."""
    day: date
    tasks: List[Task]
    streak: int

    @property
    def assigned(self) -> List[Task]:
        return [t for t in self.tasks if not t.is_completed]

    @property
    def completed(self) -> List[Task]:
        return [t for t in self.tasks if t.is_completed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": date_key(self.day),
            "streak": self.streak,
            "tasks": [t.to_dict() for t in self.tasks],
            "summary": daily_completion(self.tasks),
        }


@dataclass
class CompletionOutcome:
    """Result of completing one task, after XP and streak were persisted."""
    task_id: str
    changed: bool
    task: Optional[Task] = None
    xp_awarded: int = 0
    total_xp: int = 0
    streak: int = 0
    all_completed: bool = False
    streak_incremented: bool = False
    rank: str = ""
    rank_up: bool = False
    unlocked_achievements: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taskId": self.task_id,
            "changed": self.changed,
            "task": self.task.to_dict() if self.task else None,
            "xpAwarded": self.xp_awarded,
            "totalXP": self.total_xp,
            "streak": self.streak,
            "allCompleted": self.all_completed,
            "streakIncremented": self.streak_incremented,
            "rank": self.rank,
            "rankUp": self.rank_up,
            "unlockedAchievements": self.unlocked_achievements,
        }


class DailyService:
    """Application service for the daily task loop."""

    def __init__(
        self,
        store: Optional[UserStore] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self.store = store or UserStore()
        self._clock = clock or date.today

    def current_day(self, today: Optional[date] = None) -> date:
        return today or self._clock()

    @staticmethod
    def _tracker(prefs: Preferences, progress: ProgressState, day: date) -> CompletionTracker:
        return CompletionTracker.for_day(
            generate_tasks(prefs, day),
            progress.completed_task_ids,
            streak=progress.streak,
            last_reset_date=progress.last_reset_date,
            last_streak_date=progress.last_streak_date,
        )

    # ---------------------------------------------------------------------
    # Day boundary
    # ---------------------------------------------------------------------
    def ensure_reset(self, user_id: str, today: Optional[date] = None) -> bool:
        """
        Run the midnight reset if the stored reset date is not ``today``.

        Idempotent: only the first call on a given day changes anything.
        """
        day = self.current_day(today)
        with self.store.lock(user_id):
            progress = self.store.load_progress(user_id, refresh=True)
            tracker = CompletionTracker(
                streak=progress.streak,
                last_reset_date=progress.last_reset_date,
                last_streak_date=progress.last_streak_date,
            )
            if not tracker.check_midnight_reset(day):
                return False

            self.store.save_progress(user_id, {
                "lastResetDate": date_key(day),
                "completedTaskIds": [],
            })
            return True

    def today(self, user_id: str, today: Optional[date] = None) -> DailySnapshot:
        day = self.current_day(today)
        with self.store.lock(user_id):
            self.ensure_reset(user_id, day)
            prefs = self.store.load_preferences(user_id, refresh=True)
            progress = self.store.load_progress(user_id)
            tracker = self._tracker(prefs, progress, day)
            return DailySnapshot(day=day, tasks=tracker.tasks, streak=tracker.streak)

    # ---------------------------------------------------------------------
    # Completion
    # ---------------------------------------------------------------------
    def complete_task(self, user_id: str, task_id: str, today: Optional[date] = None) -> CompletionOutcome:
        """
        Mark a task done, award its XP and bump the streak when the day is done.

        All resulting changes go out in a single merge write while the user's
        lock is held. Unknown or already completed ids change nothing.
        """
        day = self.current_day(today)
        with self.store.lock(user_id):
            self.ensure_reset(user_id, day)
            prefs = self.store.load_preferences(user_id, refresh=True)
            progress = self.store.load_progress(user_id)
            tracker = self._tracker(prefs, progress, day)

            result = tracker.complete(task_id)
            if not result.changed:
                return CompletionOutcome(
                    task_id=task_id,
                    changed=False,
                    total_xp=progress.total_xp,
                    streak=progress.streak,
                    rank=current_rank(progress.total_xp).name,
                )

            task = result.task
            skill = progress.skills.get(task.skill, SkillState())
            updated_skill = add_skill_xp(skill, task.xp)
            total_xp = progress.total_xp + task.xp
            old_rank = current_rank(progress.total_xp)
            new_rank = current_rank(total_xp)

            delta: Dict[str, Any] = {
                "xp": total_xp,
                "rank": new_rank.name,
                "completedTaskIds": tracker.completed_ids,
                "skills": {task.skill: {"level": updated_skill.level, "xp": updated_skill.xp}},
            }
            if result.streak_incremented:
                delta["streak"] = tracker.streak
                delta["lastStreakDate"] = date_key(tracker.last_streak_date or day)

            projected = ProgressState.from_document(deep_merge(progress.to_document(), delta))
            unlocked = newly_unlocked(projected, day)
            if unlocked:
                delta["achievements"] = {k: date_key(v) for k, v in unlocked.items()}

            saved = self.store.save_progress(user_id, delta)

        logger.info("%s completed %s (+%d XP, total %d)", user_id, task.name, task.xp, total_xp)
        if new_rank.id != old_rank.id:
            logger.info("%s ranked up: %s -> %s", user_id, old_rank.name, new_rank.name)
        for achievement_id in unlocked:
            logger.info("%s unlocked achievement %s", user_id, achievement_id)

        return CompletionOutcome(
            task_id=task_id,
            changed=True,
            task=task,
            xp_awarded=task.xp,
            total_xp=saved.total_xp,
            streak=saved.streak,
            all_completed=result.all_completed,
            streak_incremented=result.streak_incremented,
            rank=new_rank.name,
            rank_up=new_rank.id != old_rank.id,
            unlocked_achievements=sorted(unlocked),
        )

    def reset_streak(self, user_id: str) -> int:
        """Explicit streak reset; returns the previous streak."""
        with self.store.lock(user_id):
            progress = self.store.load_progress(user_id, refresh=True)
            self.store.save_progress(user_id, {"streak": 0, "lastStreakDate": ""})
        logger.info("%s reset streak (was %d)", user_id, progress.streak)
        return progress.streak

    # ---------------------------------------------------------------------
    # Read models
    # ---------------------------------------------------------------------
    def progress_summary(self, user_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        day = self.current_day(today)
        snapshot = self.today(user_id, day)
        progress = self.store.load_progress(user_id)
        total_xp = progress.total_xp

        return {
            "totalXP": total_xp,
            "streak": progress.streak,
            "rank": current_rank(total_xp).to_dict(),
            "nextRank": next_rank(total_xp).to_dict(),
            "progressToNextRank": progress_to_next_rank(total_xp),
            "xpDisplay": xp_display(total_xp),
            "journeyProgress": journey_progress(total_xp),
            "skills": [
                {
                    "name": name,
                    "level": progress.skills[name].level,
                    "xp": progress.skills[name].xp,
                    "progress": skill_progress(progress.skills[name].xp),
                }
                for name in SKILL_NAMES
            ],
            "bestSkill": best_skill(progress.skills),
            "attentionSkill": attention_skill(progress.skills),
            "achievements": [a.to_dict() for a in evaluate_achievements(progress, day)],
            "today": daily_completion(snapshot.tasks),
        }
