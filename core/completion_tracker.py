"""
Completion Tracker for Arise.

Tracks which of today's tasks are done. A task moves one way only,
assigned -> completed. Emptying the assigned set bumps the streak once per
day; a date change clears the completed set and regenerates the day.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, List, Optional

from core.clock import date_key
from core.logger import get_logger
from core.models import Task

logger = get_logger("completion_tracker")

TaskFactory = Callable[[date], List[Task]]


@dataclass
class CompletionResult:
    """Outcome of a single ``complete`` call."""
    remaining: List[Task]
    completed: List[Task]
    task: Optional[Task] = None          # the task that moved, None on a no-op
    all_completed: bool = False          # this call emptied the assigned set
    streak_incremented: bool = False

    @property
    def changed(self) -> bool:
        return self.task is not None


@dataclass
class CompletionTracker:
    """
    In-memory assigned/completed partition of one day's tasks.

    ``on_all_tasks_complete`` is called with the new streak value when the
    streak is bumped.
    """
    assigned: List[Task] = field(default_factory=list)
    completed: List[Task] = field(default_factory=list)
    streak: int = 0
    last_reset_date: Optional[date] = None
    last_streak_date: Optional[date] = None
    on_all_tasks_complete: Optional[Callable[[int], None]] = None

    @classmethod
    def for_day(
        cls,
        tasks: Iterable[Task],
        completed_ids: Iterable[str] = (),
        **kwargs,
    ) -> "CompletionTracker":
        """Rebuild the partition from a generated task list and stored completed ids."""
        done = set(completed_ids)
        tracker = cls(**kwargs)
        for task in tasks:
            if task.id in done:
                task.is_completed = True
                tracker.completed.append(task)
            else:
                task.is_completed = False
                tracker.assigned.append(task)
        return tracker

    @property
    def tasks(self) -> List[Task]:
        return self.assigned + self.completed

    @property
    def completed_ids(self) -> List[str]:
        return [t.id for t in self.completed]

    def _find_assigned(self, task_id: str) -> Optional[Task]:
        for task in self.assigned:
            if task.id == task_id:
                return task
        return None

    def complete(self, task_id: str) -> CompletionResult:
        """
        Move a task from assigned to completed.

        Unknown or already completed ids are a no-op.
        """
        task = self._find_assigned(task_id)
        if task is None:
            logger.debug("Ignoring completion of unassigned task %s", task_id)
            return CompletionResult(remaining=list(self.assigned), completed=list(self.completed))

        self.assigned.remove(task)
        task.is_completed = True
        self.completed.append(task)

        result = CompletionResult(
            remaining=list(self.assigned),
            completed=list(self.completed),
            task=task,
            all_completed=not self.assigned,
        )
        if result.all_completed:
            result.streak_incremented = self._award_streak()
        return result

    def _award_streak(self) -> bool:
        day = self.last_reset_date
        if day is not None and self.last_streak_date == day:
            return False

        self.streak += 1
        self.last_streak_date = day
        logger.info("All tasks complete for %s, streak now %d",
                    date_key(day) if day else "?", self.streak)
        if self.on_all_tasks_complete is not None:
            self.on_all_tasks_complete(self.streak)
        return True

    def check_midnight_reset(self, today: date, generate: Optional[TaskFactory] = None) -> bool:
        """
        Reset when ``today`` differs from the last reset date.

        On reset the completed set is cleared, ``last_reset_date`` becomes
        ``today`` and, when given, ``generate(today)`` supplies the new
        assigned set. Returns False on the same day.
        """
        if today == self.last_reset_date:
            return False

        previous = self.last_reset_date
        self.completed = []
        self.assigned = []
        if generate is not None:
            self.assigned = list(generate(today))
            for task in self.assigned:
                task.is_completed = False
        self.last_reset_date = today
        logger.info(
            "Midnight reset %s -> %s, %d tasks assigned",
            date_key(previous) if previous else "never", date_key(today), len(self.assigned),
        )
        return True

    def reset_streak(self) -> None:
        self.streak = 0
        self.last_streak_date = None
