"""
Daily Tick Scheduler for Arise.

Detects local calendar date changes and runs the midnight reset: clear the
completed set, store the new reset date, regenerate the day's tasks.

No alarm is needed at midnight. The presentation layer calls
``on_app_foreground`` whenever the app comes to the front, and ``run`` polls
on a fixed interval for long-lived processes. Every entry point is idempotent
within a day.

事件类型:
- TimeTick: 日期变更
"""
import os
import threading
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from core.clock import date_key
from core.config_manager import config
from core.daily_service import DailyService
from core.logger import get_logger
from core.models import ProgressState

logger = get_logger("scheduler")


class EventType(Enum):
    """调度器生成的事件类型。"""
    TIME_TICK = "time_tick"


def watchers_disabled() -> bool:
    return os.getenv("ARISE_DISABLE_WATCHERS", "").lower() in {"1", "true", "yes"}


def daily_tick(progress: ProgressState, today: date) -> List[Dict[str, Any]]:
    """
    执行每日时间推进并生成相关事件。

    Args:
        progress: 当前进度快照。
        today: 本地日历日期。

    Returns:
        事件列表；今日已推进过则为空。
    """
    if progress.last_reset_date == today:
        return []

    previous = progress.last_reset_date
    return [{
        "type": EventType.TIME_TICK.value,
        "date": date_key(today),
        "previous_date": date_key(previous) if previous else "",
        "timestamp": datetime.now().isoformat(),
    }]


class MidnightResetScheduler:
    """Runs the day-boundary reset for one user."""

    def __init__(
        self,
        service: DailyService,
        user_id: str,
        clock: Optional[Callable[[], date]] = None,
    ):
        self.service = service
        self.user_id = user_id
        self._clock = clock or service.current_day

    def check(self, today: Optional[date] = None) -> bool:
        """Reset if the day changed; True when a reset happened."""
        day = today or self._clock()
        progress = self.service.store.load_progress(self.user_id, refresh=True)
        events = daily_tick(progress, day)
        if not events:
            return False

        reset = self.service.ensure_reset(self.user_id, day)
        if reset:
            for event in events:
                logger.info("[Scheduler] %s %s -> %s", event["type"],
                            event["previous_date"] or "never", event["date"])
        return reset

    def on_app_foreground(self, today: Optional[date] = None) -> bool:
        return self.check(today)

    def on_timer(self, today: Optional[date] = None) -> bool:
        return self.check(today)

    def run(self, stop_event: threading.Event, interval_seconds: Optional[float] = None) -> None:
        """Poll until ``stop_event`` is set. Does nothing when watchers are disabled."""
        if watchers_disabled():
            logger.info("[Scheduler] Watchers disabled, not polling")
            return

        interval = interval_seconds or config.SCHEDULER_POLL_SECONDS
        logger.info("[Scheduler] Polling every %ss for %s", interval, self.user_id)
        while not stop_event.is_set():
            self.on_timer()
            stop_event.wait(interval)

    def start(self, interval_seconds: Optional[float] = None) -> threading.Event:
        """Start polling on a daemon thread; set the returned event to stop it."""
        stop_event = threading.Event()
        thread = threading.Thread(
            target=self.run,
            args=(stop_event, interval_seconds),
            name=f"midnight-reset-{self.user_id}",
            daemon=True,
        )
        thread.start()
        return stop_event
