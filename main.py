"""
Arise web service launcher.

Serves the API with uvicorn and, unless ARISE_DISABLE_WATCHERS is set, polls
for the day boundary of the default user in the background so the midnight
reset also happens while nobody has the app open.

Environment:
    ARISE_HOST, ARISE_PORT   bind address (default 0.0.0.0:8010)
    ARISE_RELOAD             restart on source changes
"""
import os

import uvicorn

from core.config_manager import config
from core.logger import get_logger, setup_logging
from scheduler.daily_tick import MidnightResetScheduler
from web.backend.deps import get_service

RELOAD_DIRS = ["web", "core", "scheduler"]


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").lower() in {"1", "true", "yes"}


def main():
    setup_logging()
    logger = get_logger("main")

    host = os.getenv("ARISE_HOST", "0.0.0.0")
    port = int(os.getenv("ARISE_PORT", "8010"))
    reload_enabled = _env_flag("ARISE_RELOAD")

    stop_polling = MidnightResetScheduler(get_service(), config.DEFAULT_USER_ID).start()
    logger.info("Serving Arise API on %s:%d (reload=%s)", host, port, reload_enabled)
    try:
        uvicorn.run(
            "web.backend.app:app",
            host=host,
            port=port,
            reload=reload_enabled,
            reload_dirs=RELOAD_DIRS if reload_enabled else None,
        )
    finally:
        stop_polling.set()


if __name__ == "__main__":
    main()
