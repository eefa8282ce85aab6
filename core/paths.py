"""
Where Arise keeps user documents, logs and runtime config.
"""
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _dir_from_env(var: str, default: Path) -> Path:
    raw = os.getenv(var, "").strip()
    return Path(raw).expanduser() if raw else default


def get_data_dir() -> Path:
    """User documents live under ``ARISE_DATA_DIR`` when set, else ``<project>/data``."""
    return _dir_from_env("ARISE_DATA_DIR", PROJECT_ROOT / "data")


def get_logs_dir() -> Path:
    return _dir_from_env("ARISE_LOG_DIR", PROJECT_ROOT / "logs")


DATA_DIR = get_data_dir()
USERS_DIR = DATA_DIR / "users"
LOGS_DIR = get_logs_dir()
CONFIG_DIR = PROJECT_ROOT / "config"
