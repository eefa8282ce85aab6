"""
Arise 日志配置。

所有模块通过 get_logger(name) 取得 "arise.<name>" 子 logger，
setup_logging() 只需在入口（main.py / CLI）调用一次：
- system.log: 常规运行记录，默认 INFO+，可用 ARISE_LOG_LEVEL 调整
- error.log: 只收 ERROR+
- 控制台: WARNING+

文件按 5MB 轮转，各保留 3 份。
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.paths import LOGS_DIR

ROOT_LOGGER_NAME = "arise"

MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

FILE_FORMAT = logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
CONSOLE_FORMAT = logging.Formatter("[%(levelname)s] %(name)s: %(message)s")


def _level_from_env(default: int) -> int:
    raw = os.getenv("ARISE_LOG_LEVEL", "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    # 未知名称时 getLevelName 返回字符串
    return level if isinstance(level, int) else default


def _rotating(path: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(FILE_FORMAT)
    return handler


def setup_logging(
    log_level: Optional[int] = None,
    console_level: int = logging.WARNING,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """
    配置 "arise" logger 树。重复调用时替换（并关闭）已有 handler。

    Args:
        log_level: system.log 级别；默认取 ARISE_LOG_LEVEL，否则 INFO
        console_level: 控制台级别
        log_dir: 日志目录，默认 core.paths.LOGS_DIR
    """
    log_dir = log_dir or LOGS_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(CONSOLE_FORMAT)

    root.addHandler(_rotating(log_dir / "system.log", log_level or _level_from_env(logging.INFO)))
    root.addHandler(_rotating(log_dir / "error.log", logging.ERROR))
    root.addHandler(console)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """``arise.<name>``, or the tree root when no name is given."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)
