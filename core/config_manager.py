"""
Configuration Manager for Arise.

集中管理系统可调参数。
业务常量（任务奖励、段位表、技能等级表）是固定规则，放在各自模块中；
这里只放运行时可调整的经验值。

使用方式:
    from core.config_manager import config
    interval = config.SCHEDULER_POLL_SECONDS
"""
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from core.exceptions import ConfigError
from core.logger import get_logger
from core.paths import CONFIG_DIR

RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

logger = get_logger("config")


@dataclass
class SystemConfig:
    """
    系统运行时常量配置。

    所有值均为经验值，可通过 config/runtime.yaml 覆盖。
    """

    # === 调度 ===

    # 午夜重置轮询间隔（秒）
    # 经验值依据：日期边界检测不需要秒级精度，1 分钟足够
    # 调整建议：移动端前台唤醒已会触发检查，可放宽至 300
    SCHEDULER_POLL_SECONDS: int = 60

    # === 偏好录入 ===

    # 每位用户最多可选的额外活动数
    # 经验值依据：原应用的 "Activities (Max 2)" 限制
    MAX_SELECTED_ACTIVITIES: int = 2

    # 睡眠时间取整粒度（分钟）
    # 经验值依据：就寝提醒以一刻钟为单位更易执行
    BEDTIME_ROUNDING_MINUTES: int = 15

    # === 存储 ===

    # 单用户部署时的默认用户 ID（CLI 与本地调试使用）
    DEFAULT_USER_ID: str = "local"


def _load_runtime_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """加载运行时配置覆盖（如果存在）。"""
    path = path or RUNTIME_CONFIG_PATH
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"Cannot read runtime config: {e}", config_path=str(path))

    if not isinstance(data, dict):
        raise ConfigError("Runtime config must be a mapping", config_path=str(path))
    return data


def get_config(path: Optional[Path] = None) -> SystemConfig:
    """
    获取系统配置实例。

    优先级：runtime.yaml > 默认值
    """
    base = SystemConfig()
    overrides = _load_runtime_config(path)
    known = {f.name for f in fields(base)}

    for key, value in overrides.items():
        if key not in known:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        expected = type(getattr(base, key))
        if not isinstance(value, expected):
            raise ConfigError(
                f"Config key {key} expects {expected.__name__}, got {type(value).__name__}",
                config_path=str(path or RUNTIME_CONFIG_PATH),
            )
        setattr(base, key, value)

    return base


# 全局配置实例（单例模式）
config = get_config()
