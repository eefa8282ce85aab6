"""
Arise 异常定义模块。

定义系统中所有自定义异常的层次结构：
- AriseError: 基类，所有已知错误
- ConfigError: 配置文件错误
- PreferenceError: 用户偏好校验失败
- StateError: 进度快照/日期数据损坏

业务边界情况（缺失偏好、重复完成任务）不抛异常，只有真正非法的输入才会 fail fast。
"""
from typing import Optional


class AriseError(Exception):
    """Arise 基础异常类。

    所有系统内已知错误都继承自此类。
    捕获此类可以处理所有预期的错误情况。
    """

    def __init__(self, message: str, hint: Optional[str] = None):
        """
        Args:
            message: 错误描述
            hint: 对用户的操作建议
        """
        super().__init__(message)
        self.message = message
        self.hint = hint

    def get_user_message(self) -> str:
        """返回用户友好的错误消息。"""
        if self.hint:
            return f"{self.message}\n💡 Hint: {self.hint}"
        return self.message


class ConfigError(AriseError):
    """配置文件错误。

    当 runtime.yaml 格式错误或内容非法时抛出。
    """

    def __init__(self, message: str, config_path: Optional[str] = None):
        hint = f"Check config file: {config_path}" if config_path else "Check config file format"
        super().__init__(message, hint)
        self.config_path = config_path


class PreferenceError(AriseError):
    """Preference validation failed at the entry boundary."""

    def __init__(self, message: str, field: Optional[str] = None):
        hint = f"Fix the '{field}' preference and save again" if field else None
        super().__init__(message, hint)
        self.field = field


class StateError(AriseError):
    """状态相关错误。

    当存储的进度快照或日期字段格式错误时抛出。
    """

    def __init__(self, message: str, corrupted_data: Optional[str] = None):
        hint = "Stored progress may be corrupted, inspect the user document"
        super().__init__(message, hint)
        self.corrupted_data = corrupted_data
