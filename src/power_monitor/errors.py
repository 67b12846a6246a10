"""功率监控的错误类型。"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """错误类别。"""

    NO_ACCELERATOR = "no_accelerator"
    NO_POWER_MANAGEMENT = "no_power_management"
    COUNTER_UNAVAILABLE = "counter_unavailable"
    OUTPUT_UNWRITABLE = "output_unwritable"


class PowerMonitorError(Exception):
    """所有功率监控错误的基类。

    Args:
        message: 错误描述
        kind: 错误类别
        hint: 修复建议
    """

    def __init__(self, message: str, kind: ErrorKind, hint: Optional[str] = None):
        self.kind = kind
        self.hint = hint
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)


class CapabilityError(PowerMonitorError):
    """GPU 加速或功率管理能力不可用。"""


class CounterReadError(PowerMonitorError):
    """CPU 能量计数器无法读取或解析。"""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ErrorKind.COUNTER_UNAVAILABLE, hint)


class SeriesWriteError(PowerMonitorError):
    """功率数据文件无法写入。"""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message, ErrorKind.OUTPUT_UNWRITABLE, hint)
