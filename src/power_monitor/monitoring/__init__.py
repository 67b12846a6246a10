"""功率采样与后台监控。"""

from power_monitor.power_data import PowerSeries
from .sampler import (
    DEFAULT_BLOCK_INTERVAL,
    DEFAULT_SAMPLE_INTERVAL,
    PowerSampler,
    monitor_power,
    run_fixed_duration,
)
from .block_monitor import PowerMonitorBlock, monitor_during, monitor_power_block

__all__ = [
    "PowerSeries",
    "DEFAULT_BLOCK_INTERVAL",
    "DEFAULT_SAMPLE_INTERVAL",
    "PowerSampler",
    "monitor_power",
    "run_fixed_duration",
    "PowerMonitorBlock",
    "monitor_during",
    "monitor_power_block",
]
