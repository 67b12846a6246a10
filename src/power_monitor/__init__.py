"""GPU 与 CPU 功率监控库。"""

from .errors import (
    CapabilityError,
    CounterReadError,
    ErrorKind,
    PowerMonitorError,
    SeriesWriteError,
)
from .power_data import PowerSeries
from .hardware_profiling import EnergyCounterReader, EnergyCounterState, read_cpu_power
from .reporting import load_power_data, log_power_data, plot_power_data
from .monitoring import (
    PowerMonitorBlock,
    PowerSampler,
    monitor_during,
    monitor_power,
    monitor_power_block,
    run_fixed_duration,
)

__all__ = [
    "CapabilityError",
    "CounterReadError",
    "ErrorKind",
    "PowerMonitorError",
    "SeriesWriteError",
    "PowerSeries",
    "EnergyCounterReader",
    "EnergyCounterState",
    "read_cpu_power",
    "load_power_data",
    "log_power_data",
    "plot_power_data",
    "PowerMonitorBlock",
    "PowerSampler",
    "monitor_during",
    "monitor_power",
    "monitor_power_block",
    "run_fixed_duration",
]

__version__ = "0.1.0"
