"""硬件功率读取模块。"""

from .gpu_capability import (
    GPU_DEVICE_INDEX,
    NvmlPowerReader,
    ensure_gpu_capability,
    get_system_info,
    has_accelerator,
    has_power_management,
    release_gpu_capability,
)
from .rapl_reader import (
    DEFAULT_RAPL_PATH,
    EnergyCounterReader,
    EnergyCounterState,
    read_cpu_power,
    read_energy_joules,
)

__all__ = [
    "GPU_DEVICE_INDEX",
    "NvmlPowerReader",
    "ensure_gpu_capability",
    "get_system_info",
    "has_accelerator",
    "has_power_management",
    "release_gpu_capability",
    "DEFAULT_RAPL_PATH",
    "EnergyCounterReader",
    "EnergyCounterState",
    "read_cpu_power",
    "read_energy_joules",
]
