"""基于 Linux RAPL sysfs 接口的 CPU 功率读取。"""

import time
from dataclasses import dataclass
from typing import Callable

from power_monitor.errors import CounterReadError
from power_monitor.toolbox.logger import get_logger

logger = get_logger(__name__)

DEFAULT_RAPL_PATH = "/sys/class/powercap/intel-rapl:0/energy_uj"
MICROJOULES_PER_JOULE = 1e6

@dataclass
class EnergyCounterState:
    """两次读数之间保存的计数器状态。

    Attributes:
        previous_energy_joules: 上一次读数（焦耳）
        previous_timestamp: 上一次读数的时间（秒）
        initialized: 是否已有第一次读数
    """
    previous_energy_joules: float = 0.0
    previous_timestamp: float = 0.0
    initialized: bool = False

    def update(self, energy_joules: float, timestamp: float) -> None:
        self.previous_energy_joules = energy_joules
        self.previous_timestamp = timestamp
        self.initialized = True

def read_energy_joules(rapl_path: str = DEFAULT_RAPL_PATH) -> float:
    """读取 CPU 封装 0 的累计能耗。

    Args:
        rapl_path: 能量计数器文件路径

    Returns:
        float: 累计能耗（焦耳）

    Raises:
        CounterReadError: 文件无法打开、读取或解析时抛出
    """
    try:
        with open(rapl_path, "r", encoding="utf-8") as f:
            microjoules = int(f.readline().strip())
    except (OSError, ValueError) as e:
        logger.error(f"读取 RAPL 计数器失败: {e}")
        raise CounterReadError(
            f"Unable to read CPU power from {rapl_path}: {e}.",
            hint="Ensure RAPL is enabled.",
        ) from e
    return microjoules / MICROJOULES_PER_JOULE

def read_cpu_power(
    state: EnergyCounterState,
    rapl_path: str = DEFAULT_RAPL_PATH,
    clock: Callable[[], float] = time.time,
) -> float:
    """根据两次计数器读数计算 CPU 平均功率。

    第一次调用只记录基准并返回 0.0。之后每次返回自上次读数以来的
    平均功率，并把当前读数作为新的基准。计数器回绕或时间间隔不为正
    时记录警告、重置基准并返回 0.0。

    Args:
        state: 本次监控会话的计数器状态
        rapl_path: 能量计数器文件路径
        clock: 时间来源

    Returns:
        float: CPU 功率（瓦特）

    Raises:
        CounterReadError: 计数器不可读时抛出
    """
    current_energy = read_energy_joules(rapl_path)
    current_time = clock()

    if not state.initialized:
        state.update(current_energy, current_time)
        return 0.0

    delta_energy = current_energy - state.previous_energy_joules
    delta_time = current_time - state.previous_timestamp
    state.update(current_energy, current_time)

    if delta_energy < 0:
        logger.warning(f"RAPL 计数器回绕或重置 (delta={delta_energy:.6f} J)，重置基准")
        return 0.0
    if delta_time <= 0:
        logger.warning(f"采样时间间隔无效 (delta={delta_time:.6f} s)，跳过本次功率计算")
        return 0.0
    return delta_energy / delta_time

class EnergyCounterReader:
    """持有自身状态的 CPU 功率读取器。"""

    def __init__(self, rapl_path: str = DEFAULT_RAPL_PATH, clock: Callable[[], float] = time.time):
        self.rapl_path = rapl_path
        self.clock = clock
        self.state = EnergyCounterState()

    def read(self) -> float:
        return read_cpu_power(self.state, self.rapl_path, self.clock)
