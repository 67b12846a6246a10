"""GPU/CPU 功率采样循环。"""

import threading
import time
from typing import Any, Callable, Dict, Optional

from power_monitor.hardware_profiling.gpu_capability import (
    NvmlPowerReader,
    ensure_gpu_capability,
    get_system_info,
    release_gpu_capability,
)
from power_monitor.hardware_profiling.rapl_reader import EnergyCounterState, read_cpu_power
from power_monitor.power_data import PowerSeries
from power_monitor.toolbox.config_manager import DEFAULT_MONITOR_CONFIG, resolve_monitor_config
from power_monitor.toolbox.logger import get_logger, setup_logger

logger = get_logger(__name__)

# 固定时长采样用细粒度间隔；后台采样用粗粒度间隔，避免抢占被监控任务的 CPU
DEFAULT_SAMPLE_INTERVAL = DEFAULT_MONITOR_CONFIG["sample_interval"]
DEFAULT_BLOCK_INTERVAL = DEFAULT_MONITOR_CONFIG["block_interval"]

def _check_interval(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} 必须为正数: {value}")

class PowerSampler:
    """按固定间隔采集 GPU 与 CPU 功率。"""
    
    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        gpu_reader_factory: Callable[[], NvmlPowerReader] = NvmlPowerReader,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """初始化采样器。

        Args:
            config: 监控配置，包含以下可选字段：
                - sample_interval: 固定时长采样间隔（秒）
                - block_interval: 后台采样间隔（秒）
                - rapl_path: CPU 能量计数器路径
                - log_dir: 日志文件目录
            gpu_reader_factory: 返回 GPU 功率读取会话的工厂
            clock: 时间来源
            sleep: 两次采样之间的等待函数
        """
        self.config = resolve_monitor_config(config)
        self.sample_interval = self.config["sample_interval"]
        self.block_interval = self.config["block_interval"]
        self.rapl_path = self.config["rapl_path"]
        if self.config["log_dir"]:
            setup_logger(self.config["log_dir"])
        self.gpu_reader_factory = gpu_reader_factory
        self.clock = clock
        self.sleep = sleep

    def sample_once(
        self,
        gpu: NvmlPowerReader,
        state: EnergyCounterState,
        series: PowerSeries,
        start_time: float,
    ) -> None:
        """采集一次样本并追加到序列。"""
        elapsed = self.clock() - start_time
        gpu_power = gpu.power_watts()
        cpu_power = read_cpu_power(state, self.rapl_path, self.clock)
        series.append(elapsed, gpu_power, cpu_power)
        logger.debug(f"t={elapsed:.3f}s GPU={gpu_power:.3f}W CPU={cpu_power:.3f}W")

    def run_fixed_duration(self, duration: float, interval: Optional[float] = None) -> PowerSeries:
        """在给定时长内采样 GPU 与 CPU 功率。

        Args:
            duration: 监控总时长（秒），不得为负
            interval: 采样间隔（秒），默认使用 sample_interval

        Returns:
            PowerSeries: 采集到的功率数据

        Raises:
            ValueError: 参数无效时抛出
            CapabilityError: CUDA 或 NVML 不可用时抛出
            CounterReadError: CPU 能量计数器不可读时抛出
        """
        interval = self.sample_interval if interval is None else interval
        if duration < 0:
            raise ValueError(f"duration 不能为负数: {duration}")
        _check_interval("interval", interval)

        ensure_gpu_capability()
        logger.info(f"开始功率监控，时长 {duration}s，间隔 {interval}s，系统信息: {get_system_info()}")
        series = PowerSeries()
        state = EnergyCounterState()
        try:
            with self.gpu_reader_factory() as gpu:
                start_time = self.clock()
                while self.clock() - start_time < duration:
                    self.sample_once(gpu, state, series, start_time)
                    self.sleep(interval)
        finally:
            release_gpu_capability()

        logger.info(f"功率监控完成，共 {len(series)} 个样本")
        return series

    def run_until_signalled(
        self,
        series: PowerSeries,
        state: EnergyCounterState,
        stop_event: threading.Event,
        poll_interval: Optional[float] = None,
    ) -> PowerSeries:
        """持续采样直到 stop_event 被设置。

        Args:
            series: 追加样本的序列，只由本循环写入
            state: 本会话的 CPU 计数器状态
            stop_event: 停止信号
            poll_interval: 采样间隔（秒），默认使用 block_interval

        Returns:
            PowerSeries: 传入的 series
        """
        poll_interval = self.block_interval if poll_interval is None else poll_interval
        _check_interval("poll_interval", poll_interval)

        ensure_gpu_capability()
        try:
            with self.gpu_reader_factory() as gpu:
                start_time = self.clock()
                while not stop_event.is_set():
                    self.sample_once(gpu, state, series, start_time)
                    stop_event.wait(poll_interval)
        finally:
            release_gpu_capability()
        logger.info(f"后台采样结束，共 {len(series)} 个样本")
        return series

def run_fixed_duration(
    duration: float,
    interval: Optional[float] = None,
    config: Optional[Dict[str, Any]] = None,
) -> PowerSeries:
    """使用默认硬件在给定时长内采样。参见 PowerSampler.run_fixed_duration。"""
    return PowerSampler(config).run_fixed_duration(duration, interval)

monitor_power = run_fixed_duration
