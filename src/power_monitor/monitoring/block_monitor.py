"""在一段代码执行期间后台监控功率。"""

import threading
import time
from typing import Any, Callable, Dict, Optional, TypeVar

from power_monitor.hardware_profiling.gpu_capability import ensure_gpu_capability
from power_monitor.hardware_profiling.rapl_reader import EnergyCounterState
from power_monitor.power_data import PowerSeries
from power_monitor.monitoring.sampler import PowerSampler
from power_monitor.reporting.power_logger import log_power_data
from power_monitor.toolbox.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

class PowerMonitorBlock:
    """监控 with 代码块执行期间的 GPU 与 CPU 功率。

    进入时启动一个后台采样线程，退出时（无论代码块是否抛出异常）
    设置停止信号、等待线程结束，然后把已采集的数据写入 CSV。
    代码块中的异常不会被吞掉。

    用法::

        with PowerMonitorBlock("output.csv"):
            run_workload()
    """

    def __init__(
        self,
        output_path: str,
        poll_interval: Optional[float] = None,
        config: Optional[Dict[str, Any]] = None,
        sampler: Optional[PowerSampler] = None,
    ):
        """初始化块监控器。

        Args:
            output_path: 输出 CSV 文件路径
            poll_interval: 后台采样间隔（秒），默认使用配置中的 block_interval
            config: 监控配置
            sampler: 自定义采样器，不能与 config 同时给出
        """
        if sampler is not None and config is not None:
            raise ValueError("sampler 与 config 不能同时指定")
        self.output_path = output_path
        self.sampler = sampler or PowerSampler(config)
        self.poll_interval = self.sampler.block_interval if poll_interval is None else poll_interval
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval 必须为正数: {self.poll_interval}")
        self.series = PowerSeries()
        self.state = EnergyCounterState()
        self.stop_event = threading.Event()
        self.monitor_thread = None
        self.sampler_error = None
        self.duration = None
        self._block_start = None

    def _run_sampler(self) -> None:
        try:
            self.sampler.run_until_signalled(
                self.series, self.state, self.stop_event, self.poll_interval
            )
        except Exception as e:
            logger.error(f"后台采样失败: {e}")
            self.sampler_error = e

    def start(self) -> "PowerMonitorBlock":
        """启动后台采样线程。

        Raises:
            CapabilityError: CUDA 或 NVML 不可用时抛出，此时不会启动线程或写文件
        """
        if self.monitor_thread is not None:
            raise RuntimeError("功率监控已启动")
        ensure_gpu_capability()
        logger.info("Starting power monitoring...")
        self.monitor_thread = threading.Thread(
            target=self._run_sampler, name="power-monitor", daemon=True
        )
        self.monitor_thread.start()
        self._block_start = time.time()
        return self

    def stop(self) -> PowerSeries:
        """停止采样、等待线程结束并写出数据。

        Returns:
            PowerSeries: 已采集的功率数据

        Raises:
            后台采样线程中的异常，在数据写出之后重新抛出
        """
        if self.monitor_thread is None:
            raise RuntimeError("功率监控未启动")
        self.duration = time.time() - self._block_start
        logger.info(f"Code execution completed. Duration: {self.duration} seconds.")
        self.stop_event.set()
        self.monitor_thread.join()
        log_power_data(self.output_path, self.series)
        logger.info(f"功率数据已写入 {self.output_path}，共 {len(self.series)} 个样本")
        if self.sampler_error is not None:
            raise self.sampler_error
        return self.series

    def __enter__(self) -> "PowerMonitorBlock":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            self.stop()
        except Exception:
            if exc_type is None:
                raise
            logger.exception("停止功率监控失败")
        return False

monitor_power_block = PowerMonitorBlock

def monitor_during(
    work: Callable[[], T],
    output_path: str,
    poll_interval: Optional[float] = None,
    config: Optional[Dict[str, Any]] = None,
) -> T:
    """执行 work 并在其运行期间监控功率，结束后写出 CSV。

    Args:
        work: 要监控的无参可调用对象，在调用方线程中同步执行
        output_path: 输出 CSV 文件路径
        poll_interval: 后台采样间隔（秒）
        config: 监控配置

    Returns:
        work 的返回值

    Raises:
        CapabilityError: CUDA 或 NVML 不可用时在执行 work 之前抛出
        work 抛出的任何异常，在数据写出之后重新抛出
    """
    with PowerMonitorBlock(output_path, poll_interval=poll_interval, config=config):
        return work()
