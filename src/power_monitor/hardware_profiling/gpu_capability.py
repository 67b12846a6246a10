"""GPU 加速与功率管理能力探测，以及 NVML 功率读取。"""

import platform
from typing import Dict, Any

import psutil
import pynvml
import torch

from power_monitor.errors import CapabilityError, ErrorKind
from power_monitor.toolbox.logger import get_logger

logger = get_logger(__name__)

# 只监控单块 GPU
GPU_DEVICE_INDEX = 0

def has_accelerator() -> bool:
    """检查 CUDA 是否可用。"""
    return torch.cuda.is_available()

def has_power_management() -> bool:
    """检查 NVML 是否可用。

    探测结束后会关闭 NVML，不留下任何状态。
    """
    try:
        pynvml.nvmlInit()
    except pynvml.NVMLError as e:
        logger.warning(f"NVML 不可用: {e}")
        return False
    pynvml.nvmlShutdown()
    return True

def ensure_gpu_capability() -> None:
    """确认 GPU 功率监控所需的能力均可用。

    Raises:
        CapabilityError: CUDA 或 NVML 不可用时抛出
    """
    if not has_accelerator():
        logger.error("CUDA 不可用")
        raise CapabilityError(
            "CUDA is not available.",
            ErrorKind.NO_ACCELERATOR,
            hint="Ensure that the CUDA toolkit is installed.",
        )
    if not has_power_management():
        logger.error("NVML 不可用")
        raise CapabilityError(
            "NVML is not available.",
            ErrorKind.NO_POWER_MANAGEMENT,
            hint="Ensure that the NVIDIA driver is installed.",
        )

def release_gpu_capability() -> None:
    """释放 GPU 监控能力。目前无需清理。"""
    logger.debug("GPU 监控能力已释放")

def get_system_info() -> Dict[str, Any]:
    """获取系统信息。
    
    Returns:
        Dict[str, Any]: 系统信息字典
    """
    return {
        "os": platform.system(),
        "os_version": platform.version(),
        "cpu_count": psutil.cpu_count(),
        "memory_total": psutil.virtual_memory().total,
    }

class NvmlPowerReader:
    """读取单块 GPU 瞬时功率的 NVML 会话。

    用法::

        with NvmlPowerReader() as gpu:
            watts = gpu.power_watts()
    """

    def __init__(self, device_index: int = GPU_DEVICE_INDEX):
        self.device_index = device_index
        self.handle = None
        self.nvml_initialized = False

    def open(self) -> "NvmlPowerReader":
        """初始化 NVML 并获取设备句柄。"""
        pynvml.nvmlInit()
        self.nvml_initialized = True
        try:
            self.handle = pynvml.nvmlDeviceGetHandleByIndex(self.device_index)
        except pynvml.NVMLError:
            self.close()
            raise
        device_name = pynvml.nvmlDeviceGetName(self.handle)
        if isinstance(device_name, bytes):
            device_name = device_name.decode()
        logger.info(f"NVML 初始化完成，设备 {self.device_index}: {device_name}")
        return self

    def power_watts(self) -> float:
        """测量 GPU 的当前功率。

        Returns:
            float: 当前功率（瓦特）
        """
        if self.handle is None:
            raise RuntimeError("NVML 会话未打开")
        return pynvml.nvmlDeviceGetPowerUsage(self.handle) / 1000.0  # 毫瓦转换为瓦特

    def close(self) -> None:
        """关闭 NVML。"""
        if self.nvml_initialized:
            try:
                pynvml.nvmlShutdown()
            except pynvml.NVMLError as e:
                logger.warning(f"关闭 NVML 时出错: {e}")
            finally:
                self.nvml_initialized = False
        self.handle = None

    def __enter__(self) -> "NvmlPowerReader":
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
