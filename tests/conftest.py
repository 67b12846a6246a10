"""测试公共配置与夹具。"""

import sys
from pathlib import Path
from unittest.mock import patch, MagicMock

import pytest

# 将 src 目录添加到 Python 路径
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

class FakeClock:
    """随 sleep 前进的假时钟。"""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.now += seconds

class FakeGpuReader:
    """按顺序返回给定功率值的 GPU 读取器。"""

    def __init__(self, readings=(50.0,)):
        self.readings = list(readings)
        self.calls = 0
        self.opened = False
        self.closed = False

    def power_watts(self):
        value = self.readings[min(self.calls, len(self.readings) - 1)]
        self.calls += 1
        return value

    def __enter__(self):
        self.opened = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

@pytest.fixture
def fake_clock():
    return FakeClock()

@pytest.fixture
def rapl_file(tmp_path):
    """创建模拟的 RAPL 能量计数器文件，初始值 1 J。"""
    path = tmp_path / "energy_uj"
    path.write_text("1000000\n")
    return path

@pytest.fixture
def mock_nvml():
    """模拟 CUDA 与 NVML 交互。"""
    with patch("torch.cuda.is_available", return_value=True), \
         patch("pynvml.nvmlInit") as mock_init, \
         patch("pynvml.nvmlDeviceGetHandleByIndex") as mock_get_handle, \
         patch("pynvml.nvmlDeviceGetName") as mock_get_name, \
         patch("pynvml.nvmlDeviceGetPowerUsage") as mock_get_power, \
         patch("pynvml.nvmlShutdown") as mock_shutdown:

        mock_get_handle.return_value = MagicMock()
        mock_get_name.return_value = b"NVIDIA GeForce RTX 4050"
        mock_get_power.return_value = 50000  # 50W in milliwatts

        yield {
            "init": mock_init,
            "get_handle": mock_get_handle,
            "get_name": mock_get_name,
            "get_power": mock_get_power,
            "shutdown": mock_shutdown,
        }

@pytest.fixture
def no_cuda():
    """模拟没有 CUDA 的机器。"""
    with patch("torch.cuda.is_available", return_value=False):
        yield

@pytest.fixture
def fake_gpu():
    return FakeGpuReader(readings=(50.0, 52.0, 54.0))
