"""后台块监控测试。"""

import time
from unittest.mock import MagicMock

import pytest

from power_monitor.errors import CapabilityError, CounterReadError
from power_monitor.monitoring.block_monitor import PowerMonitorBlock, monitor_during
from power_monitor.reporting.power_logger import load_power_data

HEADER_LINE = "Time(s),GPU_Power(W),CPU_Power(W)"

@pytest.fixture
def monitor_config(rapl_file):
    return {"rapl_path": str(rapl_file), "block_interval": 0.01}

def test_monitor_during_writes_csv(mock_nvml, monitor_config, tmp_path):
    output = tmp_path / "block.csv"

    def work():
        time.sleep(0.05)
        return "done"

    assert monitor_during(work, str(output), config=monitor_config) == "done"

    lines = output.read_text().splitlines()
    assert lines[0] == HEADER_LINE
    series = load_power_data(output)
    assert len(series) >= 1
    assert series.cpu_power[0] == 0.0
    assert series.gpu_power[0] == pytest.approx(50.0)
    assert all(t >= 0 for t in series.time)

def test_context_manager_exposes_results(mock_nvml, monitor_config, tmp_path):
    output = tmp_path / "block.csv"
    with PowerMonitorBlock(output, config=monitor_config) as block:
        time.sleep(0.03)

    assert not block.monitor_thread.is_alive()
    assert block.stop_event.is_set()
    assert block.duration >= 0.03
    assert len(output.read_text().splitlines()) == len(block.series) + 1

def test_work_failure_still_joins_and_writes(mock_nvml, monitor_config, tmp_path):
    output = tmp_path / "block.csv"
    block = PowerMonitorBlock(output, config=monitor_config)

    with pytest.raises(ZeroDivisionError):
        with block:
            time.sleep(0.03)
            1 / 0

    assert not block.monitor_thread.is_alive()
    assert output.exists()
    assert output.read_text().splitlines()[0] == HEADER_LINE
    assert len(load_power_data(output)) == len(block.series)

def test_monitor_during_propagates_work_error(mock_nvml, monitor_config, tmp_path):
    output = tmp_path / "block.csv"

    def work():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        monitor_during(work, output, config=monitor_config)
    assert output.exists()

def test_missing_cuda_fails_before_work(no_cuda, monitor_config, tmp_path):
    output = tmp_path / "block.csv"
    work = MagicMock()

    with pytest.raises(CapabilityError):
        monitor_during(work, output, config=monitor_config)

    work.assert_not_called()
    assert not output.exists()

def test_sampler_failure_raised_after_write(mock_nvml, tmp_path):
    output = tmp_path / "block.csv"
    config = {"rapl_path": str(tmp_path / "missing"), "block_interval": 0.01}

    with pytest.raises(CounterReadError):
        monitor_during(lambda: time.sleep(0.02), output, config=config)

    assert output.read_text() == HEADER_LINE + "\n"

def test_work_error_takes_precedence_over_sampler_error(mock_nvml, tmp_path):
    output = tmp_path / "block.csv"
    config = {"rapl_path": str(tmp_path / "missing"), "block_interval": 0.01}

    def work():
        time.sleep(0.02)
        raise KeyError("work")

    with pytest.raises(KeyError):
        monitor_during(work, output, config=config)

def test_poll_interval_must_be_positive(tmp_path):
    with pytest.raises(ValueError):
        PowerMonitorBlock(tmp_path / "block.csv", poll_interval=0)

def test_block_cannot_be_started_twice(mock_nvml, monitor_config, tmp_path):
    block = PowerMonitorBlock(tmp_path / "block.csv", config=monitor_config)
    block.start()
    try:
        with pytest.raises(RuntimeError):
            block.start()
    finally:
        block.stop()

def test_stop_without_start(tmp_path):
    with pytest.raises(RuntimeError):
        PowerMonitorBlock(tmp_path / "block.csv").stop()

def test_stop_raises_sampler_error_after_write(mock_nvml, tmp_path):
    output = tmp_path / "block.csv"
    config = {"rapl_path": str(tmp_path / "missing"), "block_interval": 0.01}
    block = PowerMonitorBlock(output, config=config)

    block.start()
    time.sleep(0.05)
    with pytest.raises(CounterReadError):
        block.stop()

    assert not block.monitor_thread.is_alive()
    assert output.read_text() == HEADER_LINE + "\n"

def test_sampler_and_config_are_exclusive(monitor_config, tmp_path):
    with pytest.raises(ValueError):
        PowerMonitorBlock(tmp_path / "block.csv", config=monitor_config, sampler=MagicMock())
