"""功率数据 CSV 输出测试。"""

import pytest

from power_monitor.errors import ErrorKind, SeriesWriteError
from power_monitor.power_data import PowerSeries
from power_monitor.reporting.power_logger import (
    load_power_data,
    log_power_data,
    plot_power_data,
)

@pytest.fixture
def sample_series():
    series = PowerSeries()
    series.append(0.0, 50.0, 0.0)
    series.append(0.1, 52.0, 5.0)
    return series

def test_log_power_data_format(tmp_path, sample_series):
    output = tmp_path / "power.csv"
    log_power_data(str(output), sample_series)

    assert output.read_bytes() == (
        b"Time(s),GPU_Power(W),CPU_Power(W)\n"
        b"0.0,50.0,0.0\n"
        b"0.1,52.0,5.0\n"
    )

def test_empty_series_writes_header_only(tmp_path):
    output = tmp_path / "power.csv"
    log_power_data(output, PowerSeries())
    assert output.read_text() == "Time(s),GPU_Power(W),CPU_Power(W)\n"

def test_floats_use_default_repr(tmp_path):
    series = PowerSeries()
    series.append(1 / 3, 1e-7, 123456789.5)
    output = tmp_path / "power.csv"
    log_power_data(output, series)
    assert output.read_text().splitlines()[1] == f"{1 / 3!r},1e-07,123456789.5"

def test_log_power_data_is_idempotent(tmp_path, sample_series):
    output = tmp_path / "power.csv"
    log_power_data(output, sample_series)
    first = output.read_bytes()
    log_power_data(output, sample_series)
    assert output.read_bytes() == first

def test_log_power_data_overwrites(tmp_path, sample_series):
    output = tmp_path / "power.csv"
    output.write_text("old content\n" * 100)
    log_power_data(output, sample_series)
    assert "old content" not in output.read_text()
    assert len(output.read_text().splitlines()) == 3

def test_unwritable_path_raises(tmp_path, sample_series):
    with pytest.raises(SeriesWriteError) as exc_info:
        log_power_data(tmp_path / "missing_dir" / "power.csv", sample_series)
    assert exc_info.value.kind is ErrorKind.OUTPUT_UNWRITABLE
    assert isinstance(exc_info.value.__cause__, OSError)

def test_load_power_data(tmp_path, sample_series):
    output = tmp_path / "power.csv"
    log_power_data(output, sample_series)

    loaded = load_power_data(output)
    assert list(loaded.rows()) == list(sample_series.rows())

def test_load_power_data_rejects_foreign_csv(tmp_path):
    output = tmp_path / "other.csv"
    output.write_text("a,b\n1,2\n")
    with pytest.raises(ValueError):
        load_power_data(output)

def test_plot_power_data(tmp_path, sample_series):
    image = tmp_path / "power.png"
    result = plot_power_data(sample_series, image, title="test")
    assert result == str(image)
    assert image.exists()
    assert image.stat().st_size > 0
