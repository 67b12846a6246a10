# power_monitor/src/power_monitor/reporting/power_logger.py
import csv
from pathlib import Path
from typing import Optional, Tuple, Union

import matplotlib
matplotlib.use('Agg')  # 使用非GUI后端
import matplotlib.pyplot as plt
import pandas as pd

from power_monitor.errors import SeriesWriteError
from power_monitor.power_data import COLUMNS, PowerSeries
from power_monitor.toolbox.logger import get_logger

logger = get_logger(__name__)

HEADER = COLUMNS

def log_power_data(file_name: Union[str, Path], power_data: PowerSeries) -> None:
    """将功率数据写入 CSV 文件。

    文件被覆盖写入：表头 Time(s),GPU_Power(W),CPU_Power(W)，之后每个样本一行。
    浮点数使用 Python 默认的 repr 格式。

    Args:
        file_name: CSV 文件路径
        power_data: 要写出的功率数据

    Raises:
        SeriesWriteError: 文件无法创建或写入时抛出
    """
    try:
        with open(file_name, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(HEADER)
            writer.writerows(power_data.rows())
    except OSError as e:
        logger.error(f"写入功率数据失败: {e}")
        raise SeriesWriteError(
            f"Unable to write power data to {file_name}: {e}.",
            hint="Check that the output directory exists and is writable.",
        ) from e
    logger.debug(f"已写入 {len(power_data)} 行到 {file_name}")

def load_power_data(file_name: Union[str, Path]) -> PowerSeries:
    """从 log_power_data 写出的 CSV 文件读回功率数据。

    Args:
        file_name: CSV 文件路径

    Returns:
        PowerSeries: 读取到的功率数据
    """
    df = pd.read_csv(file_name, float_precision="round_trip")
    missing = [column for column in HEADER if column not in df.columns]
    if missing:
        raise ValueError(f"{file_name}: 缺少列 {missing}")
    series = PowerSeries()
    for t, gpu, cpu in df[list(HEADER)].itertuples(index=False, name=None):
        series.append(t, gpu, cpu)
    return series

def plot_power_data(
    power_data: PowerSeries,
    output_file: Union[str, Path],
    title: Optional[str] = None,
    figsize: Tuple[float, float] = (10, 6),
) -> str:
    """绘制 GPU 与 CPU 功率随时间变化的曲线。

    Args:
        power_data: 功率数据
        output_file: 图片输出路径
        title: 图表标题
        figsize: 图表尺寸

    Returns:
        str: 图片路径
    """
    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.plot(power_data.time, power_data.gpu_power, label="GPU")
        ax.plot(power_data.time, power_data.cpu_power, label="CPU")
        ax.set_xlabel(HEADER[0])
        ax.set_ylabel("Power (W)")
        ax.set_title(title or "Power Consumption")
        ax.legend()
        ax.grid(True)
        fig.savefig(output_file)
    finally:
        plt.close(fig)
    logger.info(f"功率曲线已保存到 {output_file}")
    return str(output_file)
