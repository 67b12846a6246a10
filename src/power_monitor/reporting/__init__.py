"""功率数据输出。"""

from .power_logger import HEADER, load_power_data, log_power_data, plot_power_data

__all__ = ["HEADER", "load_power_data", "log_power_data", "plot_power_data"]
