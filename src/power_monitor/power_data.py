"""功率时间序列。"""

from typing import Iterator, List, Tuple

import pandas as pd

COLUMNS = ("Time(s)", "GPU_Power(W)", "CPU_Power(W)")

class PowerSeries:
    """一次监控会话采集到的功率数据。

    三个列表始终等长：只能通过 append 同时追加。

    Attributes:
        time: 采样时刻，距采样开始的秒数
        gpu_power: GPU 功率（瓦特）
        cpu_power: CPU 功率（瓦特），第一个值为 0.0
    """

    def __init__(self):
        self.time: List[float] = []
        self.gpu_power: List[float] = []
        self.cpu_power: List[float] = []

    def append(self, t: float, gpu: float, cpu: float) -> None:
        self.time.append(float(t))
        self.gpu_power.append(float(gpu))
        self.cpu_power.append(float(cpu))

    def rows(self) -> Iterator[Tuple[float, float, float]]:
        return zip(self.time, self.gpu_power, self.cpu_power)

    def to_dataframe(self) -> pd.DataFrame:
        """转换为以 CSV 列名为列的 DataFrame。"""
        return pd.DataFrame(
            {
                COLUMNS[0]: self.time,
                COLUMNS[1]: self.gpu_power,
                COLUMNS[2]: self.cpu_power,
            },
            columns=list(COLUMNS),
        )

    def __len__(self) -> int:
        return len(self.time)

    def __repr__(self) -> str:
        return f"PowerSeries(samples={len(self)})"
