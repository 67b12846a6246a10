# power_monitor/src/power_monitor/toolbox/config_manager.py
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Union
from power_monitor.toolbox.logger import get_logger

logger = get_logger(__name__)

MONITOR_CONFIG_FILE = "monitor_config.yaml"

DEFAULT_MONITOR_CONFIG: Dict[str, Any] = {
    # 固定时长采样的间隔（秒）
    "sample_interval": 0.001,
    # 后台采样线程的轮询间隔（秒）
    "block_interval": 0.1,
    "rapl_path": "/sys/class/powercap/intel-rapl:0/energy_uj",
    "log_dir": None,
}

class ConfigManager:
    """配置管理器类,用于加载和验证监控配置。"""
    
    def __init__(self, config: Union[str, Path, Dict[str, Any]]) -> None:
        """初始化配置管理器。

        Args:
            config: 配置目录路径或配置字典
        """
        self.configs = {}
        
        if isinstance(config, (str, Path)):
            # 如果是字符串，则视为配置目录路径
            self.config_dir = Path(config)
            if not self.config_dir.exists():
                raise ValueError(f"配置目录不存在: {config}")
        else:
            # 如果是字典，则直接使用
            self.config_dir = None
            for key, value in config.items():
                if key == "monitor_config":
                    try:
                        self._validate_config(value, f"{key}.yaml")
                    except Exception as e:
                        logger.error(f"配置验证失败: {e}")
                        raise
                self.configs[key] = value
    
    def load_config(self, config_file: str) -> Dict[str, Any]:
        """加载指定配置文件。

        Args:
            config_file: 配置文件名

        Returns:
            配置字典
        """
        # 如果是字典配置，直接返回对应部分
        if self.config_dir is None:
            config_key = config_file.replace(".yaml", "")
            return self.configs.get(config_key, {})
            
        # 否则从文件加载
        config_path = self.config_dir / config_file
        if not config_path.exists():
            raise FileNotFoundError(f"配置文件不存在: {config_path}")
        
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
            if config is None:
                config = {}
        
        # 验证配置
        try:
            self._validate_config(config, config_file)
        except Exception as e:
            logger.error(f"配置验证失败: {e}")
            raise
        
        # 缓存配置
        self.configs[config_file.replace(".yaml", "")] = config
        return config
    
    def _validate_config(self, config: Dict[str, Any], config_file: str) -> None:
        """验证配置的有效性。

        Args:
            config: 配置字典
            config_file: 配置文件名
        """
        if not isinstance(config, dict):
            raise ValueError(f"{config_file}: 配置必须是字典类型")
        
        if MONITOR_CONFIG_FILE in config_file:
            self._validate_monitor_config(config)
    
    @staticmethod
    def _validate_monitor_config(config: Dict[str, Any]) -> None:
        """验证监控配置。

        Args:
            config: 监控配置字典
        """
        if "monitor" not in config:
            raise ValueError("monitor_config.yaml: 缺少monitor配置")
        
        monitor_config = config["monitor"]
        if not isinstance(monitor_config, dict):
            raise ValueError("monitor配置必须是字典类型")
        
        unknown_fields = set(monitor_config) - set(DEFAULT_MONITOR_CONFIG)
        if unknown_fields:
            raise ValueError(f"monitor配置包含未知字段: {unknown_fields}")
        
        for field in ("sample_interval", "block_interval"):
            if field in monitor_config:
                value = monitor_config[field]
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValueError(f"{field}必须是数值类型")
                if value <= 0:
                    raise ValueError(f"{field}必须是正数")
        
        if "rapl_path" in monitor_config and not isinstance(monitor_config["rapl_path"], str):
            raise ValueError("rapl_path必须是字符串类型")
        
        log_dir = monitor_config.get("log_dir")
        if log_dir is not None and not isinstance(log_dir, str):
            raise ValueError("log_dir必须是字符串类型")
    
    def get_config(self, config_file: str) -> Dict[str, Any]:
        """获取已加载的配置。

        Args:
            config_file: 配置文件名

        Returns:
            配置字典
        """
        config_key = config_file.replace(".yaml", "")
        if config_key not in self.configs:
            raise ValueError(f"配置未加载: {config_file}")
        return self.configs[config_key]
    
    def get_monitor_config(self) -> Dict[str, Any]:
        """获取合并了默认值的监控配置。

        Returns:
            监控配置字典
        """
        config_key = MONITOR_CONFIG_FILE.replace(".yaml", "")
        if config_key not in self.configs and self.config_dir is not None:
            if (self.config_dir / MONITOR_CONFIG_FILE).exists():
                self.load_config(MONITOR_CONFIG_FILE)
        loaded = self.configs.get(config_key, {})
        return resolve_monitor_config(loaded.get("monitor", {}))

def resolve_monitor_config(overrides: Union[Dict[str, Any], None] = None) -> Dict[str, Any]:
    """将部分监控配置与默认值合并。

    Args:
        overrides: 覆盖默认值的字段，可以为 None

    Returns:
        完整的监控配置字典
    """
    merged = copy.deepcopy(DEFAULT_MONITOR_CONFIG)
    if overrides:
        ConfigManager._validate_monitor_config({"monitor": overrides})
        merged.update(overrides)
    return merged
