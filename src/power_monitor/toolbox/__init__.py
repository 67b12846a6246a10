"""日志与配置工具。"""

from .logger import get_logger, setup_logger
from .config_manager import ConfigManager, DEFAULT_MONITOR_CONFIG

__all__ = ["get_logger", "setup_logger", "ConfigManager", "DEFAULT_MONITOR_CONFIG"]
