# power_monitor/src/power_monitor/toolbox/logger.py
import logging
import os
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
PACKAGE_LOGGER = "power_monitor"

def get_logger(name, log_dir=None, log_level=logging.INFO):
    """
    Configure and return a logger instance.
    
    Args:
        name (str): Logger name (usually module name).
        log_dir (str): Directory to save log files. No file is written when None.
        log_level (int): Logging level (e.g., logging.INFO).
    
    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)
    if logger.handlers:  # Avoid duplicate handlers
        return logger
    
    logger.setLevel(log_level)
    
    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_formatter = logging.Formatter(LOG_FORMAT)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)
    
    # File handler
    if log_dir is not None:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        log_file = Path(log_dir) / f"{name}.log"
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(console_formatter)
        logger.addHandler(file_handler)
    
    logger.debug(f"Logger initialized for {name}")
    return logger

def setup_logger(log_dir="logs", log_level=logging.INFO):
    """
    Send every power_monitor record to one log file.
    
    The file handler sits on the package logger; module loggers reach it
    through propagation.
    
    Args:
        log_dir (str): Directory to save log files.
        log_level (int): Logging level.
    
    Returns:
        Path: The log file all module loggers now write to.
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    log_file = Path(log_dir) / f"{PACKAGE_LOGGER}.log"

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(log_level)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(PACKAGE_LOGGER + "."):
            logging.getLogger(name).setLevel(log_level)

    if not any(
        isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_file)
        for h in package_logger.handlers
    ):
        file_handler = logging.FileHandler(log_file, delay=True)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(file_handler)

    package_logger.info("Root logger setup complete")
    return log_file
