"""工具模块"""

from .exceptions import MonitorError, ConfigError, LogRotationError
from .log_manager import LogManager, LogLevel, get_logger, configure_logging, log_manager

__all__ = [
    'MonitorError', 'ConfigError', 'LogRotationError',
    'LogManager', 'LogLevel', 'get_logger', 'configure_logging', 'log_manager'
]
