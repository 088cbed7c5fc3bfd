"""
日志管理器模块

提供统一的诊断日志功能。检查记录本身由输出模块写到标准输出，
诊断日志默认写到标准错误，避免与检查记录混在一起。
"""

import logging
import sys
from enum import Enum
from typing import Optional, Dict, Any, TextIO


class LogLevel(Enum):
    """日志级别枚举"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LogManager:
    """
    日志管理器类

    提供统一的诊断日志记录功能，支持：
    - 控制台日志输出（默认标准错误）
    - 日志级别配置
    - 自定义格式化
    """

    _instance: Optional['LogManager'] = None
    _initialized: bool = False

    def __new__(cls) -> 'LogManager':
        """单例模式实现"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """初始化日志管理器"""
        if self._initialized:
            return

        self._loggers: Dict[str, logging.Logger] = {}
        self._console_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        self._date_format = '%Y-%m-%d %H:%M:%S'

        # 默认配置
        self._log_level = LogLevel.INFO
        self._enable_console = True
        self._stream: TextIO = sys.stderr

        self._initialized = True

    def configure(self, config: Dict[str, Any]) -> None:
        """
        配置日志管理器

        Args:
            config: 日志配置字典，包含以下可选键：
                - log_level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                - enable_console: 是否启用控制台输出
                - console_format: 控制台日志格式
                - date_format: 日期格式
                - stream: 控制台输出流
        """
        if 'log_level' in config:
            level_str = config['log_level'].upper()
            if hasattr(LogLevel, level_str):
                self.set_level(LogLevel[level_str])
            else:
                raise ValueError(f"无效的日志级别: {level_str}")

        if 'enable_console' in config:
            self._enable_console = config['enable_console']

        if 'console_format' in config:
            self._console_format = config['console_format']

        if 'date_format' in config:
            self._date_format = config['date_format']

        if 'stream' in config:
            self._stream = config['stream']

    def get_logger(self, name: str) -> logging.Logger:
        """
        获取指定名称的日志记录器

        Args:
            name: 日志记录器名称

        Returns:
            配置好的日志记录器实例
        """
        if name in self._loggers:
            return self._loggers[name]

        logger = logging.getLogger(name)
        logger.setLevel(self._log_level.value)

        # 清除现有的处理器
        logger.handlers.clear()

        if self._enable_console:
            console_handler = logging.StreamHandler(self._stream)
            console_handler.setLevel(self._log_level.value)
            console_handler.setFormatter(logging.Formatter(
                self._console_format,
                datefmt=self._date_format
            ))
            logger.addHandler(console_handler)

        # 防止日志向上传播
        logger.propagate = False

        self._loggers[name] = logger
        return logger

    def set_level(self, level: LogLevel) -> None:
        """
        设置全局日志级别

        Args:
            level: 新的日志级别
        """
        self._log_level = level

        # 更新所有现有日志记录器的级别
        for logger in self._loggers.values():
            logger.setLevel(level.value)
            for handler in logger.handlers:
                handler.setLevel(level.value)

    def get_log_stats(self) -> Dict[str, Any]:
        """获取日志统计信息"""
        return {
            'loggers_count': len(self._loggers),
            'log_level': self._log_level.name,
            'console_logging_enabled': self._enable_console
        }

    def cleanup(self) -> None:
        """清理资源"""
        for logger in self._loggers.values():
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()

        self._loggers.clear()


# 全局日志管理器实例
log_manager = LogManager()


def get_logger(name: str) -> logging.Logger:
    """
    获取日志记录器的便捷函数

    Args:
        name: 日志记录器名称

    Returns:
        配置好的日志记录器实例
    """
    return LogManager().get_logger(name)


def configure_logging(config: Dict[str, Any]) -> None:
    """
    配置日志系统的便捷函数

    Args:
        config: 日志配置字典
    """
    LogManager().configure(config)
