"""输出汇聚点

所有站点任务的检查记录都通过 OutputSink 写出：
标准输出总是写入，配置了日志文件时同时写入 LogRotator。
"""

import sys
import threading
from typing import Any, Dict, List, Optional, TextIO

from ..utils.exceptions import LogRotationError
from ..utils.log_manager import get_logger
from ..utils.log_rotator import LogRotator


class OutputSink:
    """
    进程级输出汇聚点

    各站点任务在工作线程中调用 emit。每条记录的写入（含可能发生的日志轮转）
    在同一把锁内完成，并发写入不会在行中间交错，阈值也只会被一个写入者处理。
    """

    def __init__(self, rotator: Optional[LogRotator] = None,
                 stream: Optional[TextIO] = None):
        """
        Args:
            rotator: 日志轮转器，为None时只写标准输出
            stream: 输出流，默认使用 sys.stdout
        """
        self.rotator = rotator
        self._stream = stream
        self._lock = threading.Lock()
        self.file_logging_enabled = rotator is not None
        self._file_open = False
        self.file_error: Optional[LogRotationError] = None
        self.records_written = 0
        self.logger = get_logger('output_sink')

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def open(self) -> None:
        """打开日志文件，失败时只保留标准输出"""
        if self.rotator is None:
            return
        with self._lock:
            try:
                self.rotator.open()
                self._file_open = True
                self.logger.info(f"检查记录同时写入日志文件: {self.rotator.base_path}")
            except LogRotationError as e:
                self._disable_file_logging(e)

    def emit(self, lines: List[str]) -> None:
        """
        写出一条记录的全部行

        Args:
            lines: 已格式化的输出行
        """
        if not lines:
            return

        with self._lock:
            self.stream.write(''.join(f"{line}\n" for line in lines))
            self.stream.flush()

            if self.file_logging_enabled and self._file_open:
                try:
                    self.rotator.write_lines(lines)
                except LogRotationError as e:
                    self._disable_file_logging(e)

            self.records_written += 1

    def _disable_file_logging(self, error: LogRotationError) -> None:
        """关闭文件日志，错误只报告一次，监控继续输出到标准输出"""
        self.file_logging_enabled = False
        self.file_error = error
        self._file_open = False
        self.logger.error(f"文件日志已停用，继续输出到标准输出: {error.format_error()}")
        if self.rotator is not None:
            self.rotator.close()

    def get_stats(self) -> Dict[str, Any]:
        """获取输出统计信息"""
        stats = {
            'records_written': self.records_written,
            'file_logging_enabled': self.file_logging_enabled,
            'file_error': self.file_error.message if self.file_error else None
        }
        if self.rotator is not None:
            stats['log_file'] = str(self.rotator.base_path)
            stats['current_lines'] = self.rotator.current_lines
            stats['rotation_count'] = self.rotator.rotation_count
        return stats

    def close(self) -> None:
        """关闭日志文件"""
        with self._lock:
            self._file_open = False
            if self.rotator is not None:
                self.rotator.close()
