"""
按行数轮转的检查记录日志文件

基于 logging.handlers.RotatingFileHandler，只把轮转条件从字节数换成行数：
活动文件写满 max_lines 行后依次后移为 base.1、base.2 ...，
最多保留 max_files 个文件（活动文件加编号文件），最旧的文件直接删除。
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Union

from .exceptions import ErrorCode, LogRotationError
from .log_manager import get_logger

DEFAULT_MAX_LINES = 20_000
DEFAULT_MAX_FILES = 4


def count_lines(path: Path) -> int:
    """统计文件中的行数"""
    count = 0
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(64 * 1024), b''):
            count += chunk.count(b'\n')
    return count


def ends_with_newline(path: Path) -> bool:
    """文件为空或以换行符结尾时返回True"""
    with open(path, 'rb') as f:
        f.seek(0, os.SEEK_END)
        if f.tell() == 0:
            return True
        f.seek(-1, os.SEEK_END)
        return f.read(1) == b'\n'


class LogRotator(RotatingFileHandler):
    """
    日志轮转器

    每条检查记录作为一个 LogRecord 交给处理器写出，记录的多行一起写入，
    轮转只发生在两条记录之间。写入和轮转失败统一转换为 LogRotationError，
    不走 logging 默认的打印到标准错误后忽略的处理。
    """

    def __init__(self, base_path: Union[str, Path],
                 max_lines: int = DEFAULT_MAX_LINES,
                 max_files: int = DEFAULT_MAX_FILES):
        """
        Args:
            base_path: 活动日志文件路径，同时作为编号文件的基础名
            max_lines: 活动文件的最大行数
            max_files: 最多保留的文件数量（含活动文件）
        """
        if max_lines <= 0:
            raise ValueError("max_lines 必须是正整数")
        if max_files <= 0:
            raise ValueError("max_files 必须是正整数")

        super().__init__(
            str(base_path),
            maxBytes=0,
            backupCount=max_files - 1,
            encoding='utf-8',
            delay=True
        )
        self.setFormatter(logging.Formatter('%(message)s'))

        self.base_path = Path(base_path)
        self.max_lines = max_lines
        self.max_files = max_files
        self.current_lines = 0
        self.rotation_count = 0
        self.logger = get_logger('log_rotator')

    @property
    def is_open(self) -> bool:
        return self.stream is not None

    def backup_path(self, index: int) -> Path:
        """返回第 index 代备份文件的路径"""
        return self.base_path.with_name(f"{self.base_path.name}.{index}")

    def open(self) -> None:
        """
        打开活动日志文件

        已存在的文件以追加方式打开，并以其现有行数作为当前行数。
        上次异常退出留下的不完整行先补上换行符，新记录从新行开始。

        Raises:
            LogRotationError: 无法打开日志文件
        """
        if self.stream is not None:
            return

        try:
            self.base_path.parent.mkdir(parents=True, exist_ok=True)
            existing = 0
            partial_line = False
            if self.base_path.exists():
                existing = count_lines(self.base_path)
                partial_line = not ends_with_newline(self.base_path)

            self.stream = self._open()
            if partial_line:
                self.stream.write(self.terminator)
                self.stream.flush()
                existing += 1
        except OSError as e:
            raise LogRotationError(
                f"无法打开日志文件: {e}",
                error_code=ErrorCode.LOG_FILE_ERROR,
                log_path=str(self.base_path),
                cause=e
            )

        self.current_lines = existing
        self.logger.debug(f"打开日志文件 {self.base_path}，已有 {existing} 行")

    def write_lines(self, lines: List[str]) -> None:
        """
        写入一条记录的全部行

        如果写入后会超过行数上限，先执行轮转，
        保证同一条记录的各行落在同一个文件中。

        Raises:
            LogRotationError: 写入或轮转失败
        """
        if not lines:
            return
        if self.stream is None:
            raise LogRotationError("日志文件未打开", log_path=str(self.base_path))

        record = logging.makeLogRecord({
            'msg': self.terminator.join(lines),
            'line_count': len(lines)
        })
        self.handle(record)
        self.current_lines += len(lines)

    def write_line(self, line: str) -> None:
        """写入单行"""
        self.write_lines([line])

    def shouldRollover(self, record: logging.LogRecord) -> bool:
        """活动文件非空且写入后会超过行数上限时轮转"""
        line_count = getattr(record, 'line_count', 1)
        return self.current_lines > 0 and self.current_lines + line_count > self.max_lines

    def doRollover(self) -> None:
        """
        执行一次日志轮转

        编号文件后移和最旧文件删除由 RotatingFileHandler 完成，
        只保留活动文件时直接丢弃旧内容。轮转后立即创建新的空活动文件。

        Raises:
            LogRotationError: 文件操作失败
        """
        try:
            if self.backupCount > 0:
                super().doRollover()
            else:
                if self.stream:
                    self.stream.close()
                    self.stream = None
                if os.path.exists(self.baseFilename):
                    os.remove(self.baseFilename)

            if self.stream is None:
                self.stream = self._open()
        except OSError as e:
            if self.stream is not None:
                self.stream.close()
                self.stream = None
            raise LogRotationError(
                f"日志轮转失败: {e}",
                log_path=str(self.base_path),
                cause=e
            )

        self.current_lines = 0
        self.rotation_count += 1
        self.logger.debug(f"日志文件已轮转: {self.base_path} (第 {self.rotation_count} 次)")

    def handleError(self, record: logging.LogRecord) -> None:
        """把写入异常转换为 LogRotationError 抛给调用方"""
        error = sys.exc_info()[1]
        if isinstance(error, LogRotationError):
            raise error
        raise LogRotationError(
            f"写入日志文件失败: {error}",
            error_code=ErrorCode.LOG_FILE_ERROR,
            log_path=str(self.base_path),
            cause=error
        ) from error

    def existing_files(self) -> List[Path]:
        """返回当前存在的日志文件，活动文件在前"""
        candidates = [self.base_path] + [
            self.backup_path(i) for i in range(1, self.max_files + 1)
        ]
        return [p for p in candidates if p.exists()]

    def close(self) -> None:
        """关闭活动文件"""
        try:
            super().close()
        except OSError as e:
            self.logger.warning(f"关闭日志文件失败: {e}")
            self.stream = None
