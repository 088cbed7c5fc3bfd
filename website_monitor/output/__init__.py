"""输出模块"""

from .formatter import RecordFormatter
from .sink import OutputSink

__all__ = ['RecordFormatter', 'OutputSink']
