"""网站监控系统

按各自的间隔轮询站点，检测在线状态和内容变化，
输出检查记录到标准输出和可轮转的日志文件。
"""

__version__ = "1.0.0"
