"""检查记录格式化"""

from typing import List, Optional

from ..models.site_check import CheckRecord, ErrorOutcome, Liveness

HASH_PREFIX_LENGTH = 5
NOT_APPLICABLE = 'n/a'


class RecordFormatter:
    """
    把 CheckRecord 格式化为输出行

    主行包含网址、耗时、状态、状态码、内容大小和摘要前缀；
    失败时附带错误信息。状态变化和内容变化的提示在 verbose 模式下
    作为缩进的附加行输出，否则追加在主行末尾。
    """

    def __init__(self, verbose: bool = True, hash_length: int = HASH_PREFIX_LENGTH):
        self.verbose = verbose
        self.hash_length = hash_length

    def format(self, record: CheckRecord) -> List[str]:
        """
        格式化一条检查记录

        Args:
            record: 检查记录

        Returns:
            输出行列表，第一行为主行
        """
        main_line = self.format_main_line(record)
        notices = self.format_notices(record)

        if not notices:
            return [main_line]
        if self.verbose:
            return [main_line] + [f"  {notice}" for notice in notices]
        return [" | ".join([main_line] + notices)]

    def format_main_line(self, record: CheckRecord) -> str:
        outcome = record.outcome
        parts = [f"website: {record.url}"]

        if isinstance(outcome, ErrorOutcome):
            parts.append(f"load_time: {NOT_APPLICABLE}")
            parts.append(f"status: {outcome.label}")
            parts.append(f"error: {outcome.message}")
            return " | ".join(parts)

        parts.append(f"load_time: {self._format_elapsed(outcome.elapsed_ms)}")
        parts.append(f"status: {outcome.label}")
        if outcome.status_code is not None:
            parts.append(f"code: {outcome.status_code}")
        if outcome.size_bytes is not None:
            parts.append(f"size: {outcome.size_bytes}bytes")
        parts.append(f"content_hash: {self._short_hash(outcome.digest)}")
        return " | ".join(parts)

    def format_notices(self, record: CheckRecord) -> List[str]:
        """生成状态变化和内容变化的提示文本"""
        notices = []
        if record.liveness_changed:
            notices.append(
                f"status changed: {self._liveness_text(record.previous_liveness)}"
                f" -> {self._liveness_text(record.liveness)}"
            )
        if record.content_changed:
            notices.append("content changed")
        return notices

    def _short_hash(self, digest: Optional[str]) -> str:
        if not digest:
            return NOT_APPLICABLE
        return digest[:self.hash_length]

    @staticmethod
    def _format_elapsed(elapsed_ms: Optional[float]) -> str:
        if elapsed_ms is None:
            return NOT_APPLICABLE
        return f"{int(round(elapsed_ms))}ms"

    @staticmethod
    def _liveness_text(liveness: Liveness) -> str:
        return liveness.value
