"""站点状态跟踪模块

负责把检查结果归类为 up/down/error，
并与站点上一次的状态比较，检测在线状态变化和内容变化。
"""

from typing import Optional

from ..models.site_check import (
    CheckOutcome, CheckRecord, DownOutcome, ErrorOutcome, Liveness,
    SiteCheckResult, SiteState, UpOutcome
)
from ..utils.log_manager import get_logger


def classify(result: SiteCheckResult) -> CheckOutcome:
    """
    把检查器返回的结果归类

    Args:
        result: 检查器返回的原始结果

    Returns:
        UpOutcome、DownOutcome 或 ErrorOutcome
    """
    if result.is_error:
        return ErrorOutcome(message=result.error_message)

    if result.status_ok and result.digest is not None:
        return UpOutcome(
            elapsed_ms=result.elapsed_ms,
            size_bytes=result.size_bytes,
            digest=result.digest,
            status_code=result.status_code
        )

    return DownOutcome(
        elapsed_ms=result.elapsed_ms,
        size_bytes=result.size_bytes,
        digest=result.digest,
        status_code=result.status_code
    )


class SiteStateTracker:
    """站点状态跟踪器

    每个站点的监控循环持有一个实例，不与其他站点共享，因此无需加锁。
    """

    def __init__(self, url: str, state: Optional[SiteState] = None):
        """
        Args:
            url: 站点URL
            state: 初始状态，默认为未知状态且没有内容摘要
        """
        self.url = url
        self.state = state or SiteState()
        self.logger = get_logger('state_tracker')

    def evaluate(self, result: SiteCheckResult) -> CheckRecord:
        """评估一次检查结果并更新站点状态

        规则：
        - 首次检查（上一状态未知）只建立基线，不报告状态变化
        - 只有 up 结果才会记录内容摘要，down/error 保留原有基线
        - 首次成功的检查只建立内容基线，不报告内容变化

        Args:
            result: 检查器返回的原始结果

        Returns:
            本次检查的 CheckRecord
        """
        outcome = classify(result)
        previous_liveness = self.state.last_liveness
        new_liveness = outcome.liveness

        liveness_changed = (
            previous_liveness is not Liveness.UNKNOWN
            and previous_liveness is not new_liveness
        )

        content_changed = False
        if isinstance(outcome, UpOutcome):
            last_hash = self.state.last_content_hash
            content_changed = last_hash is not None and last_hash != outcome.digest

        record = CheckRecord(
            url=self.url,
            outcome=outcome,
            liveness_changed=liveness_changed,
            content_changed=content_changed,
            previous_liveness=previous_liveness,
            timestamp=result.timestamp
        )

        self._apply(outcome)

        if liveness_changed:
            self.logger.info(
                f"站点 {self.url} 状态变化: {previous_liveness.value} -> {new_liveness.value}")
        elif previous_liveness is Liveness.UNKNOWN:
            self.logger.debug(f"站点 {self.url} 初始状态: {new_liveness.value}")
        if content_changed:
            self.logger.info(f"站点 {self.url} 内容发生变化")

        return record

    def _apply(self, outcome: CheckOutcome) -> None:
        """用本次结果更新状态"""
        self.state.last_liveness = outcome.liveness
        if isinstance(outcome, UpOutcome):
            self.state.last_content_hash = outcome.digest

    @property
    def last_liveness(self) -> Liveness:
        return self.state.last_liveness

    @property
    def last_content_hash(self) -> Optional[str]:
        return self.state.last_content_hash
