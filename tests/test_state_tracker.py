"""站点状态跟踪器测试模块"""

from website_monitor.models.site_check import (
    DownOutcome, ErrorOutcome, Liveness, SiteCheckResult, SiteState, UpOutcome
)
from website_monitor.services.state_tracker import SiteStateTracker, classify

URL = "https://example.com"


def up(digest="d1", status_code=200):
    return SiteCheckResult(url=URL, status_ok=True, status_code=status_code,
                           elapsed_ms=12.0, size_bytes=100, digest=digest)


def down(status_code=503, digest="dd"):
    return SiteCheckResult(url=URL, status_ok=False, status_code=status_code,
                           elapsed_ms=8.0, size_bytes=20, digest=digest)


def error(message="request failed: connection refused"):
    return SiteCheckResult(url=URL, error_message=message)


class TestClassify:
    """检查结果归类测试"""

    def test_classify_up(self):
        outcome = classify(up())
        assert isinstance(outcome, UpOutcome)
        assert outcome.digest == "d1"
        assert outcome.status_code == 200
        assert outcome.liveness is Liveness.UP

    def test_classify_down(self):
        outcome = classify(down())
        assert isinstance(outcome, DownOutcome)
        assert outcome.status_code == 503
        assert outcome.liveness is Liveness.DOWN

    def test_classify_error(self):
        outcome = classify(error("timeout"))
        assert isinstance(outcome, ErrorOutcome)
        assert outcome.message == "timeout"
        assert outcome.liveness is Liveness.DOWN


class TestSiteStateTracker:
    """站点状态跟踪器测试类"""

    def setup_method(self):
        """测试前准备"""
        self.tracker = SiteStateTracker(URL)

    def test_initial_state(self):
        """测试初始状态为未知且没有基线"""
        assert self.tracker.last_liveness is Liveness.UNKNOWN
        assert self.tracker.last_content_hash is None

    def test_first_check_is_baseline(self):
        """测试首次成功检查不报告任何变化"""
        record = self.tracker.evaluate(up("anything"))

        assert record.url == URL
        assert record.liveness_changed is False
        assert record.content_changed is False
        assert record.previous_liveness is Liveness.UNKNOWN
        assert self.tracker.last_content_hash == "anything"
        assert self.tracker.last_liveness is Liveness.UP

    def test_first_check_down_is_baseline(self):
        """测试首次检查失败也不报告状态变化"""
        record = self.tracker.evaluate(error())
        assert record.liveness_changed is False
        assert self.tracker.last_liveness is Liveness.DOWN

    def test_content_change_sequence(self):
        """测试内容摘要序列 d1, d2, d2, d3"""
        flags = [self.tracker.evaluate(up(d)).content_changed
                 for d in ["d1", "d2", "d2", "d3"]]
        assert flags == [False, True, False, True]

    def test_error_preserves_baseline(self):
        """测试失败的检查不会清除内容基线"""
        self.tracker.evaluate(up("d1"))
        self.tracker.evaluate(error())
        assert self.tracker.last_content_hash == "d1"

        record = self.tracker.evaluate(up("d1"))
        assert record.content_changed is False

    def test_down_preserves_baseline(self):
        """测试状态码不符合期望时不覆盖内容基线"""
        self.tracker.evaluate(up("d1"))
        self.tracker.evaluate(down(digest="error-page"))
        assert self.tracker.last_content_hash == "d1"

        record = self.tracker.evaluate(up("d2"))
        assert record.content_changed is True

    def test_baseline_established_after_initial_errors(self):
        """测试先失败后成功时，首次成功仍只建立基线"""
        self.tracker.evaluate(error())
        record = self.tracker.evaluate(up("d1"))
        assert record.content_changed is False
        assert record.liveness_changed is True

    def test_liveness_transition_sequence(self):
        """测试在线状态序列 up, up, down, down, up"""
        results = [up(), up(), down(), down(), up()]
        flags = [self.tracker.evaluate(r).liveness_changed for r in results]
        assert flags == [False, False, True, False, True]

    def test_error_counts_as_down(self):
        """测试失败结果按离线处理"""
        self.tracker.evaluate(up())
        record = self.tracker.evaluate(error())

        assert record.liveness_changed is True
        assert record.previous_liveness is Liveness.UP
        assert record.liveness is Liveness.DOWN

        # down -> error 不算状态变化
        self.tracker.evaluate(down())
        assert self.tracker.evaluate(error()).liveness_changed is False

    def test_record_carries_timestamp_of_result(self):
        """测试记录使用检查结果的时间"""
        result = up()
        record = self.tracker.evaluate(result)
        assert record.timestamp == result.timestamp

    def test_custom_initial_state(self):
        """测试使用已有状态初始化"""
        tracker = SiteStateTracker(URL, SiteState(Liveness.UP, "d1"))
        record = tracker.evaluate(up("d2"))
        assert record.content_changed is True
        assert record.liveness_changed is False
