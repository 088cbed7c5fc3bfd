"""测试数据模型"""

import dataclasses

import pytest
from datetime import datetime
from website_monitor.models.site_check import (
    CheckRecord, DownOutcome, ErrorOutcome, Liveness, SiteCheckResult,
    SiteConfig, SiteState, UpOutcome
)


class TestSiteConfig:
    """测试SiteConfig数据模型"""

    def test_from_dict(self):
        """测试从配置字典创建"""
        site = SiteConfig.from_dict({'url': 'https://example.com', 'interval': 30})

        assert site.url == 'https://example.com'
        assert site.interval == 30
        assert site.timeout is None
        assert site.expected_status is None

    def test_from_dict_with_overrides(self):
        """测试带覆盖参数创建"""
        site = SiteConfig.from_dict({
            'url': 'https://example.com',
            'interval': 30,
            'timeout': 3,
            'expected_status': [200, 204]
        })

        assert site.timeout == 3
        assert site.expected_status == (200, 204)

    def test_site_config_is_hashable(self):
        """测试状态码列表存为元组，实例可以哈希"""
        site = SiteConfig(url='https://example.com', interval=30, expected_status=[200, 204])

        assert site.expected_status == (200, 204)
        assert hash(site) == hash(SiteConfig.from_dict({
            'url': 'https://example.com', 'interval': 30, 'expected_status': [200, 204]
        }))
        assert len({site, SiteConfig(url='https://example.com', interval=30,
                                     expected_status=(200, 204))}) == 1

    def test_site_config_is_immutable(self):
        """测试站点配置不可修改"""
        site = SiteConfig(url='https://example.com', interval=30)
        with pytest.raises(dataclasses.FrozenInstanceError):
            site.interval = 10


class TestSiteCheckResult:
    """测试SiteCheckResult数据模型"""

    def test_successful_result(self):
        result = SiteCheckResult(url='https://example.com', status_ok=True,
                                 status_code=200, elapsed_ms=10.0,
                                 size_bytes=5, digest='abc')
        assert result.is_error is False
        assert isinstance(result.timestamp, datetime)

    def test_error_result(self):
        result = SiteCheckResult(url='https://example.com', error_message='request failed')
        assert result.is_error is True
        assert result.status_ok is False


class TestOutcomes:
    """测试检查结果分类"""

    def test_outcome_labels_and_liveness(self):
        """测试各类结果的标签和在线状态"""
        assert UpOutcome(1.0, 2, 'abc').label == 'up'
        assert UpOutcome(1.0, 2, 'abc').liveness is Liveness.UP
        assert DownOutcome().label == 'down'
        assert DownOutcome().liveness is Liveness.DOWN
        assert ErrorOutcome('boom').label == 'error'
        assert ErrorOutcome('boom').liveness is Liveness.DOWN


class TestSiteState:
    """测试SiteState数据模型"""

    def test_initial_state(self):
        state = SiteState()
        assert state.last_liveness is Liveness.UNKNOWN
        assert state.last_content_hash is None


class TestCheckRecord:
    """测试CheckRecord数据模型"""

    def test_create_record(self):
        """测试创建检查记录"""
        record = CheckRecord(url='https://example.com', outcome=ErrorOutcome('timeout'))

        assert record.liveness_changed is False
        assert record.content_changed is False
        assert record.previous_liveness is Liveness.UNKNOWN
        assert record.liveness is Liveness.DOWN
        assert isinstance(record.timestamp, datetime)

    def test_record_is_immutable(self):
        """测试检查记录不可修改"""
        record = CheckRecord(url='https://example.com', outcome=DownOutcome())
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.content_changed = True
