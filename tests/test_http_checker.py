"""测试HTTP站点检查器"""

import asyncio
import hashlib
from unittest.mock import AsyncMock, Mock, patch

import aiohttp
import pytest

from website_monitor.checkers.http_checker import HttpSiteChecker, compute_digest
from website_monitor.models.site_check import SiteCheckResult

URL = 'https://example.com/'


def mock_client_session(mock_client_session, status=200, body=b'hello', get_side_effect=None):
    """配置模拟的 aiohttp.ClientSession"""
    mock_response = Mock()
    mock_response.status = status
    mock_response.read = AsyncMock(return_value=body)

    mock_request_context = AsyncMock()
    mock_request_context.__aenter__ = AsyncMock(return_value=mock_response)
    mock_request_context.__aexit__ = AsyncMock(return_value=None)

    mock_session = Mock()
    if get_side_effect is not None:
        mock_session.get = Mock(side_effect=get_side_effect)
    else:
        mock_session.get = Mock(return_value=mock_request_context)

    mock_client_session.return_value.__aenter__ = AsyncMock(return_value=mock_session)
    mock_client_session.return_value.__aexit__ = AsyncMock(return_value=None)
    return mock_session


class TestHttpSiteChecker:
    """测试HttpSiteChecker类"""

    def test_compute_digest(self):
        """测试内容摘要为MD5十六进制"""
        assert compute_digest(b'hello') == hashlib.md5(b'hello').hexdigest()
        assert len(compute_digest(b'')) == 32

    def test_default_timeout(self):
        """测试默认超时时间"""
        assert HttpSiteChecker().get_timeout() == 10
        assert HttpSiteChecker({'timeout': 3}).get_timeout() == 3
        assert HttpSiteChecker({'timeout': None}).get_timeout() == 10

    def test_any_status_is_expected_by_default(self):
        """测试未配置期望状态码时任何响应都算成功"""
        checker = HttpSiteChecker()
        assert checker.is_status_expected(200) is True
        assert checker.is_status_expected(404) is True
        assert checker.is_status_expected(500) is True

    def test_expected_status_single_and_list(self):
        """测试配置期望状态码"""
        checker = HttpSiteChecker({'expected_status': 200})
        assert checker.is_status_expected(200) is True
        assert checker.is_status_expected(301) is False

        checker = HttpSiteChecker({'expected_status': [200, 204]})
        assert checker.is_status_expected(204) is True
        assert checker.is_status_expected(404) is False

    @pytest.mark.asyncio
    async def test_check_success(self):
        """测试成功的检查"""
        checker = HttpSiteChecker()

        with patch('aiohttp.ClientSession') as client_session:
            mock_session = mock_client_session(client_session, status=200, body=b'hello world')
            result = await checker.check(URL)

        assert isinstance(result, SiteCheckResult)
        assert result.is_error is False
        assert result.status_ok is True
        assert result.status_code == 200
        assert result.size_bytes == 11
        assert result.digest == hashlib.md5(b'hello world').hexdigest()
        assert result.elapsed_ms >= 0
        mock_session.get.assert_called_once_with(URL)

    @pytest.mark.asyncio
    async def test_check_non_2xx_counts_as_ok_by_default(self):
        """测试默认策略下404仍算在线并记录状态码"""
        checker = HttpSiteChecker()

        with patch('aiohttp.ClientSession') as client_session:
            mock_client_session(client_session, status=404, body=b'not found')
            result = await checker.check(URL)

        assert result.status_ok is True
        assert result.status_code == 404

    @pytest.mark.asyncio
    async def test_check_unexpected_status(self):
        """测试状态码不符合期望"""
        checker = HttpSiteChecker({'expected_status': [200]})

        with patch('aiohttp.ClientSession') as client_session:
            mock_client_session(client_session, status=503, body=b'unavailable')
            result = await checker.check(URL)

        assert result.is_error is False
        assert result.status_ok is False
        assert result.status_code == 503
        assert result.digest == hashlib.md5(b'unavailable').hexdigest()

    @pytest.mark.asyncio
    async def test_check_client_error(self):
        """测试网络错误"""
        checker = HttpSiteChecker()

        with patch('aiohttp.ClientSession') as client_session:
            mock_client_session(client_session,
                                get_side_effect=aiohttp.ClientError("connection refused"))
            result = await checker.check(URL)

        assert result.is_error is True
        assert result.error_message == "request failed: connection refused"
        assert result.digest is None
        assert result.elapsed_ms is None

    @pytest.mark.asyncio
    async def test_check_timeout(self):
        """测试请求超时"""
        checker = HttpSiteChecker({'timeout': 2})

        with patch('aiohttp.ClientSession') as client_session:
            mock_client_session(client_session, get_side_effect=asyncio.TimeoutError())
            result = await checker.check(URL)

        assert result.is_error is True
        assert result.error_message == "request timed out after 2s"

    @pytest.mark.asyncio
    async def test_check_passes_timeout_to_session(self):
        """测试超时配置传给 ClientSession"""
        checker = HttpSiteChecker({'timeout': 7})

        with patch('aiohttp.ClientSession') as client_session:
            mock_client_session(client_session)
            await checker.check(URL)

        timeout = client_session.call_args.kwargs['timeout']
        assert isinstance(timeout, aiohttp.ClientTimeout)
        assert timeout.total == 7
