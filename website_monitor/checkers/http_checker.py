"""HTTP站点检查器"""

import asyncio
import hashlib
import time

import aiohttp

from .base import BaseSiteChecker
from ..models.site_check import SiteCheckResult


def compute_digest(body: bytes) -> str:
    """计算响应内容的摘要（MD5十六进制）"""
    return hashlib.md5(body).hexdigest()


class HttpSiteChecker(BaseSiteChecker):
    """HTTP站点检查器，每次检查发送一次GET请求并读取完整响应"""

    async def check(self, url: str) -> SiteCheckResult:
        """
        执行一次HTTP GET检查

        耗时从发送请求开始计算，到响应内容读取完毕为止。

        Args:
            url: 站点URL

        Returns:
            SiteCheckResult: 检查结果
        """
        timeout = aiohttp.ClientTimeout(total=self.get_timeout())
        start_time = time.monotonic()

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as response:
                    status_code = response.status
                    body = await response.read()

            elapsed_ms = (time.monotonic() - start_time) * 1000
            result = SiteCheckResult(
                url=url,
                status_ok=self.is_status_expected(status_code),
                status_code=status_code,
                elapsed_ms=elapsed_ms,
                size_bytes=len(body),
                digest=compute_digest(body)
            )
            self.logger.debug(
                f"检查 {url} 完成: 状态码={status_code}, 耗时={elapsed_ms:.0f}ms")
            return result

        except asyncio.TimeoutError:
            error_message = f"request timed out after {self.get_timeout()}s"
        except aiohttp.ClientError as e:
            error_message = f"request failed: {e}"

        self.logger.debug(f"检查 {url} 失败: {error_message}")
        return SiteCheckResult(url=url, error_message=error_message)
