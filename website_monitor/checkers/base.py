"""站点检查器基类"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

from ..models.site_check import SiteCheckResult
from ..utils.log_manager import get_logger

DEFAULT_TIMEOUT = 10


class BaseSiteChecker(ABC):
    """站点检查器抽象基类

    检查器不在两次调用之间保留任何状态。
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        初始化站点检查器

        Args:
            config: 检查参数（timeout、expected_status）
        """
        self.config = config or {}
        self.checker_type = self.__class__.__name__.replace('SiteChecker', '').lower()
        self.logger = get_logger(f'checker.{self.checker_type}')

    @abstractmethod
    async def check(self, url: str) -> SiteCheckResult:
        """
        对指定URL执行一次检查

        Args:
            url: 站点URL

        Returns:
            SiteCheckResult: 检查结果，失败时 error_message 不为空
        """
        pass

    def get_timeout(self) -> float:
        """
        获取超时时间配置

        Returns:
            超时时间（秒）
        """
        timeout = self.config.get('timeout')
        return DEFAULT_TIMEOUT if timeout is None else timeout

    def is_status_expected(self, status_code: int) -> bool:
        """
        检查状态码是否属于成功范围

        未配置 expected_status 时，收到任何响应都算成功。
        """
        expected_status = self.config.get('expected_status')

        if expected_status is None:
            return True
        if isinstance(expected_status, (list, tuple)):
            return status_code in expected_status
        return status_code == expected_status
