"""站点检查器模块"""

from .base import BaseSiteChecker
from .http_checker import HttpSiteChecker, compute_digest

__all__ = ['BaseSiteChecker', 'HttpSiteChecker', 'compute_digest']
