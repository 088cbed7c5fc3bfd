"""数据模型模块"""

from .site_check import (
    CheckOutcome, CheckRecord, DownOutcome, ErrorOutcome, Liveness,
    SiteCheckResult, SiteConfig, SiteState, UpOutcome
)

__all__ = ['Liveness', 'SiteConfig', 'SiteCheckResult', 'UpOutcome',
           'DownOutcome', 'ErrorOutcome', 'CheckOutcome', 'SiteState',
           'CheckRecord']
