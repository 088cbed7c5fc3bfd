"""站点检查相关的数据模型"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class Liveness(Enum):
    """站点存活状态"""
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SiteConfig:
    """站点配置模型，加载后不可变"""
    url: str
    interval: float  # 秒
    timeout: Optional[float] = None
    expected_status: Optional[Union[int, Tuple[int, ...]]] = None

    def __post_init__(self):
        # 状态码列表存为元组，保持实例可哈希
        if isinstance(self.expected_status, list):
            object.__setattr__(self, 'expected_status', tuple(self.expected_status))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SiteConfig':
        """从配置字典创建站点配置"""
        return cls(
            url=data['url'],
            interval=data['interval'],
            timeout=data.get('timeout'),
            expected_status=data.get('expected_status')
        )


@dataclass
class SiteCheckResult:
    """一次HTTP检查的原始结果

    error_message 不为空时表示检查失败，其余字段无意义。
    """
    url: str
    status_ok: bool = False
    status_code: Optional[int] = None
    elapsed_ms: Optional[float] = None
    size_bytes: Optional[int] = None
    digest: Optional[str] = None
    error_message: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_error(self) -> bool:
        return self.error_message is not None


@dataclass(frozen=True)
class UpOutcome:
    """检查成功，站点在线"""
    elapsed_ms: float
    size_bytes: int
    digest: str
    status_code: Optional[int] = None

    label = 'up'
    liveness = Liveness.UP


@dataclass(frozen=True)
class DownOutcome:
    """收到响应，但状态码不在期望范围内"""
    elapsed_ms: Optional[float] = None
    size_bytes: Optional[int] = None
    digest: Optional[str] = None
    status_code: Optional[int] = None

    label = 'down'
    liveness = Liveness.DOWN


@dataclass(frozen=True)
class ErrorOutcome:
    """请求失败（网络错误、超时、读取失败等）"""
    message: str

    label = 'error'
    liveness = Liveness.DOWN


CheckOutcome = Union[UpOutcome, DownOutcome, ErrorOutcome]


@dataclass
class SiteState:
    """站点状态，仅由该站点自己的监控循环读写"""
    last_liveness: Liveness = Liveness.UNKNOWN
    last_content_hash: Optional[str] = None


@dataclass(frozen=True)
class CheckRecord:
    """单次检查的结果记录，格式化输出后即丢弃"""
    url: str
    outcome: CheckOutcome
    liveness_changed: bool = False
    content_changed: bool = False
    previous_liveness: Liveness = Liveness.UNKNOWN
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def liveness(self) -> Liveness:
        return self.outcome.liveness
