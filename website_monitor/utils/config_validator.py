"""配置验证工具"""

from typing import Dict, Any
from urllib.parse import urlparse

from .exceptions import ConfigError

SUPPORTED_SCHEMES = ('http', 'https')
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ConfigValidator:
    """配置验证器"""

    @staticmethod
    def validate_site_config(index: int, config: Dict[str, Any]) -> None:
        """
        验证站点配置

        Args:
            index: 站点在配置列表中的序号
            config: 站点配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(config, dict):
            raise ConfigError(f"第 {index} 个站点的配置必须是字典类型")

        for field in ('url', 'interval'):
            if field not in config:
                raise ConfigError(f"第 {index} 个站点缺少必需的配置项: {field}")

        ConfigValidator.validate_url(config['url'])

        interval = config['interval']
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise ConfigError(f"站点 '{config['url']}' 的 interval 必须是正整数")

        if 'timeout' in config:
            ConfigValidator.validate_timeout(config['timeout'])

        if 'expected_status' in config:
            ConfigValidator.validate_expected_status(config['expected_status'])

    @staticmethod
    def validate_url(url: Any) -> None:
        """
        验证URL必须带有受支持的协议和主机名

        Raises:
            ConfigError: URL无效
        """
        if not isinstance(url, str) or not url.strip():
            raise ConfigError("站点 url 必须是非空字符串")

        parsed = urlparse(url)
        if parsed.scheme not in SUPPORTED_SCHEMES:
            raise ConfigError(
                f"站点 url '{url}' 必须以 http:// 或 https:// 开头")
        if not parsed.netloc:
            raise ConfigError(f"站点 url '{url}' 缺少主机名")

    @staticmethod
    def validate_timeout(timeout: Any) -> None:
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise ConfigError("timeout 必须是正数")

    @staticmethod
    def validate_expected_status(expected_status: Any) -> None:
        """
        验证期望状态码，可以是单个状态码或状态码列表

        Raises:
            ConfigError: 状态码无效
        """
        statuses = expected_status if isinstance(expected_status, list) else [expected_status]
        if not statuses:
            raise ConfigError("expected_status 列表不能为空")

        for status in statuses:
            if isinstance(status, bool) or not isinstance(status, int) or not (100 <= status <= 599):
                raise ConfigError(f"expected_status 包含无效的状态码: {status}")

    @staticmethod
    def validate_global_config(global_config: Dict[str, Any]) -> None:
        """
        验证全局配置

        Args:
            global_config: 全局配置

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(global_config, dict):
            raise ConfigError("全局配置必须是字典类型")

        if 'timeout' in global_config:
            ConfigValidator.validate_timeout(global_config['timeout'])

        if 'expected_status' in global_config:
            ConfigValidator.validate_expected_status(global_config['expected_status'])

        verbose = global_config.get('verbose')
        if verbose is not None and not isinstance(verbose, bool):
            raise ConfigError("verbose 必须是布尔值")

        log_level = global_config.get('log_level')
        if log_level is not None and log_level not in VALID_LOG_LEVELS:
            raise ConfigError(f"log_level 必须是以下值之一: {VALID_LOG_LEVELS}")

        log_file = global_config.get('log_file')
        if log_file is not None and (not isinstance(log_file, str) or not log_file.strip()):
            raise ConfigError("log_file 必须是非空字符串")

        for key in ('log_max_lines', 'log_max_files'):
            value = global_config.get(key)
            if value is not None:
                if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                    raise ConfigError(f"{key} 必须是正整数")
