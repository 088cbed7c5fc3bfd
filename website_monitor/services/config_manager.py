"""配置管理器"""

import os
from typing import Dict, Any, List

import yaml

from ..models.site_check import SiteConfig
from ..utils.config_validator import ConfigValidator
from ..utils.exceptions import ConfigError, ErrorCode
from ..utils.log_manager import get_logger


class ConfigManager:
    """配置管理器，负责YAML配置文件的加载、解析和验证"""

    def __init__(self, config_path: str):
        """
        初始化配置管理器

        Args:
            config_path: 配置文件路径
        """
        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self.logger = get_logger('config_manager')

    def load_config(self) -> Dict[str, Any]:
        """
        加载YAML配置文件

        Returns:
            Dict[str, Any]: 配置字典

        Raises:
            ConfigError: 配置加载或验证失败
        """
        self.logger.info(f"开始加载配置文件: {self.config_path}")

        if not os.path.exists(self.config_path):
            self.logger.error(f"配置文件不存在: {self.config_path}")
            raise ConfigError(f"配置文件不存在: {self.config_path}",
                              error_code=ErrorCode.CONFIG_FILE_NOT_FOUND,
                              config_path=self.config_path)

        try:
            with open(self.config_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            self.logger.error(f"YAML格式错误: {e}")
            raise ConfigError(f"YAML格式错误: {e}",
                              error_code=ErrorCode.CONFIG_PARSE_ERROR,
                              config_path=self.config_path, cause=e)
        except PermissionError as e:
            self.logger.error(f"没有权限读取配置文件: {self.config_path}")
            raise ConfigError(f"没有权限读取配置文件: {self.config_path}",
                              config_path=self.config_path, cause=e)
        except OSError as e:
            self.logger.error(f"读取配置文件失败: {e}")
            raise ConfigError(f"读取配置文件失败: {e}",
                              config_path=self.config_path, cause=e)

        if config is None:
            self.logger.error("配置文件为空")
            raise ConfigError("配置文件为空", config_path=self.config_path)

        self.logger.debug("开始验证配置文件内容")
        self._validate_config(config)

        self.config = config
        self.logger.info(f"配置验证成功，包含 {len(config['sites'])} 个站点")
        return self.config

    def _validate_config(self, config: Any) -> None:
        """
        验证配置文件内容

        Raises:
            ConfigError: 配置验证失败
        """
        if not isinstance(config, dict):
            raise ConfigError("配置文件根节点必须是字典类型")

        if config.get('global') is not None:
            ConfigValidator.validate_global_config(config['global'])

        if 'sites' not in config:
            raise ConfigError("配置文件缺少 sites 配置")

        sites = config['sites']
        if sites is None:
            config['sites'] = sites = []
        if not isinstance(sites, list):
            raise ConfigError("sites配置必须是列表类型")

        for index, site_config in enumerate(sites, start=1):
            ConfigValidator.validate_site_config(index, site_config)

    def get_global_config(self) -> Dict[str, Any]:
        """
        获取全局配置

        Returns:
            Dict[str, Any]: 全局配置字典
        """
        return self.config.get('global') or {}

    def get_sites(self) -> List[SiteConfig]:
        """
        获取站点配置，保持配置文件中的顺序

        Returns:
            List[SiteConfig]: 站点配置列表
        """
        return [SiteConfig.from_dict(site) for site in self.config.get('sites', [])]
