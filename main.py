#!/usr/bin/env python3
"""
网站监控系统主应用程序入口

加载配置，为每个站点启动独立的监控任务，
处理信号并在退出时关闭日志文件。
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import Optional, Dict, Any, List

from website_monitor import __version__
from website_monitor.models.site_check import SiteConfig, UpOutcome
from website_monitor.output.formatter import RecordFormatter
from website_monitor.output.sink import OutputSink
from website_monitor.services.config_manager import ConfigManager
from website_monitor.services.monitor_scheduler import MonitorScheduler
from website_monitor.utils.exceptions import MonitorError, ConfigError
from website_monitor.utils.log_manager import log_manager, get_logger
from website_monitor.utils.log_rotator import LogRotator, DEFAULT_MAX_LINES, DEFAULT_MAX_FILES


class WebsiteMonitorApp:
    """网站监控系统主应用程序类"""

    def __init__(self, config_path: str, log_file: Optional[str] = None,
                 log_level: Optional[str] = None):
        """初始化应用程序

        Args:
            config_path: 配置文件路径
            log_file: 检查记录日志文件路径（覆盖配置文件设置）
            log_level: 诊断日志级别（覆盖配置文件设置）
        """
        self.config_path = config_path
        self.log_file_override = log_file
        self.log_level_override = log_level
        self.logger: Optional[logging.Logger] = None
        self.is_running = False
        self.shutdown_event = asyncio.Event()
        self.loop: Optional[asyncio.AbstractEventLoop] = None

        # 核心组件
        self.config_manager: Optional[ConfigManager] = None
        self.sink: Optional[OutputSink] = None
        self.monitor_scheduler: Optional[MonitorScheduler] = None
        self.sites: List[SiteConfig] = []
        self.log_file: Optional[str] = None

        # 任务管理
        self.background_tasks = set()

    async def initialize(self):
        """初始化应用程序组件

        Raises:
            ConfigError: 配置无效，任何监控任务启动之前抛出
        """
        self.loop = asyncio.get_running_loop()

        try:
            self.config_manager = ConfigManager(self.config_path)
            self.config_manager.load_config()
            global_config = self.config_manager.get_global_config()

            self._configure_logging(global_config)
            self.logger = get_logger('main')
            self.logger.info("开始初始化网站监控系统")

            self.sites = self.config_manager.get_sites()

            # 检查记录输出
            self.log_file = self.log_file_override or global_config.get('log_file')
            rotator = None
            if self.log_file:
                rotator = LogRotator(
                    self.log_file,
                    max_lines=global_config.get('log_max_lines', DEFAULT_MAX_LINES),
                    max_files=global_config.get('log_max_files', DEFAULT_MAX_FILES)
                )
            self.sink = OutputSink(rotator)
            formatter = RecordFormatter(verbose=global_config.get('verbose', True))

            # 监控调度器
            self.monitor_scheduler = MonitorScheduler(self.sink, formatter)
            self.monitor_scheduler.configure_sites(self.sites, global_config)

            self.logger.info("应用程序组件初始化完成")

        except Exception as e:
            if self.logger:
                self.logger.error(f"应用程序初始化失败: {e}")
            raise

    def _configure_logging(self, global_config: Dict[str, Any]):
        """配置诊断日志

        Args:
            global_config: 全局配置
        """
        log_level = self.log_level_override or global_config.get('log_level', 'INFO')
        log_manager.configure({'log_level': log_level})

    async def start(self):
        """启动应用程序，直到收到关闭信号"""
        if self.is_running:
            self.logger.warning("应用程序已经在运行")
            return

        try:
            self.is_running = True
            self.logger.info("启动网站监控系统")

            self.sink.open()

            scheduler_task = asyncio.create_task(self.monitor_scheduler.start())
            self.background_tasks.add(scheduler_task)
            scheduler_task.add_done_callback(self.background_tasks.discard)

            shutdown_task = asyncio.create_task(self.shutdown_event.wait())
            self.background_tasks.add(shutdown_task)
            shutdown_task.add_done_callback(self.background_tasks.discard)

            await asyncio.wait({scheduler_task, shutdown_task},
                               return_when=asyncio.FIRST_COMPLETED)

        except Exception as e:
            self.logger.error(f"应用程序运行异常: {e}", exc_info=True)
            raise
        finally:
            await self.stop()

    async def stop(self):
        """停止应用程序"""
        if not self.is_running:
            return

        self.logger.info("正在停止网站监控系统...")
        self.is_running = False

        try:
            if self.monitor_scheduler:
                await self.monitor_scheduler.stop()

            for task in self.background_tasks:
                if not task.done():
                    task.cancel()

            if self.background_tasks:
                await asyncio.gather(*self.background_tasks, return_exceptions=True)

            self.background_tasks.clear()

            if self.sink:
                self.sink.close()

            self.logger.info("网站监控系统已停止")

        except Exception as e:
            self.logger.error(f"停止应用程序时发生异常: {e}", exc_info=True)

    def shutdown(self):
        """触发应用程序关闭"""
        if self.logger:
            self.logger.info("收到关闭信号")
        self.shutdown_event.set()

    def get_status(self) -> Dict[str, Any]:
        """获取应用程序状态

        Returns:
            应用程序状态信息
        """
        status = {
            'is_running': self.is_running,
            'config_path': self.config_path,
            'log_file': self.log_file,
            'background_tasks_count': len(self.background_tasks)
        }

        if self.monitor_scheduler:
            status['scheduler_stats'] = self.monitor_scheduler.get_scheduler_stats()
            status['site_status'] = self.monitor_scheduler.get_site_status()

        return status


# 全局应用程序实例
app: Optional[WebsiteMonitorApp] = None


def signal_handler(signum, frame):
    """信号处理器"""
    signal_name = signal.Signals(signum).name
    print(f"\n收到信号 {signal_name} ({signum})", file=sys.stderr)

    if app and app.loop:
        app.loop.call_soon_threadsafe(app.shutdown)
    else:
        print("应用程序未初始化，直接退出", file=sys.stderr)
        sys.exit(0)


def create_argument_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        prog='website-monitor',
        description='网站监控 - 按独立间隔检查站点在线状态和内容变化',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  %(prog)s                                  # 使用 config.yaml 启动监控
  %(prog)s -c sites.yaml -l monitor.log     # 指定配置文件并写入日志文件
  %(prog)s --validate -c sites.yaml         # 验证配置文件格式
  %(prog)s --check-once                     # 每个站点检查一次后退出

日志文件超过 20000 行时轮转，最多保留 monitor.log、monitor.log.1 ~ .3 四个文件
        """
    )

    parser.add_argument(
        '--config', '-c',
        default='config.yaml',
        help='YAML配置文件路径（默认: config.yaml）'
    )

    parser.add_argument(
        '--log-file', '-l',
        help='检查记录日志文件路径（覆盖配置文件设置）'
    )

    parser.add_argument(
        '--version', '-v',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parser.add_argument(
        '--validate',
        action='store_true',
        help='验证配置文件格式并退出'
    )

    parser.add_argument(
        '--check-once',
        action='store_true',
        help='每个站点检查一次后退出'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='设置诊断日志级别（覆盖配置文件设置）'
    )

    return parser


def validate_config_file(config_path: str) -> bool:
    """验证配置文件

    Args:
        config_path: 配置文件路径

    Returns:
        验证是否成功
    """
    try:
        print(f"正在验证配置文件: {config_path}")

        config_manager = ConfigManager(config_path)
        config_manager.load_config()
        sites = config_manager.get_sites()

        print("✅ 配置文件验证成功!")
        print(f"   - 站点数量: {len(sites)}")
        for site in sites:
            print(f"     * {site.url} (每 {site.interval} 秒检查一次)")

        return True

    except MonitorError as e:
        print(f"❌ 配置文件验证失败: {e}")
        return False


async def check_once(app: WebsiteMonitorApp) -> bool:
    """每个站点执行一次检查

    Args:
        app: 已初始化的应用程序

    Returns:
        是否所有站点都在线
    """
    app.sink.open()
    try:
        records = await app.monitor_scheduler.check_all_sites_now()
    finally:
        app.sink.close()

    return all(isinstance(record.outcome, UpOutcome) for record in records)


def print_banner(app: WebsiteMonitorApp):
    """输出启动信息"""
    print(f"Reading config from: {app.config_path}")
    if app.log_file:
        print(f"Logging to file: {app.log_file}")
    print(f"\nMonitoring {len(app.sites)} site(s):")
    for site in app.sites:
        print(f"  - {site.url} (check every {site.interval}s)")
    print("\nStarting monitoring... (Press Ctrl+C to stop)\n", flush=True)


async def main():
    """主函数"""
    global app

    parser = create_argument_parser()
    args = parser.parse_args()

    if args.validate:
        success = validate_config_file(args.config)
        sys.exit(0 if success else 1)

    try:
        app = WebsiteMonitorApp(args.config, log_file=args.log_file,
                                log_level=args.log_level)
        await app.initialize()

        if not app.sites:
            print("No sites configured!", file=sys.stderr)
            return

        if args.check_once:
            success = await check_once(app)
            sys.exit(0 if success else 1)

        # 注册信号处理器
        signal.signal(signal.SIGINT, signal_handler)  # Ctrl+C
        signal.signal(signal.SIGTERM, signal_handler)  # 终止信号

        print_banner(app)
        await app.start()

    except KeyboardInterrupt:
        print("\n用户中断程序", file=sys.stderr)
    except ConfigError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        sys.exit(1)
    except MonitorError as e:
        print(f"网站监控系统错误: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if app:
            await app.stop()
        log_manager.cleanup()


def run():
    """命令行入口"""
    asyncio.run(main())


if __name__ == "__main__":
    run()
