"""监控调度器模块

每个站点一个独立的异步任务，各自按间隔执行检查，互不影响
"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Set

from ..checkers.base import BaseSiteChecker
from ..checkers.http_checker import HttpSiteChecker
from ..models.site_check import CheckRecord, SiteCheckResult, SiteConfig
from ..output.formatter import RecordFormatter
from ..output.sink import OutputSink
from ..utils.config_validator import ConfigValidator
from ..utils.exceptions import ConfigError, SchedulerError
from ..utils.log_manager import get_logger
from .state_tracker import SiteStateTracker

CheckerFactory = Callable[[Dict[str, Any]], BaseSiteChecker]


class SiteMonitor:
    """单个站点的监控循环

    状态机: 空闲 -> 检查 -> 评估 -> 空闲。同一站点的检查严格串行，
    检查耗时超过间隔时下一次检查在本次结束后立即开始。
    """

    def __init__(self, site: SiteConfig, checker: BaseSiteChecker,
                 formatter: RecordFormatter, sink: OutputSink):
        self.site = site
        self.checker = checker
        self.formatter = formatter
        self.sink = sink
        self.tracker = SiteStateTracker(site.url)
        self.tick_count = 0
        self.last_check_time: Optional[datetime] = None
        self.logger = get_logger('site_monitor')

    async def run_forever(self) -> None:
        """按间隔循环执行检查，直到任务被取消"""
        loop = asyncio.get_running_loop()
        next_run = loop.time()

        while True:
            delay = next_run - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)

            tick_start = loop.time()
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.logger.error(f"站点 {self.site.url} 检查周期异常: {e}", exc_info=True)

            next_run = tick_start + self.site.interval

    async def tick(self) -> CheckRecord:
        """执行一次检查并输出记录

        Returns:
            本次检查的 CheckRecord
        """
        self.last_check_time = datetime.now()

        try:
            result = await self.checker.check(self.site.url)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"检查站点 {self.site.url} 时发生异常: {e}")
            result = SiteCheckResult(url=self.site.url, error_message=f"check failed: {e}")

        record = self.tracker.evaluate(result)
        self.tick_count += 1
        # 在工作线程中写出，多条记录之间由 OutputSink 的锁串行化
        await asyncio.to_thread(self.sink.emit, self.formatter.format(record))

        return record


class MonitorScheduler:
    """监控调度器

    启动时为每个站点创建一个任务，之后不再有全局调度循环
    """

    def __init__(self, sink: OutputSink,
                 formatter: Optional[RecordFormatter] = None,
                 checker_factory: Optional[CheckerFactory] = None):
        """初始化监控调度器

        Args:
            sink: 检查记录的输出汇聚点
            formatter: 检查记录格式化器
            checker_factory: 根据检查参数创建检查器，默认创建 HttpSiteChecker
        """
        self.sink = sink
        self.formatter = formatter or RecordFormatter()
        self.checker_factory: CheckerFactory = checker_factory or HttpSiteChecker
        self.monitors: List[SiteMonitor] = []
        self.running_tasks: Set[asyncio.Task] = set()
        self.is_running = False
        self.logger = get_logger('monitor_scheduler')

    def configure_sites(self, sites: List[SiteConfig],
                        global_config: Optional[Dict[str, Any]] = None):
        """配置监控站点

        Args:
            sites: 站点配置列表
            global_config: 全局配置字典，提供 timeout 和 expected_status 的默认值

        Raises:
            ConfigError: 站点配置无效
            SchedulerError: 调度器已在运行
        """
        if self.is_running:
            raise SchedulerError("调度器运行期间不能修改站点配置")

        if global_config is None:
            global_config = {}

        monitors = []
        for site in sites:
            ConfigValidator.validate_url(site.url)
            if isinstance(site.interval, bool) or not isinstance(site.interval, (int, float)) \
                    or site.interval <= 0:
                raise ConfigError(f"站点 {site.url} 的检查间隔必须是正数")

            checker_config = {
                'timeout': site.timeout if site.timeout is not None
                else global_config.get('timeout'),
                'expected_status': site.expected_status if site.expected_status is not None
                else global_config.get('expected_status')
            }
            checker = self.checker_factory(checker_config)
            monitors.append(SiteMonitor(site, checker, self.formatter, self.sink))

            self.logger.info(f"配置站点 {site.url}: 间隔={site.interval}秒")

        self.monitors = monitors

    async def start(self):
        """启动监控调度器，一直运行到被取消或停止"""
        if self.is_running:
            self.logger.warning("监控调度器已经在运行")
            return

        self.is_running = True
        self.logger.info(f"启动监控调度器，共 {len(self.monitors)} 个站点")

        for index, monitor in enumerate(self.monitors):
            task = asyncio.create_task(monitor.run_forever(), name=f"site-{index}")
            self.running_tasks.add(task)
            task.add_done_callback(self.running_tasks.discard)

        try:
            if self.running_tasks:
                await asyncio.gather(*self.running_tasks)
        except asyncio.CancelledError:
            self.logger.info("监控调度器被取消")
        finally:
            await self.stop()

    async def stop(self):
        """停止监控调度器，放弃正在进行的检查"""
        if not self.is_running:
            return

        self.is_running = False
        self.logger.info("正在停止监控调度器...")

        tasks = list(self.running_tasks)
        for task in tasks:
            if not task.done():
                task.cancel()

        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        self.running_tasks.clear()
        self.logger.info("监控调度器已停止")

    async def check_all_sites_now(self) -> List[CheckRecord]:
        """立即检查所有站点一次

        Returns:
            按配置顺序排列的检查记录
        """
        return list(await asyncio.gather(*(monitor.tick() for monitor in self.monitors)))

    def get_site_status(self) -> List[Dict[str, Any]]:
        """获取所有站点的状态信息"""
        status = []
        for monitor in self.monitors:
            last_check = monitor.last_check_time
            next_check = None
            if last_check:
                next_check = last_check + timedelta(seconds=monitor.site.interval)

            status.append({
                'url': monitor.site.url,
                'check_interval': monitor.site.interval,
                'liveness': monitor.tracker.last_liveness.value,
                'checks': monitor.tick_count,
                'last_check_time': last_check.isoformat() if last_check else None,
                'next_check_time': next_check.isoformat() if next_check else None
            })
        return status

    def get_scheduler_stats(self) -> Dict[str, Any]:
        """获取调度器统计信息"""
        return {
            'is_running': self.is_running,
            'total_sites': len(self.monitors),
            'running_tasks_count': len(self.running_tasks),
            'configured_sites': [monitor.site.url for monitor in self.monitors],
            'output': self.sink.get_stats()
        }
