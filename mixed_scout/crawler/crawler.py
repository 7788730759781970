# === FILE: mixed_scout/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import contextlib
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Set, Union

from aiohttp import ClientSession, ClientTimeout, TCPConnector

from mixed_scout.classifier import normalize_url
from mixed_scout.config import CrawlConfig
from mixed_scout.crawler.fetcher import FetchError, Fetcher
from mixed_scout.crawler.models import CrawlReport, PageFailure, Finding, PageScan
from mixed_scout.crawler.registry import VisitedRegistry
from mixed_scout.logger import logger
from mixed_scout.scanner import scan_stream

__all__ = ("AsyncCrawler", "CrawlState", "FindingCallback")

FindingCallback = Callable[[Finding], None]


class CrawlState(Enum):
    RUNNING = "running"
    QUIESCENT_CANDIDATE = "quiescent-candidate"
    TERMINATED = "terminated"


@dataclass(frozen=True, slots=True)
class _Completed:
    """Queued by a task after all of its links."""
    url: str


_QueueItem = Union[str, _Completed]


class AsyncCrawler:
    """Асинхронный краулер: одна задача на каждый допущенный URL.

    Обход завершается, когда все допущенные задачи отчитались о завершении:
    каждая задача кладёт в очередь свои ссылки, а затем маркер ``_Completed``,
    поэтому к моменту обработки последнего маркера все ссылки уже прочитаны.
    """

    def __init__(
        self,
        config: CrawlConfig,
        on_finding: Optional[FindingCallback] = None,
    ) -> None:
        self.config = config
        self.on_finding = on_finding
        self.registry = VisitedRegistry()
        self.state = CrawlState.RUNNING
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self._findings: List[Finding] = []
        self._failures: List[PageFailure] = []
        self._tasks: Set[asyncio.Task] = set()
        self._limit: Optional[asyncio.Semaphore] = None

    async def __aenter__(self) -> AsyncCrawler:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            connector=TCPConnector(ssl=False),
            raise_for_status=False,
        )
        self.fetcher = Fetcher(self.session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self) -> CrawlReport:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        target = str(self.config.start_url)
        seed = normalize_url(target)
        logger.info("Старт обхода: %s", target)
        start = time.monotonic()

        queue: asyncio.Queue[_QueueItem] = asyncio.Queue(maxsize=self.config.queue_size)
        if self.config.max_concurrency is not None:
            self._limit = asyncio.Semaphore(self.config.max_concurrency)

        self.state = CrawlState.RUNNING
        self.registry.mark_visited(seed)
        self._dispatch(seed, queue, target=target)

        silent_polls = 0
        while self.registry.outstanding:
            try:
                item = await asyncio.wait_for(queue.get(), timeout=self.config.poll_interval)
            except asyncio.TimeoutError:
                silent_polls += 1
                self.state = CrawlState.QUIESCENT_CANDIDATE
                logger.debug(
                    "Нет новых данных %d интервал(ов) подряд, в работе: %d",
                    silent_polls, self.registry.outstanding,
                )
                continue

            silent_polls = 0
            self.state = CrawlState.RUNNING
            if isinstance(item, _Completed):
                self.registry.mark_completed()
            elif self.registry.mark_visited(item):
                logger.debug("Admitted %s", item)
                self._dispatch(item, queue)

        self.state = CrawlState.TERMINATED
        # tasks may still be returning after queueing their completion marker
        await asyncio.gather(*self._tasks)

        duration = time.monotonic() - start
        report = CrawlReport(
            start_url=seed,
            visited=self.registry.snapshot(),
            findings=list(self._findings),
            failures=list(self._failures),
            duration=duration,
        )
        logger.info(
            "Завершено: %d страниц, %d небезопасных ресурсов, %d ошибок за %.2f с",
            len(report.visited), len(report.findings), len(report.failures), duration,
        )
        return report

    def _dispatch(
        self, url: str, queue: asyncio.Queue[_QueueItem], target: Optional[str] = None
    ) -> None:
        task = asyncio.create_task(self._visit(url, queue, target or url))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _visit(self, url: str, queue: asyncio.Queue[_QueueItem], target: str) -> None:
        """Fetch *target* and scan it; *url* is its registry key."""
        try:
            async with self._limit or contextlib.nullcontext():
                page = await self._fetch_and_scan(target)
            for resource in sorted(page.resources):
                self._report(Finding(page=url, resource=resource))
            for link in sorted(page.links):
                await queue.put(link)
        except FetchError as exc:
            logger.warning("Failed %s: %s", url, exc.message)
            self._failures.append(PageFailure(url=url, reason=exc.message))
        except Exception as exc:
            logger.warning("Scan of %s failed: %r", url, exc)
            self._failures.append(PageFailure(url=url, reason=repr(exc)))
        finally:
            await queue.put(_Completed(url))

    async def _fetch_and_scan(self, target: str) -> PageScan:
        assert self.fetcher is not None
        response = await self.fetcher.fetch(target)
        try:
            # relative references resolve against the page actually served
            return await scan_stream(str(response.url), response.content)
        finally:
            response.release()

    def _report(self, finding: Finding) -> None:
        logger.info("Mixed content: %s", finding)
        self._findings.append(finding)
        if self.on_finding is None:
            return
        try:
            self.on_finding(finding)
        except Exception:
            logger.exception("Finding callback failed for %s", finding)
