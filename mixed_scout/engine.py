# File: mixed_scout/engine.py
"""mixed_scout.engine: точка запуска обхода для CLI и тестов."""

from __future__ import annotations

from typing import Optional

from mixed_scout.config import CrawlConfig
from mixed_scout.crawler.crawler import AsyncCrawler, FindingCallback
from mixed_scout.crawler.models import CrawlReport

__all__ = ["start_scan"]


async def start_scan(config: CrawlConfig, on_finding: Optional[FindingCallback] = None) -> CrawlReport:
    """Открывает сессию, обходит сайт и возвращает итоговый отчёт."""
    async with AsyncCrawler(config, on_finding=on_finding) as crawler:
        return await crawler.crawl()
