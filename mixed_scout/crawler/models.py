# mixed_scout/crawler/models.py
"""
Data models for the MixedScout crawler.
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import List


@dataclass(frozen=True, slots=True)
class PageScan:
    """What one page yielded: insecure resource URLs and same-site links."""

    resources: frozenset[str] = frozenset()
    links: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class Finding:
    """Insecure resource referenced from a page."""

    page: str
    resource: str

    def __str__(self) -> str:
        return f"{self.page}: {self.resource}"


@dataclass(frozen=True, slots=True)
class PageFailure:
    """A page whose fetch or scan failed."""

    url: str
    reason: str


@dataclass(slots=True)
class CrawlReport:
    """Result of one crawl run."""

    start_url: str
    visited: List[str] = field(default_factory=list)
    findings: List[Finding] = field(default_factory=list)
    failures: List[PageFailure] = field(default_factory=list)
    duration: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)
