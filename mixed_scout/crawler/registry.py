# mixed_scout/crawler/registry.py
"""
Registry of URLs admitted for fetching during one crawl.
"""
from __future__ import annotations

import threading
from typing import List, Set


class VisitedRegistry:
    """Set of admitted URLs with an atomic insert-if-absent.

    No ``contains`` query is exposed: admission goes through :meth:`mark_visited` only.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._visited: Set[str] = set()
        self._completed = 0

    def mark_visited(self, url: str) -> bool:
        """Record *url*; return True only for the caller that inserted it."""
        with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            return True

    def mark_completed(self) -> None:
        """Record that the fetch-and-scan of one admitted URL has finished."""
        with self._lock:
            if self._completed >= len(self._visited):
                raise RuntimeError("more completions than admitted URLs")
            self._completed += 1

    @property
    def admitted(self) -> int:
        with self._lock:
            return len(self._visited)

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    @property
    def outstanding(self) -> int:
        with self._lock:
            return len(self._visited) - self._completed

    def snapshot(self) -> List[str]:
        """Sorted copy of the admitted URLs."""
        with self._lock:
            return sorted(self._visited)

    def __len__(self) -> int:
        return self.admitted

    def __str__(self) -> str:
        return "\n".join(self.snapshot())
