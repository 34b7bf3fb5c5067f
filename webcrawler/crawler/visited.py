# webcrawler/crawler/visited.py
"""
Visited-URL bookkeeping and the depth policy for one crawl run.
"""
from __future__ import annotations

from typing import Dict


class VisitedSet:
    """
    Normalized URLs already claimed for fetching in this crawl.

    :meth:`try_claim` is a single check-and-mark with no suspension point, so
    on one event loop exactly one of any number of concurrent claims for the
    same URL wins.
    """

    def __init__(self, max_depth: int = 0) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.max_depth = max_depth
        self._seen: Dict[str, bool] = {}

    def depth_allowed(self, depth: int) -> bool:
        return self.max_depth == 0 or depth <= self.max_depth

    def try_claim(self, url: str, depth: int) -> bool:
        """
        Mark *url* visited and return ``True`` if the caller may fetch it.

        Returns ``False`` when the URL was already claimed or *depth* exceeds
        the limit. A refused-for-depth URL is not marked, so a shorter path
        discovered later can still claim it.
        """
        if not self.depth_allowed(depth):
            return False
        if url in self._seen:
            return False
        self._seen[url] = True
        return True

    def clear(self) -> None:
        self._seen.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._seen

    def __len__(self) -> int:
        return len(self._seen)
