# File: tests/conftest.py
import asyncio
import time
from typing import Dict, Iterable, List, Tuple

import pytest

from webcrawler.config import CrawlerSettings, build_settings
from webcrawler.crawler.fetcher import LinkFetcher
from webcrawler.crawler.models import FetchOutcome
from webcrawler.errors import FetchFailed, FetchTimeout
from webcrawler.logger import init_logging


@pytest.fixture(autouse=True)
def fresh_logging():
    """Rebind the project logger to the current stderr (CliRunner swaps streams)."""
    init_logging(level="DEBUG")
    yield


class GraphFetcher(LinkFetcher):
    """
    In-memory fetcher driven by a link graph.

    Records (url, start, end) for every call so tests can check ordering,
    overlap and politeness gaps.
    """

    def __init__(
        self,
        graph: Dict[str, Iterable[str]],
        latency: float = 0.0,
        timeouts: Iterable[str] = (),
        failures: Iterable[str] = (),
    ) -> None:
        self.graph = {url: list(links) for url, links in graph.items()}
        self.latency = latency
        self.timeouts = set(timeouts)
        self.failures = set(failures)
        self.calls: List[Tuple[str, float, float]] = []
        self.active = 0
        self.peak_active = 0
        self.opened = False
        self.closed = False

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    @property
    def fetched(self) -> List[str]:
        return [url for url, _, _ in self.calls]

    async def fetch_links(self, url: str, timeout: float) -> FetchOutcome:
        start = time.monotonic()
        self.active += 1
        self.peak_active = max(self.peak_active, self.active)
        try:
            if url in self.timeouts:
                await asyncio.sleep(timeout)
                raise FetchTimeout(url, timeout)
            if url in self.failures:
                raise FetchFailed(url, f"connection refused: {url}")
            if self.latency:
                await asyncio.sleep(self.latency)
            return FetchOutcome(tuple(self.graph.get(url, ())), time.monotonic() - start)
        finally:
            self.active -= 1
            self.calls.append((url, start, time.monotonic()))


@pytest.fixture()
def graph_fetcher_factory():
    """Build a GraphFetcher for a test."""
    return GraphFetcher


@pytest.fixture()
def fast_settings() -> CrawlerSettings:
    """
    Settings with short timeouts and no politeness delay.
    """
    return build_settings(
        fetch_timeout=1.0,
        crawl_timeout=5.0,
        concurrency=4,
        max_depth=3,
        politeness_base_delay=0.0,
        shutdown_grace=0.5,
        user_agent="TestAgent/1.0",
    )
