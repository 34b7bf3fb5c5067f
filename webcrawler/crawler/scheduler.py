# webcrawler/crawler/scheduler.py
"""
Worker pool that drains the frontier.

Each worker loops: pop an entry, wait for the domain's politeness slot, fetch
the page (abandoning the fetch if the crawl is cancelled), claim and queue the
discovered links one level deeper, record the result. Fetch errors are recorded
against the URL and the worker carries on.
"""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, List, Optional, Sequence

from webcrawler.config import CrawlerSettings
from webcrawler.crawler.fetcher import LinkFetcher
from webcrawler.crawler.models import FetchOutcome, FrontierEntry, ParsedResult
from webcrawler.crawler.throttle import PolitenessThrottle
from webcrawler.errors import FetchError, InvalidURL
from webcrawler.logger import logger
from webcrawler.utils import extract_domain, normalize_url

if TYPE_CHECKING:
    from webcrawler.crawler.controller import CrawlRun

__all__ = ("CrawlScheduler",)


class CrawlScheduler:
    """Fixed-size pool of ``settings.worker_count`` crawl workers."""

    def __init__(
        self,
        run: CrawlRun,
        fetcher: LinkFetcher,
        throttle: PolitenessThrottle,
        settings: CrawlerSettings,
    ) -> None:
        self.run = run
        self.fetcher = fetcher
        self.throttle = throttle
        self.settings = settings
        self._workers: List[asyncio.Task[None]] = []
        self._in_flight = 0
        self.peak_in_flight = 0

    @property
    def workers(self) -> Sequence[asyncio.Task[None]]:
        return tuple(self._workers)

    def start(self) -> None:
        if self._workers:
            raise RuntimeError("scheduler already started")
        self._workers = [
            asyncio.create_task(self._worker(i), name=f"crawl-worker-{i}")
            for i in range(self.settings.worker_count)
        ]
        logger.debug("Started %d crawl workers", len(self._workers))

    async def wait_closed(self, timeout: float) -> int:
        """Wait up to *timeout* seconds for workers to exit, cancel the rest; return how many were cancelled."""
        if not self._workers:
            return 0
        _, pending = await asyncio.wait(self._workers, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        return len(pending)

    def raise_worker_errors(self) -> None:
        """Re-raise the first unexpected exception a worker died with."""
        for task in self._workers:
            if task.done() and not task.cancelled():
                exc = task.exception()
                if exc is not None:
                    raise exc

    async def _worker(self, idx: int) -> None:
        frontier = self.run.frontier
        while True:
            entry = await frontier.pop()
            if entry is None:
                logger.debug("Worker %d: frontier closed, exiting", idx)
                return
            try:
                await self._process(entry)
            finally:
                frontier.task_done()

    async def _process(self, entry: FrontierEntry) -> None:
        domain = entry.domain
        if not await self.throttle.acquire(domain):
            return

        self._in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
        try:
            outcome = await self._fetch(entry.url)
        except FetchError as exc:
            self.run.record_error(entry, exc)
            return
        finally:
            self._in_flight -= 1
        if outcome is None:
            return

        self.throttle.record_duration(domain, outcome.duration)
        links = self._enqueue_links(entry, outcome.links)
        self.run.record_result(
            ParsedResult(url=entry.url, depth=entry.depth, links=tuple(links), fetch_duration=outcome.duration)
        )

    async def _fetch(self, url: str) -> Optional[FetchOutcome]:
        """Fetch *url*, or return ``None`` if the crawl is cancelled first."""
        fetch_task = asyncio.ensure_future(self.fetcher.fetch_links(url, self.settings.fetch_timeout))
        cancel_wait = asyncio.ensure_future(self.run.cancelled.wait())
        try:
            await asyncio.wait({fetch_task, cancel_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_wait.cancel()
            if not fetch_task.done():
                fetch_task.cancel()
        if fetch_task.done() and not fetch_task.cancelled():
            return fetch_task.result()
        await asyncio.gather(fetch_task, return_exceptions=True)
        logger.debug("Fetch of %s abandoned: crawl cancelled", url)
        return None

    def _enqueue_links(self, entry: FrontierEntry, raw_links: Sequence[str]) -> List[str]:
        links: List[str] = []
        next_depth = entry.depth + 1
        for raw in raw_links:
            try:
                link = normalize_url(raw)
            except InvalidURL as exc:
                logger.debug("Skipping link on %s: %s", entry.url, exc)
                continue
            links.append(link)
            if self.settings.same_domain_only and extract_domain(link) not in self.run.seed_domains:
                continue
            if self.run.visited.try_claim(link, next_depth):
                self.run.frontier.push(FrontierEntry(link, next_depth))
        return links
