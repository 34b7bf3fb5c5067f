# webcrawler/crawler/controller.py
"""
Top-level crawl orchestration.

:class:`CrawlController` seeds the frontier, starts the worker pool and waits
for whichever comes first: the frontier draining, the crawl timeout, or an
external :meth:`CrawlController.cancel`. It then broadcasts cancellation
(frontier closed, throttle waiters released, in-flight fetches abandoned),
gives the workers a short grace period and returns what was collected. A
timeout is a partial result, not an error.
"""
from __future__ import annotations

import asyncio
import time
from typing import Iterable, List, Optional, Set, Union

from webcrawler.config import CrawlerSettings
from webcrawler.crawler.fetcher import HttpLinkFetcher, LinkFetcher
from webcrawler.crawler.frontier import Frontier
from webcrawler.crawler.models import (
    CrawlFailure,
    CrawlReport,
    FrontierEntry,
    ParsedResult,
    TerminationCause,
)
from webcrawler.crawler.scheduler import CrawlScheduler
from webcrawler.crawler.throttle import PolitenessThrottle
from webcrawler.crawler.visited import VisitedSet
from webcrawler.errors import FetchError, InvalidURL
from webcrawler.logger import logger
from webcrawler.utils import extract_domain, normalize_url, remove_duplicates

__all__ = ("CrawlRun", "CrawlController", "crawl")


class CrawlRun:
    """State of one crawl invocation; never shared between runs."""

    def __init__(self, settings: CrawlerSettings) -> None:
        self.settings = settings
        self.visited = VisitedSet(settings.max_depth)
        self.frontier = Frontier()
        self.results: List[ParsedResult] = []
        self.errors: List[CrawlFailure] = []
        self.cancelled = asyncio.Event()
        self.seed_domains: Set[str] = set()
        self.started = time.monotonic()

    def seed(self, seeds: Iterable[str]) -> int:
        """Claim and queue seeds at depth 0; invalid ones are logged and skipped."""
        queued = 0
        for raw in remove_duplicates(list(seeds)):
            try:
                url = normalize_url(raw)
            except InvalidURL as exc:
                logger.warning("Skipping invalid seed: %s", exc)
                continue
            self.seed_domains.add(extract_domain(url))
            if self.visited.try_claim(url, 0):
                self.frontier.push(FrontierEntry(url, 0))
                queued += 1
        return queued

    def record_result(self, result: ParsedResult) -> None:
        self.results.append(result)
        logger.debug("Fetched %s (depth %d, %d links)", result.url, result.depth, len(result.links))

    def record_error(self, entry: FrontierEntry, error: FetchError) -> None:
        self.errors.append(CrawlFailure(url=entry.url, depth=entry.depth, error=error))
        logger.warning("Failed %s: %s", entry.url, error)

    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def report(self, cause: TerminationCause, abandoned: int) -> CrawlReport:
        return CrawlReport(
            results=list(self.results),
            errors=list(self.errors),
            cause=cause,
            elapsed=self.elapsed(),
            abandoned=abandoned,
        )


class CrawlController:
    """Runs crawls with one settings object; owns the fetcher for the duration of each run."""

    def __init__(
        self,
        settings: Optional[CrawlerSettings] = None,
        fetcher: Optional[LinkFetcher] = None,
    ) -> None:
        self.settings = settings or CrawlerSettings()
        self._fetcher = fetcher
        self._run: Optional[CrawlRun] = None

    @property
    def running(self) -> bool:
        return self._run is not None

    def cancel(self) -> None:
        """Stop the current crawl early. Idempotent; safe to call from a signal handler on the loop."""
        if self._run is not None and not self._run.cancelled.is_set():
            logger.info("Crawl cancellation requested")
            self._run.cancelled.set()

    async def crawl(self, seeds: Union[str, Iterable[str]]) -> CrawlReport:
        if self._run is not None:
            raise RuntimeError("a crawl is already running on this controller")
        if isinstance(seeds, str):
            seeds = [seeds]
        settings = self.settings
        run = CrawlRun(settings)
        self._run = run
        try:
            seeded = run.seed(seeds)
            logger.info(
                "Crawl started: %d seed(s), %d worker(s), max depth %s, timeout %.1f s",
                seeded,
                settings.worker_count,
                settings.max_depth or "unlimited",
                settings.crawl_timeout,
            )
            if settings.crawl_timeout == 0:
                return self._finish(run, TerminationCause.TIMEOUT, run.frontier.close())
            if not seeded:
                return self._finish(run, TerminationCause.COMPLETED, run.frontier.close())

            throttle = PolitenessThrottle(settings.politeness_base_delay)
            fetcher = self._fetcher if self._fetcher is not None else HttpLinkFetcher(settings)
            async with fetcher:
                scheduler = CrawlScheduler(run, fetcher, throttle, settings)
                scheduler.start()
                try:
                    cause = await self._wait_for_termination(run, scheduler)
                finally:
                    abandoned = self._broadcast_cancel(run, throttle)
                    stragglers = await scheduler.wait_closed(settings.shutdown_grace)
                    if stragglers:
                        logger.warning("%d worker(s) did not stop within %.1f s", stragglers, settings.shutdown_grace)
                scheduler.raise_worker_errors()
                logger.debug("Peak concurrent fetches: %d", scheduler.peak_in_flight)
            return self._finish(run, cause, abandoned)
        finally:
            self._run = None

    async def _wait_for_termination(self, run: CrawlRun, scheduler: CrawlScheduler) -> TerminationCause:
        drained = asyncio.ensure_future(run.frontier.join())
        cancelled = asyncio.ensure_future(run.cancelled.wait())
        workers_gone = asyncio.ensure_future(asyncio.wait(scheduler.workers))
        waiters = {drained, cancelled, workers_gone}
        remaining = max(0.0, self.settings.crawl_timeout - run.elapsed())
        try:
            done, _ = await asyncio.wait(waiters, timeout=remaining, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()
        if drained in done:
            return TerminationCause.COMPLETED
        if cancelled in done:
            return TerminationCause.CANCELLED
        if workers_gone in done:
            # every worker died; raise_worker_errors() reports why
            return TerminationCause.COMPLETED
        logger.info("Crawl timeout of %.1f s reached", self.settings.crawl_timeout)
        return TerminationCause.TIMEOUT

    @staticmethod
    def _broadcast_cancel(run: CrawlRun, throttle: PolitenessThrottle) -> int:
        run.cancelled.set()
        throttle.cancel()
        return run.frontier.close()

    @staticmethod
    def _finish(run: CrawlRun, cause: TerminationCause, abandoned: int) -> CrawlReport:
        report = run.report(cause, abandoned)
        rate = len(report.results) / report.elapsed if report.elapsed else 0
        logger.info(
            "Crawl finished (%s): %d pages, %d errors in %.2f s (%.2f pages/s)",
            cause.value,
            len(report.results),
            len(report.errors),
            report.elapsed,
            rate,
        )
        if abandoned:
            logger.info("Abandoned %d queued URL(s)", abandoned)
        return report


async def crawl(
    seeds: Union[str, Iterable[str]],
    settings: Optional[CrawlerSettings] = None,
    fetcher: Optional[LinkFetcher] = None,
) -> CrawlReport:
    """Crawl from *seeds* and return the collected results and errors."""
    return await CrawlController(settings, fetcher).crawl(seeds)
