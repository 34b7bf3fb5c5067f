# webcrawler/crawler/fetcher.py
"""
Fetcher capability: retrieve a page and return its outbound links.

:class:`LinkFetcher` is the contract the crawl engine depends on;
:class:`HttpLinkFetcher` is the aiohttp implementation. Tests plug in their own
subclasses.
"""
from __future__ import annotations

import abc
import asyncio
import random
import time
from typing import List, Optional, Sequence

from aiohttp import ClientError, ClientSession

from webcrawler.config import CrawlerSettings
from webcrawler.crawler.link_extractor import HtmlLinkParser, LinkParser
from webcrawler.crawler.models import FetchOutcome
from webcrawler.errors import FetchFailed, FetchTimeout
from webcrawler.logger import logger

__all__ = ("LinkFetcher", "HttpLinkFetcher")

_HTML_TYPES = ("text/html", "application/xhtml+xml")


class LinkFetcher(abc.ABC):
    """
    Retrieves a URL and extracts its links within a bounded time.

    Implementations must raise :class:`~webcrawler.errors.FetchTimeout` when the
    supplied timeout is exceeded and :class:`~webcrawler.errors.FetchFailed` on
    network or protocol errors. Used as an async context manager by the
    controller, which owns the instance for one crawl run.
    """

    async def __aenter__(self) -> LinkFetcher:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open(self) -> None:
        """Acquire transport resources. No-op by default."""

    async def close(self) -> None:
        """Release transport resources. No-op by default."""

    @abc.abstractmethod
    async def fetch_links(self, url: str, timeout: float) -> FetchOutcome:
        """Fetch *url* and return its links in document order."""


class HttpLinkFetcher(LinkFetcher):
    """HTTP fetcher with timeout, retries/backoff and HTML link extraction."""

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(
        self,
        settings: CrawlerSettings,
        parser: Optional[LinkParser] = None,
        session: Optional[ClientSession] = None,
        backoff_base: float = 1.0,
    ) -> None:
        self.settings = settings
        self.parser = parser or HtmlLinkParser()
        self.session = session
        self.backoff_base = backoff_base
        self._owns_session = session is None

    async def open(self) -> None:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                headers={"User-Agent": self.settings.user_agent},
                raise_for_status=False,
            )
            self._owns_session = True

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch_links(self, url: str, timeout: float) -> FetchOutcome:
        if not self.session:
            raise RuntimeError("Session not initialized")
        start = time.monotonic()
        try:
            links = await asyncio.wait_for(self._fetch_with_retries(url), timeout=timeout)
        except asyncio.TimeoutError:
            raise FetchTimeout(url, timeout) from None
        return FetchOutcome(tuple(links), time.monotonic() - start)

    async def _fetch_with_retries(self, url: str) -> List[str]:
        attempts = 0
        while True:
            try:
                return await self._fetch_once(url)
            except FetchFailed as exc:
                if exc.status is not None and exc.status not in self._RETRY_STATUS:
                    raise
                attempts += 1
                if attempts > self.settings.retry_times:
                    raise
                backoff = min(60.0, self.backoff_base * 2**attempts) + random.random() * self.backoff_base
                logger.debug(
                    "Retry %d/%d for %s after %.2f s", attempts, self.settings.retry_times, url, backoff
                )
                await asyncio.sleep(backoff)

    async def _fetch_once(self, url: str) -> List[str]:
        assert self.session is not None
        try:
            async with self.session.get(url) as resp:
                status = resp.status
                if status >= 400:
                    raise FetchFailed(url, f"HTTP {status} for {url}", status=status)
                mime = resp.headers.get("Content-Type", "").split(";", 1)[0].strip().lower()
                if mime not in _HTML_TYPES:
                    logger.debug("Skipping link extraction for %s (%s)", url, mime or "no content type")
                    return []
                text = await resp.text(errors="replace")
                return self.parser.parse(str(resp.url), text)
        except ClientError as exc:
            raise FetchFailed(url, f"{type(exc).__name__}: {exc}") from exc
