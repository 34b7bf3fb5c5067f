# File: webcrawler/engine.py
"""webcrawler.engine: Синхронный фасад для запуска обхода из CLI и скриптов."""

from __future__ import annotations

import asyncio
import signal
from typing import Iterable, Optional, Union

from webcrawler.config import CrawlerSettings
from webcrawler.crawler.controller import CrawlController
from webcrawler.crawler.fetcher import LinkFetcher
from webcrawler.crawler.models import CrawlReport
from webcrawler.logger import logger

__all__ = ["Engine", "start_crawl"]

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Engine:
    """Фасад для CLI и тестов: запуск обхода в собственном event loop."""

    def __init__(self, settings: CrawlerSettings, fetcher: Optional[LinkFetcher] = None) -> None:
        """Инициализирует Engine с заданными настройками и (необязательно) своим fetcher."""
        self.settings = settings
        self.fetcher = fetcher

    def run(self, seeds: Union[str, Iterable[str]]) -> CrawlReport:
        """Запускает обход и возвращает отчёт. SIGINT/SIGTERM мягко останавливают обход."""
        logger.info("Starting crawl…")
        return asyncio.run(self._run(seeds))

    async def _run(self, seeds: Union[str, Iterable[str]]) -> CrawlReport:
        controller = CrawlController(self.settings, self.fetcher)
        loop = asyncio.get_running_loop()
        installed = []
        for sig in _STOP_SIGNALS:
            try:
                loop.add_signal_handler(sig, controller.cancel)
            except (NotImplementedError, RuntimeError, ValueError):
                # не главный поток или платформа без поддержки
                logger.debug("Signal handler for %s not installed", sig.name)
            else:
                installed.append(sig)
        try:
            return await controller.crawl(seeds)
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)


def start_crawl(seeds: Union[str, Iterable[str]], settings: CrawlerSettings) -> CrawlReport:
    """Запускает обход с HTTP fetcher по умолчанию."""
    return Engine(settings).run(seeds)
