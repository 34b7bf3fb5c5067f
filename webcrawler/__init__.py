# webcrawler/__init__.py
"""
webcrawler package initializer.
Defines package version and exposes CLI and the crawl entry points.
"""
__version__ = "0.1.0"

from webcrawler.cli import cli
from webcrawler.config import CrawlerSettings, build_settings, load_config
from webcrawler.crawler import CrawlController, CrawlReport, ParsedResult, crawl

__all__ = [
    "__version__",
    "cli",
    "CrawlController",
    "CrawlReport",
    "CrawlerSettings",
    "ParsedResult",
    "build_settings",
    "crawl",
    "load_config",
]
