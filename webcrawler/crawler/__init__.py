"""Crawl engine: frontier, throttle, visited set, scheduler and controller."""
from webcrawler.crawler.controller import CrawlController, CrawlRun, crawl
from webcrawler.crawler.fetcher import HttpLinkFetcher, LinkFetcher
from webcrawler.crawler.frontier import Frontier
from webcrawler.crawler.link_extractor import HtmlLinkParser, LinkParser
from webcrawler.crawler.models import (
    CrawlFailure,
    CrawlReport,
    FetchOutcome,
    FrontierEntry,
    ParsedResult,
    TerminationCause,
)
from webcrawler.crawler.scheduler import CrawlScheduler
from webcrawler.crawler.throttle import PolitenessThrottle
from webcrawler.crawler.visited import VisitedSet

__all__ = [
    "CrawlController",
    "CrawlFailure",
    "CrawlReport",
    "CrawlRun",
    "CrawlScheduler",
    "FetchOutcome",
    "Frontier",
    "FrontierEntry",
    "HtmlLinkParser",
    "HttpLinkFetcher",
    "LinkFetcher",
    "LinkParser",
    "ParsedResult",
    "PolitenessThrottle",
    "TerminationCause",
    "VisitedSet",
    "crawl",
]
