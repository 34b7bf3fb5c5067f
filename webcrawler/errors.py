"""
Exception hierarchy for the crawler.

Per-page failures (:class:`FetchTimeout`, :class:`FetchFailed`) are recorded
against the URL and never abort a crawl; :class:`ConfigurationError` is raised
before the first fetch.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "CrawlerError",
    "InvalidURL",
    "FetchError",
    "FetchTimeout",
    "FetchFailed",
    "ConfigurationError",
)


class CrawlerError(Exception):
    """Base class for every error raised by the crawler."""


class InvalidURL(CrawlerError, ValueError):
    """Malformed or unsupported URL (seed or discovered link)."""

    def __init__(self, url: str, reason: str = "malformed URL") -> None:
        super().__init__(f"{reason}: {url!r}")
        self.url = url
        self.reason = reason


class FetchError(CrawlerError):
    """A single page could not be fetched."""

    kind = "FetchError"

    def __init__(self, url: str, message: str = "") -> None:
        super().__init__(message or f"{self.kind} for {url}")
        self.url = url


class FetchTimeout(FetchError):
    """The fetch exceeded its per-call timeout."""

    kind = "FetchTimeout"

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(url, f"fetch of {url} exceeded {timeout:.2f}s")
        self.timeout = timeout


class FetchFailed(FetchError):
    """Network or protocol failure, including HTTP error statuses."""

    kind = "FetchFailed"

    def __init__(self, url: str, message: str = "", status: Optional[int] = None) -> None:
        super().__init__(url, message)
        self.status = status


class ConfigurationError(CrawlerError, ValueError):
    """Invalid crawler settings."""
