# webcrawler/crawler/models.py
"""
Data models for the crawl engine.
"""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from webcrawler.errors import FetchError
from webcrawler.utils import extract_domain


@dataclass(frozen=True, slots=True)
class FrontierEntry:
    """A normalized URL waiting to be fetched, with its link distance from a seed."""

    url: str
    depth: int = 0

    def __post_init__(self) -> None:
        if self.depth < 0:
            raise ValueError(f"depth must be >= 0, got {self.depth}")

    @property
    def domain(self) -> str:
        return extract_domain(self.url)


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """What a fetcher returns for one page: outbound links in document order and the time spent."""

    links: Tuple[str, ...]
    duration: float


@dataclass(frozen=True, slots=True)
class ParsedResult:
    """A successfully fetched page."""

    url: str
    depth: int
    links: Tuple[str, ...]
    fetch_duration: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "depth": self.depth,
            "links": list(self.links),
            "fetch_duration": round(self.fetch_duration, 6),
        }


@dataclass(frozen=True, slots=True)
class CrawlFailure:
    """A page that could not be fetched and the error that stopped it."""

    url: str
    depth: int
    error: FetchError

    @property
    def kind(self) -> str:
        return self.error.kind

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "depth": self.depth, "kind": self.kind, "message": str(self.error)}


class TerminationCause(str, enum.Enum):
    """Why a crawl stopped."""

    COMPLETED = "completed"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class CrawlReport:
    """Everything a finished crawl produced, in the order it was produced."""

    results: List[ParsedResult] = field(default_factory=list)
    errors: List[CrawlFailure] = field(default_factory=list)
    cause: TerminationCause = TerminationCause.COMPLETED
    elapsed: float = 0.0
    abandoned: int = 0

    @property
    def urls(self) -> List[str]:
        return [r.url for r in self.results]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cause": self.cause.value,
            "elapsed": round(self.elapsed, 6),
            "abandoned": self.abandoned,
            "results": [r.to_dict() for r in self.results],
            "errors": [e.to_dict() for e in self.errors],
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)
