# webcrawler/crawler/link_extractor.py
"""
Link extraction for fetched documents.

The crawl engine never calls a parser directly: parsers are handed to a
:class:`~webcrawler.crawler.fetcher.LinkFetcher`, which returns the links.
"""
from __future__ import annotations

import abc
from typing import List, Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

_SKIP_PREFIXES = ("mailto:", "javascript:", "tel:", "data:", "#")


class LinkParser(abc.ABC):
    """Extracts outbound link URLs from a document."""

    @abc.abstractmethod
    def parse(self, base_url: str, document: Union[str, bytes]) -> List[str]:
        """Return absolute link URLs in document order (duplicates allowed)."""


class HtmlLinkParser(LinkParser):
    """``<a href>`` extraction with BeautifulSoup."""

    def __init__(self, features: str = "html.parser") -> None:
        self.features = features

    def parse(self, base_url: str, document: Union[str, bytes]) -> List[str]:
        soup = BeautifulSoup(document, self.features)
        base = base_url
        base_tag = soup.find("base", href=True)
        if isinstance(base_tag, Tag):
            base_href = base_tag.get("href")
            if isinstance(base_href, str) and base_href.strip():
                base = urljoin(base_url, base_href.strip())

        links: List[str] = []
        for tag in soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href_val = tag.get("href")
            if not isinstance(href_val, str):
                continue
            raw = href_val.strip()
            if not raw or raw.lower().startswith(_SKIP_PREFIXES):
                continue
            links.append(urljoin(base, raw))
        return links
