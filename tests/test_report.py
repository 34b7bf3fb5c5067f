# File: tests/test_report.py
import json

from webcrawler.crawler.models import CrawlFailure, CrawlReport, ParsedResult, TerminationCause
from webcrawler.errors import FetchTimeout
from webcrawler.report import render_json


def make_report() -> CrawlReport:
    return CrawlReport(
        results=[ParsedResult("http://a.test/", 0, ("http://b.test/",), 0.125)],
        errors=[CrawlFailure("http://b.test/", 1, FetchTimeout("http://b.test/", 1.0))],
        cause=TerminationCause.TIMEOUT,
        elapsed=1.5,
        abandoned=2,
    )


def test_report_json_shape():
    data = json.loads(make_report().json())
    assert data["cause"] == "timeout"
    assert data["abandoned"] == 2
    assert data["results"] == [
        {"url": "http://a.test/", "depth": 0, "links": ["http://b.test/"], "fetch_duration": 0.125}
    ]
    assert data["errors"][0]["kind"] == "FetchTimeout"
    assert data["errors"][0]["url"] == "http://b.test/"


def test_render_json_creates_parent_dirs(tmp_path):
    out = render_json(make_report(), tmp_path / "nested" / "crawl.json")
    assert out.exists()
    assert json.loads(out.read_text(encoding="utf-8"))["elapsed"] == 1.5
