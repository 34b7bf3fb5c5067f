# File: tests/test_link_extractor.py
from webcrawler.crawler.link_extractor import HtmlLinkParser


def test_links_in_document_order_with_duplicates():
    html = (
        '<html><body>'
        '<a href="/one">1</a>'
        '<a href="two">2</a>'
        '<a href="http://external.test/x">X</a>'
        '<a href="/one">again</a>'
        '</body></html>'
    )
    links = HtmlLinkParser().parse("http://a.test/dir/page", html)
    assert links == [
        "http://a.test/one",
        "http://a.test/dir/two",
        "http://external.test/x",
        "http://a.test/one",
    ]


def test_skips_non_navigational_hrefs():
    html = (
        '<a href="mailto:me@a.test">m</a>'
        '<a href="javascript:void(0)">j</a>'
        '<a href="tel:+100">t</a>'
        '<a href="#section">f</a>'
        '<a href="  ">blank</a>'
        '<a>no href</a>'
        '<a href="/kept">k</a>'
    )
    assert HtmlLinkParser().parse("http://a.test/", html) == ["http://a.test/kept"]


def test_base_href_is_respected():
    html = '<head><base href="http://cdn.test/root/"></head><body><a href="page">p</a></body>'
    assert HtmlLinkParser().parse("http://a.test/", html) == ["http://cdn.test/root/page"]


def test_bytes_document():
    assert HtmlLinkParser().parse("http://a.test/", b'<a href="/b">b</a>') == ["http://a.test/b"]
