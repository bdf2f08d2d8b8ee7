from newsarchive.fetchers import Document, extract_links
from newsarchive.models.publisher import scope_for

PAGE_URL = "https://news.example.com/kinh-doanh/index.htm"

PAGE = """
<html><body>
  <a href="chung-khoan.htm">relative</a>
  <a href="/the-thao.htm#comments">root relative with fragment</a>
  <a href="https://news.example.com/xa-hoi.htm">absolute</a>
  <a href="//cdn.example.net/photo.htm">protocol relative</a>
  <a href="https://other.example.org/world.htm">other host</a>
  <a href="mailto:editor@news.example.com">mail</a>
  <a href="javascript:void(0)">script</a>
  <a href="">empty</a>
  <a>no href</a>
</body></html>
"""


def test_extract_links_resolves_and_filters_schemes():
    links = extract_links(Document.from_html(PAGE_URL, PAGE))

    assert links == {
        "https://news.example.com/kinh-doanh/chung-khoan.htm",
        "https://news.example.com/the-thao.htm",
        "https://news.example.com/xa-hoi.htm",
        "https://cdn.example.net/photo.htm",
        "https://other.example.org/world.htm",
    }


def test_extract_links_applies_scope():
    links = extract_links(Document.from_html(PAGE_URL, PAGE), scope=scope_for("https://news.example.com/"))

    assert links == {
        "https://news.example.com/kinh-doanh/chung-khoan.htm",
        "https://news.example.com/the-thao.htm",
        "https://news.example.com/xa-hoi.htm",
    }


def test_scope_does_not_match_lookalike_hosts():
    scope = scope_for("https://news.example.com/")

    assert scope.fullmatch("https://news.example.com")
    assert scope.fullmatch("https://news.example.com/a/b.htm")
    assert not scope.fullmatch("https://news.example.com.evil.net/a.htm")
    assert not scope.fullmatch("http://news.example.com/a.htm")


def test_page_without_links():
    assert extract_links(Document.from_html(PAGE_URL, "<p>nothing here</p>")) == set()
