import json
import re
from datetime import datetime, timezone

import pytest

from newsarchive.fetchers import Document, FetchFailure
from newsarchive.models import CrawlSettings, PublisherConfig
from newsarchive.models.publisher import scope_for

START_URL = "https://news.example.com/"
ARTICLE_URL = "https://news.example.com/kinh-doanh/gia-vang-tang-manh-20240520080000123.htm"
CATEGORY_URL = "https://news.example.com/the-thao.htm"
NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_publisher(**overrides):
    values = dict(
        name="news",
        start_url=START_URL,
        article_url_pattern=re.compile(r"https://news\.example\.com/[^/]+/.*-\d{17}\.htm"),
        category_url_pattern=re.compile(r"https://news\.example\.com/[^?#]*\.htm"),
        timestamp_pattern=re.compile(r".*-(\d{17})\.htm"),
        link_scope_pattern=scope_for(START_URL),
        content_selectors=("div.singular-content",),
        category_position=1,
        category_url_field="item",
        category_url_suffix=".htm",
        default_offset="+07:00",
        settings=CrawlSettings(request_delay_seconds=0.0, retry_delay_seconds=0.0),
    )
    values.update(overrides)
    return PublisherConfig(**values)


@pytest.fixture
def publisher():
    return make_publisher()


def jsonld(data):
    return f'<script type="application/ld+json">{json.dumps(data, ensure_ascii=False)}</script>'


def news_article_block(**fields):
    block = {
        "@context": "https://schema.org",
        "@type": "NewsArticle",
        "headline": "Giá vàng tăng mạnh",
        "description": "Giá vàng hôm nay tăng mạnh.",
        "datePublished": "2024-05-20T08:00:00+07:00",
        "author": [{"@type": "Person", "name": "Minh Anh"}],
    }
    block.update(fields)
    return {k: v for k, v in block.items() if v is not None}


def breadcrumb_block(category_url="https://news.example.com/kinh-doanh.htm"):
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": 1, "item": {"@id": START_URL, "name": "Trang chủ"}},
            {"@type": "ListItem", "position": 2, "item": {"@id": category_url, "name": "Kinh doanh"}},
        ],
    }


def article_html(*blocks, body="<p>Giá vàng</p><p>tăng mạnh</p>"):
    if not blocks:
        blocks = (news_article_block(), breadcrumb_block())
    scripts = "".join(jsonld(b) for b in blocks)
    return (
        f"<html><head><title>Article</title>{scripts}</head>"
        f'<body><div class="singular-content">{body}</div></body></html>'
    )


def listing_html(*links):
    anchors = "".join(f'<a href="{href}">link</a>' for href in links)
    return f"<html><body><nav>{anchors}</nav></body></html>"


class FakeFetcher:
    """Serves canned HTML by URL and records every fetch."""

    def __init__(self, pages):
        self.pages = dict(pages)
        self.calls = []
        self.closed = False

    def fetch(self, url):
        self.calls.append(url)
        if url not in self.pages:
            return FetchFailure(url=url, reason="http_404", status_code=404, attempts=1)
        return Document.from_html(url, self.pages[url])

    def close(self):
        self.closed = True


class StubResponse:
    def __init__(self, status_code=200, content=b"<html></html>", url=None):
        self.status_code = status_code
        self.content = content
        self.url = url


class StubSession:
    """Replays queued responses; an exception instance in the queue is raised."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True
