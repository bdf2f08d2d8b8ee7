from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Optional, Pattern, Tuple
from urllib.parse import urlparse


@dataclass(frozen=True, slots=True)
class CrawlSettings:
    """Crawl limits and politeness knobs.

    Global defaults come from the ``settings`` block of the YAML file; a
    publisher may override any of them under its ``overrides`` key.
    """

    max_urls_per_crawl: int = 500
    default_max_level: int = 2
    max_level_within_six_months: int = 5
    freshness_window_days: int = 180
    request_delay_seconds: float = 0.3
    retry_delay_seconds: float = 1.0
    max_retries: int = 3
    retry_status_codes: Tuple[int, ...] = (429,)
    request_timeout_seconds: float = 30.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/127.0.0.0 Safari/537.36"
    )
    default_content_selectors: Tuple[str, ...] = (
        "div[itemprop=\"articleBody\"]",
        "article",
    )
    article_types: Tuple[str, ...] = ("NewsArticle",)
    rejected_types: Tuple[str, ...] = ("ItemList",)
    breadcrumb_types: Tuple[str, ...] = ("BreadcrumbList",)

    @property
    def freshness_window(self) -> timedelta:
        return timedelta(days=self.freshness_window_days)


@dataclass(frozen=True, slots=True)
class PublisherConfig:
    """Everything that differs between publisher site layouts."""

    name: str
    start_url: str
    article_url_pattern: Pattern[str]
    category_url_pattern: Pattern[str]
    timestamp_pattern: Pattern[str]
    link_scope_pattern: Pattern[str]
    content_selectors: Tuple[str, ...] = ()
    category_position: int = 1
    nested_breadcrumb: bool = False
    category_url_field: str = "item"
    category_url_suffix: str = ""
    default_offset: str = "+00:00"
    headers: Dict[str, str] = field(default_factory=dict)
    settings: CrawlSettings = field(default_factory=CrawlSettings)

    def is_article_url(self, url: str) -> bool:
        return bool(self.article_url_pattern.fullmatch(url))

    def is_category_url(self, url: str) -> bool:
        return bool(self.category_url_pattern.fullmatch(url))

    def url_timestamp(self, url: str) -> Optional[str]:
        match = self.timestamp_pattern.fullmatch(url)
        if not match or not match.groups():
            return None
        return match.group(1) or None


def scope_for(start_url: str) -> Pattern[str]:
    """Default link scope: anything under the start URL's scheme and host."""
    parsed = urlparse(start_url)
    return re.compile(re.escape(f"{parsed.scheme}://{parsed.netloc}") + r"(/.*)?")
