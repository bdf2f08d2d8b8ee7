"""Configuration-driven article extraction from fetched pages.

Metadata (title, description, author, publish time, category) comes from the
page's JSON-LD blocks; the body text comes from CSS selectors. Every
site-specific difference lives in ``PublisherConfig``.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

import soupsieve
from bs4 import BeautifulSoup

from ..fetchers.http import Document
from ..models import Article, PublisherConfig, UNKNOWN_CATEGORY
from ..utils.logging import get_logger
from .normalize import clean_text, elements_text
from .structured_data import JsonObject, scan_structured_data
from .timestamps import parse_publish_time

logger = get_logger("newsarchive.processors.extract")


def format_authors(author: Any) -> str:
    """``[{"name": "A"}, {"name": "B"}]`` -> ``"A, B"``; ``{"name": "A"}`` -> ``"A"``."""
    if isinstance(author, list):
        names = [clean_text(a.get("name")) for a in author if isinstance(a, dict) and a.get("name")]
        return ", ".join(n for n in names if n)
    if isinstance(author, dict):
        return clean_text(author.get("name"))
    return ""


def lookup_path(node: Any, path: str) -> Any:
    """Follow a dot-separated key path through nested mappings."""
    for key in path.split("."):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def category_from_breadcrumb(breadcrumb: Optional[JsonObject], publisher: PublisherConfig) -> str:
    """Resolve the category slug from a BreadcrumbList block.

    Reads ``itemListElement[category_position]`` (0-based). With
    ``nested_breadcrumb`` the element list is wrapped in an outer array and the
    first inner list is used. The configured field path must lead to a URL;
    its last path segment minus ``category_url_suffix`` is the slug. Any miss
    yields ``UNKNOWN_CATEGORY``.
    """
    if not breadcrumb:
        return UNKNOWN_CATEGORY

    elements = breadcrumb.get("itemListElement")
    if publisher.nested_breadcrumb:
        elements = elements[0] if isinstance(elements, list) and elements else None
    if not isinstance(elements, list):
        return UNKNOWN_CATEGORY

    position = publisher.category_position
    if not 0 <= position < len(elements):
        logger.debug("Breadcrumb has no element at position %d", position)
        return UNKNOWN_CATEGORY

    value = lookup_path(elements[position], publisher.category_url_field)
    if isinstance(value, dict):
        value = value.get("@id")
    if not isinstance(value, str) or not value.strip():
        return UNKNOWN_CATEGORY

    segment = urlparse(value.strip()).path.rstrip("/").rsplit("/", 1)[-1]
    suffix = publisher.category_url_suffix
    if suffix and segment.endswith(suffix):
        segment = segment[: -len(suffix)]
    return segment or UNKNOWN_CATEGORY


class ContentExtractor:
    def __init__(self, publisher: PublisherConfig) -> None:
        self.publisher = publisher
        self.settings = publisher.settings

    def extract(self, document: Document, url: Optional[str] = None) -> Optional[Article]:
        """Build an ``Article`` from ``document`` or return ``None``.

        ``None`` means the page is not an article (list/index page, no article
        block) or a required field (headline, description, datePublished) is
        missing or unparseable.
        """
        url = url or document.url
        found = scan_structured_data(
            document.soup,
            article_types=self.settings.article_types,
            rejected_types=self.settings.rejected_types,
            breadcrumb_types=self.settings.breadcrumb_types,
        )
        if found.rejected_type:
            logger.debug("Page declares %s, not an article: %s", found.rejected_type, url)
            return None
        if found.article is None:
            logger.warning("No article structured data found for URL: %s", url)
            return None

        node = found.article
        missing = [key for key in ("headline", "description", "datePublished") if node.get(key) in (None, "")]
        if missing:
            logger.warning("Article structured data missing %s: %s", missing, url)
            return None

        publish_time = parse_publish_time(node.get("datePublished"), self.publisher.default_offset)
        if publish_time is None:
            logger.warning("Could not parse datePublished %r for URL: %s", node.get("datePublished"), url)
            return None

        content = self.extract_content(document.soup)
        if not content:
            logger.warning("Could not parse content for URL: %s", url)

        article = Article(
            url=url,
            title=clean_text(node.get("headline")),
            description=clean_text(node.get("description")),
            content=content,
            publish_time=publish_time,
            author=format_authors(node.get("author")),
            category=category_from_breadcrumb(found.breadcrumb, self.publisher),
        )
        logger.debug("Parsed article %r (%s)", article.title, article.category)
        return article

    def extract_content(self, soup: BeautifulSoup) -> str:
        """Body text from the first selector yielding non-empty text.

        Publisher selectors are tried before the shared defaults.
        """
        for selector in (*self.publisher.content_selectors, *self.settings.default_content_selectors):
            try:
                text = elements_text(soup.select(selector))
            except soupsieve.SelectorSyntaxError as exc:
                logger.warning("Invalid content selector %r: %s", selector, exc)
                continue
            if text:
                logger.debug("Found content using selector: %s", selector)
                return text
        return ""
