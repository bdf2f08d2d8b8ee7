from __future__ import annotations

from enum import Enum

from ..models import PublisherConfig


class UrlKind(str, Enum):
    ARTICLE = "article"
    CATEGORY = "category"
    OTHER = "other"


def classify_url(url: str, publisher: PublisherConfig) -> UrlKind:
    """Classify ``url`` with the publisher's patterns; article wins over category."""
    if publisher.is_article_url(url):
        return UrlKind.ARTICLE
    if publisher.is_category_url(url):
        return UrlKind.CATEGORY
    return UrlKind.OTHER
