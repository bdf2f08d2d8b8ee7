from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

UNKNOWN_CATEGORY = "unknown"


@dataclass(frozen=True, slots=True)
class Article:
    """One extracted news article.

    ``publish_time`` is always timezone-aware; the extractor refuses to build
    an article whose timestamp could not be resolved.
    """

    url: str
    title: str
    description: str
    content: str
    publish_time: datetime
    author: str = ""
    category: str = UNKNOWN_CATEGORY
