from __future__ import annotations

from typing import Optional, Pattern, Set
from urllib.parse import urldefrag, urljoin, urlparse

from .http import Document
from ..utils.logging import get_logger

logger = get_logger("newsarchive.fetchers.links")

_ALLOWED_SCHEMES = ("http", "https")


def _absolute(base: str, href: str) -> Optional[str]:
    href = (href or "").strip()
    if not href:
        return None
    try:
        url, _fragment = urldefrag(urljoin(base, href))
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in _ALLOWED_SCHEMES or not parsed.netloc:
        return None
    return url


def extract_links(document: Document, *, scope: Optional[Pattern[str]] = None) -> Set[str]:
    """Return the absolute http(s) hyperlinks found in ``document``.

    Relative targets are resolved against the document URL and fragments are
    dropped. Empty, malformed and non-HTTP targets (``mailto:``,
    ``javascript:``...) are silently skipped. When ``scope`` is given only
    URLs fully matching it are kept.
    """
    links: Set[str] = set()
    for anchor in document.soup.select("a[href]"):
        url = _absolute(document.url, anchor.get("href", ""))
        if url is None:
            continue
        if scope is not None and not scope.fullmatch(url):
            continue
        links.add(url)
    logger.debug("Found %d outlinks on %s", len(links), document.url)
    return links
