from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup

from ..utils.logging import get_logger

logger = get_logger("newsarchive.processors.structured_data")

JsonObject = Dict[str, Any]


@dataclass(slots=True)
class StructuredData:
    """Result of scanning a page's JSON-LD blocks.

    ``rejected_type`` is set when a block declared a list/index type; the page
    is then not an article regardless of what else was found.
    """

    article: Optional[JsonObject] = None
    breadcrumb: Optional[JsonObject] = None
    rejected_type: Optional[str] = None


def declared_types(item: JsonObject) -> List[str]:
    raw = item.get("@type")
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [str(t) for t in raw if isinstance(t, str)]
    return []


def _flatten(data: Any) -> Iterator[JsonObject]:
    """Yield the top-level JSON-LD items of one block.

    Handles a single object, a list of objects and ``@graph`` containers.
    """
    if isinstance(data, list):
        for item in data:
            yield from _flatten(item)
    elif isinstance(data, dict):
        graph = data.get("@graph")
        if isinstance(graph, list) and "@type" not in data:
            for item in graph:
                if isinstance(item, dict):
                    yield item
        else:
            yield data


def iter_jsonld(soup: BeautifulSoup) -> Iterator[JsonObject]:
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string if script.string is not None else script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            data = json.loads(raw, strict=False)
        except json.JSONDecodeError as exc:
            logger.debug("Skipping malformed JSON-LD block: %s", exc)
            continue
        yield from _flatten(data)


def scan_structured_data(
    soup: BeautifulSoup,
    *,
    article_types: Iterable[str],
    rejected_types: Iterable[str],
    breadcrumb_types: Iterable[str],
) -> StructuredData:
    """Scan every JSON-LD item, keeping the first article and breadcrumb.

    Stops at the first item whose type is in ``rejected_types``.
    """
    article_set = set(article_types)
    rejected_set = set(rejected_types)
    breadcrumb_set = set(breadcrumb_types)

    found = StructuredData()
    for item in iter_jsonld(soup):
        types = declared_types(item)
        hit = next((t for t in types if t in rejected_set), None)
        if hit is not None:
            found.rejected_type = hit
            return found
        if found.article is None and article_set.intersection(types):
            found.article = item
        elif found.breadcrumb is None and breadcrumb_set.intersection(types):
            found.breadcrumb = item
    return found
