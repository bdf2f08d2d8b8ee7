"""Breadth-first crawl of one publisher's link graph.

One call to ``CrawlEngine.crawl`` is one cycle: seed the frontier with the
start URL, pop entries in depth order, fetch and expand category and other
pages, and extract/archive every newly discovered article. The cycle ends
when the frontier is empty or the per-cycle URL budget is spent.
"""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Set

from ..fetchers import Document, FetchClient, FetchFailure, extract_links
from ..models import Article, PublisherConfig
from ..processors import ContentExtractor
from ..storage import ArchiveStore, VisitedLedger
from ..utils.logging import get_logger
from .classify import UrlKind, classify_url
from .depth import DepthController
from .report import CrawlReport

logger = get_logger("newsarchive.crawler.engine")


@dataclass(order=True, frozen=True, slots=True)
class FrontierEntry:
    depth: int
    seq: int
    url: str = field(compare=False)


class Frontier:
    """Min-heap of URLs keyed by depth, FIFO among equal depths."""

    def __init__(self) -> None:
        self._heap: List[FrontierEntry] = []
        self._counter = itertools.count()

    def push(self, url: str, depth: int) -> None:
        heapq.heappush(self._heap, FrontierEntry(depth, next(self._counter), url))

    def pop(self) -> FrontierEntry:
        return heapq.heappop(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CrawlEngine:
    def __init__(
        self,
        publisher: PublisherConfig,
        *,
        fetcher: FetchClient,
        extractor: ContentExtractor,
        archive: ArchiveStore,
        visited: VisitedLedger,
        depth: DepthController,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.publisher = publisher
        self.settings = publisher.settings
        self.fetcher = fetcher
        self.extractor = extractor
        self.archive = archive
        self.visited = visited
        self.depth = depth
        self.clock = clock or _utcnow

    def classify(self, url: str) -> UrlKind:
        return classify_url(url, self.publisher)

    def is_fresh(self, article: Article) -> bool:
        """False when the article is strictly older than the freshness window."""
        return self.clock() - article.publish_time <= self.settings.freshness_window

    def crawl(self) -> CrawlReport:
        max_level = self.depth.max_level()
        report = CrawlReport(publisher=self.publisher.name, max_level=max_level)
        budget = self.settings.max_urls_per_crawl
        logger.info("Starting BFS crawl from %s (max level %d, budget %d)", self.publisher.start_url, max_level, budget)

        frontier = Frontier()
        frontier.push(self.publisher.start_url, 0)
        # Categories are revisited every cycle, but enqueued at most once per cycle.
        enqueued_categories: Set[str] = set()
        if self.classify(self.publisher.start_url) is UrlKind.CATEGORY:
            enqueued_categories.add(self.publisher.start_url)

        while frontier and report.processed_urls < budget:
            entry = frontier.pop()
            url, level = entry.url, entry.depth

            if level > max_level:
                logger.debug("Beyond max level (%d), skipping URL: %s", max_level, url)
                report.pruned_by_depth += 1
                continue

            kind = self.classify(url)
            if kind is UrlKind.ARTICLE:
                if self.visited.contains(url):
                    logger.debug("Article URL already visited, skipping: %s", url)
                    report.skipped_visited += 1
                    continue
                self.visited.add(url)
            elif kind is UrlKind.OTHER:
                self.visited.add(url)

            logger.debug("Processing %s URL: %s (level %d)", kind.value, url, level)
            report.processed_urls += 1
            try:
                if kind is UrlKind.ARTICLE:
                    # Article pages are archived, never expanded.
                    self._process_article(url, report)
                    continue
                result = self.fetcher.fetch(url)
                if isinstance(result, FetchFailure):
                    report.fetch_failures += 1
                    continue
                self._expand(result, level, frontier, enqueued_categories, report)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error while processing %s: %s", url, exc)

        if frontier and report.processed_urls >= budget:
            report.budget_exhausted = True
            report.frontier_left = len(frontier)
            logger.info("Reached max URLs per crawl (%d), stopping. Queue size: %d", budget, len(frontier))

        logger.info("Finished BFS crawl: %s", report.summary())
        return report

    def _expand(
        self,
        document: Document,
        level: int,
        frontier: Frontier,
        enqueued_categories: Set[str],
        report: CrawlReport,
    ) -> None:
        outlinks = extract_links(document, scope=self.publisher.link_scope_pattern)
        if not outlinks:
            logger.debug("No outlinks found for URL: %s", document.url)

        for link in sorted(outlinks):
            try:
                self._handle_outlink(link, level, frontier, enqueued_categories, report)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error while handling outlink %s: %s", link, exc)

    def _handle_outlink(
        self,
        link: str,
        level: int,
        frontier: Frontier,
        enqueued_categories: Set[str],
        report: CrawlReport,
    ) -> None:
        kind = self.classify(link)
        if kind is UrlKind.ARTICLE:
            if self.visited.contains(link):
                report.skipped_visited += 1
                return
            # Marked before fetching: a page that fails to parse is never retried.
            self.visited.add(link)
            self._process_article(link, report)
        elif kind is UrlKind.CATEGORY:
            if link in enqueued_categories:
                return
            enqueued_categories.add(link)
            frontier.push(link, level + 1)
        else:
            if self.visited.contains(link):
                return
            self.visited.add(link)
            frontier.push(link, level + 1)

    def _process_article(self, url: str, report: CrawlReport) -> None:
        result = self.fetcher.fetch(url)
        if isinstance(result, FetchFailure):
            report.fetch_failures += 1
            return
        report.articles_fetched += 1

        article = self.extractor.extract(result, url)
        if article is None:
            report.articles_rejected += 1
            return
        if not self.is_fresh(article):
            logger.debug("Article is older than the freshness window, skipping: %s", url)
            report.articles_stale += 1
            return
        if self.archive.save(article):
            report.articles_stored += 1
        else:
            report.articles_not_stored += 1
