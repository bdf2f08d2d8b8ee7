from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(slots=True)
class CrawlReport:
    publisher: str
    max_level: int
    processed_urls: int = 0
    pruned_by_depth: int = 0
    fetch_failures: int = 0
    articles_fetched: int = 0
    articles_rejected: int = 0
    articles_stale: int = 0
    articles_stored: int = 0
    articles_not_stored: int = 0
    skipped_visited: int = 0
    budget_exhausted: bool = False
    frontier_left: int = 0

    def as_dict(self) -> dict:
        return asdict(self)

    def summary(self) -> str:
        return (
            f"publisher={self.publisher} max_level={self.max_level} "
            f"processed={self.processed_urls} pruned={self.pruned_by_depth} "
            f"fetch_failures={self.fetch_failures} articles_fetched={self.articles_fetched} "
            f"stored={self.articles_stored} stale={self.articles_stale} "
            f"rejected={self.articles_rejected} not_stored={self.articles_not_stored} "
            f"skipped_visited={self.skipped_visited} budget_exhausted={self.budget_exhausted} "
            f"frontier_left={self.frontier_left}"
        )
