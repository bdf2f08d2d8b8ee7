from __future__ import annotations

from ..models import CrawlSettings
from ..storage.metadata import ArchiveMetadata, MetadataRepository
from ..utils.logging import get_logger

logger = get_logger("newsarchive.crawler.depth")

DAYS_PER_MONTH = 30
MATURE_SPAN_MONTHS = 6


def months_between(metadata: ArchiveMetadata) -> int:
    """Whole 30-day months between the oldest and latest archived article."""
    if metadata.is_empty:
        raise ValueError("Archive metadata has no publish-time bounds")
    span = metadata.latest_publish_time - metadata.oldest_publish_time
    return span.days // DAYS_PER_MONTH


def determine_max_level(metadata: ArchiveMetadata, settings: CrawlSettings) -> int:
    """Traversal depth for the next cycle.

    No archive yet, or an archive spanning less than six months, needs the
    deeper sweep (``max_level_within_six_months``); a mature archive only
    needs the shallow steady-state depth (``default_max_level``).
    """
    if metadata.is_empty:
        logger.info("No archive metadata yet, using max level: %d", settings.max_level_within_six_months)
        return settings.max_level_within_six_months

    months = months_between(metadata)
    if months >= MATURE_SPAN_MONTHS:
        logger.info("Data spans %d months, using default max level: %d", months, settings.default_max_level)
        return settings.default_max_level
    logger.info(
        "Data spans less than %d months (%d), using max level: %d",
        MATURE_SPAN_MONTHS,
        months,
        settings.max_level_within_six_months,
    )
    return settings.max_level_within_six_months


class DepthController:
    def __init__(self, metadata: MetadataRepository, settings: CrawlSettings) -> None:
        self.metadata = metadata
        self.settings = settings

    def max_level(self) -> int:
        return determine_max_level(self.metadata.get(), self.settings)
