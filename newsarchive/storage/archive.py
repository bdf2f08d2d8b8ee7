from __future__ import annotations

import contextlib
import re
from pathlib import Path
from typing import Optional

from ..models import Article, PublisherConfig, UNKNOWN_CATEGORY
from ..utils.logging import get_logger
from .metadata import ArchiveMetadata, MetadataRepository
from .records import write_article_csv

logger = get_logger("newsarchive.storage.archive")

_unsafe_slug_re = re.compile(r"[^a-z0-9-]")


def category_slug(category: Optional[str]) -> str:
    slug = _unsafe_slug_re.sub("-", (category or "").strip().lower())
    return slug or UNKNOWN_CATEGORY


class ArchiveStore:
    """CSV file storage for articles, one file per article.

    Files live under ``base_dir/<publisher>/<category>/<YYYY>/<MM>/<ts>.csv``
    where ``ts`` is the timestamp token parsed out of the article URL. A file
    is written at most once; the publisher's metadata bounds are widened
    after every successful write.
    """

    extension = "csv"

    def __init__(
        self,
        publisher: PublisherConfig,
        metadata: MetadataRepository,
        *,
        base_dir: str | Path = "data",
    ) -> None:
        self.publisher = publisher
        self.metadata = metadata
        self.base_dir = Path(base_dir)

    def path_for(self, article: Article) -> Optional[Path]:
        """Deterministic archive path, or ``None`` when it cannot be derived."""
        if article.publish_time is None:
            logger.warning("Publish time is missing for article: %s", article.url)
            return None
        timestamp = self.publisher.url_timestamp(article.url)
        if timestamp is None:
            logger.warning("Could not extract timestamp from URL: %s", article.url)
            return None
        published = article.publish_time
        return (
            self.base_dir
            / self.publisher.name
            / category_slug(article.category)
            / f"{published.year:04d}"
            / f"{published.month:02d}"
            / f"{timestamp}.{self.extension}"
        )

    def exists(self, article: Article) -> bool:
        path = self.path_for(article)
        return path is not None and path.exists()

    def save(self, article: Article) -> bool:
        """Store ``article``; False when not newly stored (no path, duplicate, I/O error)."""
        path = self.path_for(article)
        if path is None:
            return False
        if path.exists():
            logger.debug("Article already archived at %s: %s", path, article.url)
            return False
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            write_article_csv(path, article)
        except FileExistsError:
            logger.debug("Article already archived at %s: %s", path, article.url)
            return False
        except OSError as exc:
            logger.error("Error saving article %s to %s: %s", article.url, path, exc)
            with contextlib.suppress(OSError):
                path.unlink(missing_ok=True)
            return False

        logger.info("Saved article to: %s", path)
        self._update_metadata(article)
        return True

    def _update_metadata(self, article: Article) -> None:
        current = self.metadata.get()
        updated = current.extended_with(article.publish_time)
        if updated == current:
            return
        try:
            self.metadata.put(updated)
        except (OSError, OverflowError, ValueError) as exc:
            logger.error("Error saving archive metadata for %s: %s", self.publisher.name, exc)

    @property
    def bounds(self) -> ArchiveMetadata:
        return self.metadata.get()
