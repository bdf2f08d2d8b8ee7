from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..utils.logging import get_logger

logger = get_logger("newsarchive.storage.metadata")

# Timestamps are persisted in UTC.
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True, slots=True)
class ArchiveMetadata:
    """Publish-time bounds of everything archived for one publisher."""

    latest_publish_time: Optional[datetime] = None
    oldest_publish_time: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self.latest_publish_time is None or self.oldest_publish_time is None

    def extended_with(self, publish_time: datetime) -> "ArchiveMetadata":
        """Bounds widened to include ``publish_time``; never narrowed.

        Bounds are kept at whole-second precision, the precision they are
        persisted with.
        """
        publish_time = publish_time.replace(microsecond=0)
        latest, oldest = self.latest_publish_time, self.oldest_publish_time
        if latest is None or publish_time > latest:
            latest = publish_time
        if oldest is None or publish_time < oldest:
            oldest = publish_time
        return ArchiveMetadata(latest_publish_time=latest, oldest_publish_time=oldest)


def format_timestamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


class MetadataRepository(ABC):
    @abstractmethod
    def get(self) -> ArchiveMetadata:
        """Current bounds; empty when nothing is known."""

    @abstractmethod
    def put(self, metadata: ArchiveMetadata) -> None:
        """Replace the stored bounds."""


class JsonMetadataRepository(MetadataRepository):
    """One small JSON file per publisher, rewritten whole on every update.

    A missing or corrupt file reads as "no prior data".
    """

    def __init__(self, store_path: Path | str) -> None:
        self.store_path = Path(store_path)
        self._metadata = self._load()

    def _load(self) -> ArchiveMetadata:
        if not self.store_path.exists():
            return ArchiveMetadata()
        try:
            data = json.loads(self.store_path.read_text(encoding="utf-8"))
            latest = data.get("latestPublishTime")
            oldest = data.get("oldestPublishTime")
            metadata = ArchiveMetadata(
                latest_publish_time=parse_timestamp(latest) if latest else None,
                oldest_publish_time=parse_timestamp(oldest) if oldest else None,
            )
        except (OSError, ValueError, TypeError, AttributeError) as exc:
            # Corrupt or unexpected format; start fresh
            logger.warning("Archive metadata unreadable (%s), treating as empty: %s", exc, self.store_path)
            return ArchiveMetadata()
        if (
            metadata.latest_publish_time is not None
            and metadata.oldest_publish_time is not None
            and metadata.oldest_publish_time > metadata.latest_publish_time
        ):
            logger.warning("Archive metadata has oldest > latest, treating as empty: %s", self.store_path)
            return ArchiveMetadata()
        return metadata

    def get(self) -> ArchiveMetadata:
        return self._metadata

    def put(self, metadata: ArchiveMetadata) -> None:
        payload = {}
        if metadata.latest_publish_time is not None:
            payload["latestPublishTime"] = format_timestamp(metadata.latest_publish_time)
        if metadata.oldest_publish_time is not None:
            payload["oldestPublishTime"] = format_timestamp(metadata.oldest_publish_time)
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        self.store_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        self._metadata = metadata


class MemoryMetadataRepository(MetadataRepository):
    def __init__(self, metadata: Optional[ArchiveMetadata] = None) -> None:
        self._metadata = metadata or ArchiveMetadata()

    def get(self) -> ArchiveMetadata:
        return self._metadata

    def put(self, metadata: ArchiveMetadata) -> None:
        self._metadata = metadata
