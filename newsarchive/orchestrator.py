from __future__ import annotations

from pathlib import Path
from typing import Optional

import requests

from .crawler import CrawlEngine, DepthController
from .fetchers import FetchClient
from .models import PublisherConfig
from .processors import ContentExtractor
from .storage import ArchiveStore, FileVisitedLedger, JsonMetadataRepository
from .utils.logging import get_logger
from .utils.runtime_config import RuntimeConfig

logger = get_logger("newsarchive.orchestrator")


def build_engine(
    publisher: PublisherConfig,
    runtime: RuntimeConfig,
    *,
    session: Optional[requests.Session] = None,
) -> CrawlEngine:
    """Wire every component for ``publisher`` over the on-disk state in ``runtime.data_dir``.

    The visited ledger is shared by all publishers; metadata and archive
    trees are per publisher.
    """
    data_dir = Path(runtime.data_dir)
    metadata = JsonMetadataRepository(runtime.metadata_path(publisher.name))
    visited = FileVisitedLedger(runtime.visited_path)
    archive = ArchiveStore(publisher, metadata, base_dir=data_dir)

    logger.info(
        "Crawler ready for %s: data_dir=%s visited=%d",
        publisher.name,
        data_dir,
        len(visited),
    )
    return CrawlEngine(
        publisher,
        fetcher=FetchClient.for_publisher(publisher, session=session),
        extractor=ContentExtractor(publisher),
        archive=archive,
        visited=visited,
        depth=DepthController(metadata, publisher.settings),
    )
