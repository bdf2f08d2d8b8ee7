"""Durable state: visited-URL ledger, archive metadata and the CSV archive."""

from .archive import ArchiveStore, category_slug
from .metadata import (
    ArchiveMetadata,
    JsonMetadataRepository,
    MemoryMetadataRepository,
    MetadataRepository,
)
from .records import CSV_HEADER, read_article_csv, write_article_csv
from .visited import FileVisitedLedger, MemoryVisitedLedger, VisitedLedger

__all__ = [
    "ArchiveStore",
    "category_slug",
    "ArchiveMetadata",
    "JsonMetadataRepository",
    "MemoryMetadataRepository",
    "MetadataRepository",
    "CSV_HEADER",
    "read_article_csv",
    "write_article_csv",
    "FileVisitedLedger",
    "MemoryVisitedLedger",
    "VisitedLedger",
]
