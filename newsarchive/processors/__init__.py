"""Extraction pipeline: structured data scanning, timestamps, body text."""

from .extract import ContentExtractor, category_from_breadcrumb, format_authors
from .normalize import clean_text, elements_text
from .structured_data import StructuredData, scan_structured_data
from .timestamps import parse_publish_time

__all__ = [
    "ContentExtractor",
    "category_from_breadcrumb",
    "format_authors",
    "clean_text",
    "elements_text",
    "StructuredData",
    "scan_structured_data",
    "parse_publish_time",
]
