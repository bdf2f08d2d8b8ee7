"""Typed models used across the application."""

from .publisher import CrawlSettings, PublisherConfig
from .article import Article, UNKNOWN_CATEGORY

__all__ = ["CrawlSettings", "PublisherConfig", "Article", "UNKNOWN_CATEGORY"]
