"""Crawl orchestration: URL classification, adaptive depth, BFS engine."""

from .classify import UrlKind, classify_url
from .depth import DepthController, determine_max_level
from .engine import CrawlEngine, Frontier, FrontierEntry
from .report import CrawlReport

__all__ = [
    "UrlKind",
    "classify_url",
    "DepthController",
    "determine_max_level",
    "CrawlEngine",
    "Frontier",
    "FrontierEntry",
    "CrawlReport",
]
