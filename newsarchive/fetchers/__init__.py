"""HTTP fetching layer: polite retried GETs and outlink discovery."""

from .http import Document, FetchClient, FetchFailure, FetchResult, RetryPolicy
from .links import extract_links

__all__ = ["Document", "FetchClient", "FetchFailure", "FetchResult", "RetryPolicy", "extract_links"]
