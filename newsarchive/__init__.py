"""Incremental news archive crawler.

This package contains the application entrypoint and all supporting modules
for discovering, extracting and archiving articles from configured news
publishers.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
