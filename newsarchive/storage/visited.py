from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Set

from ..utils.logging import get_logger

logger = get_logger("newsarchive.storage.visited")


class VisitedLedger(ABC):
    """Durable, append-only set of URLs the crawler has already processed."""

    @abstractmethod
    def contains(self, url: str) -> bool:
        """Return True when ``url`` was recorded before."""

    @abstractmethod
    def add(self, url: str) -> None:
        """Record ``url``; a no-op when already present."""

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.contains(url)


class MemoryVisitedLedger(VisitedLedger):
    """Process-local ledger, nothing survives a restart."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._urls: Set[str] = set(urls)

    def contains(self, url: str) -> bool:
        return url in self._urls

    def add(self, url: str) -> None:
        self._urls.add(url)

    def __len__(self) -> int:
        return len(self._urls)


class FileVisitedLedger(VisitedLedger):
    """Newline-delimited URL log, read fully into memory at startup.

    ``add`` appends and flushes before returning, so a URL is durable as soon
    as the call completes.
    """

    def __init__(self, store_path: Path | str = "data/visited_urls.txt") -> None:
        self.store_path = Path(store_path)
        self._urls: Set[str] = set()
        self._load()

    def _load(self) -> None:
        if not self.store_path.exists():
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info("Visited URLs file %s does not exist, starting with an empty set", self.store_path)
            return
        with self.store_path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    self._urls.add(line)
        logger.info("Loaded %d visited URLs from %s", len(self._urls), self.store_path)

    def contains(self, url: str) -> bool:
        return url.strip() in self._urls

    def add(self, url: str) -> None:
        url = url.strip()
        if not url or url in self._urls:
            return
        with self.store_path.open("a", encoding="utf-8") as f:
            f.write(url + "\n")
            f.flush()
        self._urls.add(url)

    def __len__(self) -> int:
        return len(self._urls)
