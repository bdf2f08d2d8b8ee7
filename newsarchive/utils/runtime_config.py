from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(slots=True)
class RuntimeConfig:
    config_path: str = field(default_factory=lambda: os.getenv("NEWSARCHIVE_CONFIG", "config/publishers.yaml"))
    data_dir: str = field(default_factory=lambda: os.getenv("NEWSARCHIVE_DATA_DIR", "data"))
    interval_minutes: float = field(default_factory=lambda: float(os.getenv("NEWSARCHIVE_INTERVAL_MINUTES", "5")))
    publisher: Optional[str] = field(default_factory=lambda: os.getenv("NEWSARCHIVE_PUBLISHER") or None)

    @property
    def visited_path(self) -> Path:
        return Path(self.data_dir) / "visited_urls.txt"

    def metadata_path(self, publisher: str) -> Path:
        return Path(self.data_dir) / f"metadata_{publisher}.json"
