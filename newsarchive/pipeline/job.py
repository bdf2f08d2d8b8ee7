from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from ..crawler import CrawlEngine, CrawlReport
from ..utils.logging import get_logger

logger = get_logger("newsarchive.pipeline.job")


class CrawlJob:
    """Runs crawl cycles, never two at once.

    ``run`` takes a non-blocking lock: a trigger that fires while a cycle is
    still running returns ``None`` immediately instead of queueing.
    """

    def __init__(self, engine: CrawlEngine) -> None:
        self.engine = engine
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    def run(self) -> Optional[CrawlReport]:
        if not self._lock.acquire(blocking=False):
            logger.info("Another crawl job is already running, skipping this execution")
            return None
        try:
            logger.info("Starting scheduled crawl job for %s", self.engine.publisher.name)
            report = self.engine.crawl()
            logger.info("Finished scheduled crawl job")
            return report
        finally:
            self._lock.release()


def run_forever(
    job: CrawlJob,
    *,
    interval_seconds: float,
    max_cycles: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Trigger ``job`` every ``interval_seconds`` until interrupted.

    An exception escaping one cycle is logged and the next cycle still runs.
    Returns the number of cycles triggered.
    """
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        started = time.monotonic()
        try:
            job.run()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Crawl cycle failed: %s", exc)
        cycles += 1
        if max_cycles is not None and cycles >= max_cycles:
            break
        sleep(max(0.0, interval_seconds - (time.monotonic() - started)))
    return cycles
