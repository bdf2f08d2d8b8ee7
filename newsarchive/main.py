"""Application entrypoint for the news archive crawler.

This script wires the high-level flow:
1) load configuration for one publisher (fail fast on any problem)
2) build the crawl engine over the on-disk state
3) run one crawl cycle, or keep running cycles on a fixed interval
"""

from __future__ import annotations

import argparse
from typing import List, Optional

from dotenv import load_dotenv

from .orchestrator import build_engine
from .pipeline.job import CrawlJob, run_forever
from .utils.config_loader import ConfigError, load_publisher_config
from .utils.logging import configure_logging, get_logger
from .utils.runtime_config import RuntimeConfig


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Incrementally crawl and archive news articles from one publisher"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to publishers configuration file (YAML); defaults to NEWSARCHIVE_CONFIG",
    )
    parser.add_argument(
        "--publisher",
        default=None,
        help="Publisher to crawl; overrides NEWSARCHIVE_PUBLISHER and current_publisher",
    )
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory holding the archive, metadata and visited ledger",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single crawl cycle and exit",
    )
    parser.add_argument(
        "--interval-minutes",
        type=float,
        default=None,
        help="Minutes between crawl cycles when running continuously",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    logger = get_logger("newsarchive.main")

    runtime = RuntimeConfig()
    if args.config:
        runtime.config_path = args.config
    if args.data_dir:
        runtime.data_dir = args.data_dir
    if args.interval_minutes is not None:
        runtime.interval_minutes = args.interval_minutes
    if args.publisher:
        runtime.publisher = args.publisher

    logger.info("Loading publisher configuration from %s", runtime.config_path)
    try:
        publisher = load_publisher_config(runtime.config_path, runtime.publisher)
    except ConfigError as exc:
        logger.error("Failed to load configuration: %s", exc)
        return 1
    logger.info("Loaded configuration for publisher %s (start URL %s)", publisher.name, publisher.start_url)

    engine = build_engine(publisher, runtime)
    job = CrawlJob(engine)
    try:
        if args.once:
            job.run()
        else:
            logger.info("Running crawl cycles every %.1f minute(s)", runtime.interval_minutes)
            run_forever(job, interval_seconds=runtime.interval_minutes * 60)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        engine.fetcher.close()
    return 0


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
