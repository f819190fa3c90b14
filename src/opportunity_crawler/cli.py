from __future__ import annotations

import argparse
import logging
import os
import sys
import threading

from opportunity_crawler.config import AppConfig, ConfigError, load_config
from opportunity_crawler.fetchers import PageFetcher, PlaywrightFetcher, RequestsFetcher
from opportunity_crawler.logging_config import setup_logging
from opportunity_crawler.models import Opportunity
from opportunity_crawler.pipeline import run_pipeline
from opportunity_crawler.reconciler import RecordReconciler
from opportunity_crawler.scheduler import SingleFlightScheduler
from opportunity_crawler.service import CrawlService
from opportunity_crawler.store import DisabledStore, PersistenceError, SQLiteStore, Store

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="opportunity-crawler",
        description="Crawl government pages for scholarships and jobs and store new ones.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config YAML file (default: config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        help="Override config log level (e.g. INFO, DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Crawl once and store new opportunities")
    subparsers.add_parser("dry-run", help="Crawl once and print opportunities without storing")
    subparsers.add_parser("schedule", help="Run at startup and then daily at the configured time")
    subparsers.add_parser("init-db", help="Initialize the document store")
    subparsers.add_parser("targets", help="List configured targets")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_config = load_config(args.config)
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 2

    log_level = args.log_level or app_config.log_level
    setup_logging(log_level)

    if args.command == "targets":
        for target in app_config.targets:
            print(f"{target.name}\t{target.extractor.value}\t{target.url}")
        return 0

    store = build_store(app_config)
    try:
        store.init_db()
    except PersistenceError as exc:
        logger.warning("Document store unavailable (%s); records will not be saved", exc)
        store = DisabledStore(str(exc))

    if args.command == "init-db":
        if store.available:
            logger.info("Initialized document store at %s", app_config.storage.path)
            return 0
        logger.error("Document store is disabled; nothing to initialize")
        return 2

    service = CrawlService(
        targets=app_config.targets,
        fetcher=build_fetcher(app_config),
        max_attempts=app_config.browser.max_attempts,
        retry_delay=app_config.browser.retry_delay_seconds,
        settle_delay=app_config.browser.settle_delay_seconds,
    )

    if args.command == "dry-run":
        result = service.crawl()
        for record in result.records:
            _print_record(record)
        return 0 if result.ok else 1

    reconciler = RecordReconciler(store)

    if args.command == "schedule":
        scheduler = SingleFlightScheduler(lambda: run_pipeline(service, reconciler).ok)
        hour, minute = app_config.schedule.hour_minute
        try:
            scheduler.run_forever(
                hour=hour,
                minute=minute,
                run_on_startup=app_config.schedule.run_on_startup,
                stop_event=threading.Event(),
            )
        except KeyboardInterrupt:
            logger.info("Interrupted; exiting scheduler")
        return 0

    report = run_pipeline(service, reconciler)
    return 0 if report.ok else 1


def build_store(app_config: AppConfig) -> Store:
    """Pick the document store, disabling persistence when it is not configured."""
    settings = app_config.storage
    if settings.type == "none":
        logger.warning("Storage type is 'none'; records will not be saved")
        return DisabledStore("storage type is 'none'")

    path = settings.path
    if settings.path_env_var:
        path = os.getenv(settings.path_env_var, "").strip() or None
        if path is None:
            logger.warning(
                "Missing store location in environment variable %s; "
                "persistence operations will be skipped",
                settings.path_env_var,
            )
            return DisabledStore(f"{settings.path_env_var} is not set")

    if not path:
        logger.warning("No storage path configured; persistence operations will be skipped")
        return DisabledStore("no storage path configured")

    return SQLiteStore(path)


def build_fetcher(app_config: AppConfig) -> PageFetcher:
    if app_config.browser.fetcher == "requests":
        return RequestsFetcher(app_config.browser)
    return PlaywrightFetcher(app_config.browser)


def _print_record(record: Opportunity) -> None:
    print(f"[DRY RUN] {record.kind.value}: {record.name}")
    print(f"  ID: {record.id}")
    print(f"  Category: {record.category}")
    print(f"  Deadline: {record.deadline}")
    if record.open_date:
        print(f"  Opens: {record.open_date}")
    print(f"  Source: {record.source_url}")
    print("")


if __name__ == "__main__":
    raise SystemExit(main())
