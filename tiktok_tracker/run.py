import argparse
import logging
import sys
from dataclasses import replace
from functools import partial

from .config import Settings, load_settings
from .logging_setup import LOGGER_NAME, setup_logging
from .scheduler import TickScheduler
from .scrapers.browser import launch_playwright
from .scrapers.tiktok_playwright import extract
from .store import WorkbookStore

logger = logging.getLogger(LOGGER_NAME)


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        description="Track TikTok video engagement counters into an Excel workbook."
    )
    ap.add_argument(
        "urls",
        nargs="*",
        help="Video URLs to track (default: TRACKER_URLS)",
    )
    ap.add_argument(
        "--once",
        action="store_true",
        help="Run a single tick and exit",
    )
    ap.add_argument("--interval", type=float, default=None, help="Seconds between ticks")
    ap.add_argument("--out", type=str, default=None, help="Workbook path")
    ap.add_argument("--sheet", type=str, default=None, help="Worksheet name")
    return ap.parse_args(argv)


def apply_args(settings: Settings, args) -> Settings:
    overrides = {}
    if args.urls:
        overrides["urls"] = list(args.urls)
    if args.interval is not None:
        if args.interval <= 0:
            raise ValueError("--interval must be positive")
        overrides["interval_seconds"] = args.interval
    if args.out:
        overrides["xlsx_path"] = args.out
    if args.sheet:
        overrides["sheet_name"] = args.sheet
    return replace(settings, **overrides)


def build_scheduler(settings: Settings) -> TickScheduler:
    extractor = partial(
        extract,
        launcher=partial(launch_playwright, headless=settings.headless),
        nav_timeout_ms=settings.nav_timeout_ms,
        selector_timeout_ms=settings.selector_timeout_ms,
    )
    store = WorkbookStore(settings.xlsx_path, sheet_name=settings.sheet_name)
    return TickScheduler(
        settings.urls,
        store,
        interval_seconds=settings.interval_seconds,
        extract=extractor,
    )


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = apply_args(load_settings(), args)
        setup_logging(settings.log_level)
        scheduler = build_scheduler(settings)
    except Exception:
        setup_logging("INFO")
        logger.exception("Tracker setup failed")
        raise

    logger.info(
        "Tracking %s URL(s) into %s [%s]",
        len(settings.urls),
        settings.xlsx_path,
        settings.sheet_name,
    )

    if args.once:
        result = scheduler.run_tick()
        return 0 if result.persisted else 1

    try:
        scheduler.run_forever()
    except KeyboardInterrupt:
        logger.info("Stopping...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
