"""Command line entry points.

Usage:
    asken-sync [YYYY-MM-DD]
    asken-sync-login
    asken-sync-backfill YYYY-MM-DD [YYYY-MM-DD ...]
    asken-sync-backfill --start YYYY-MM-DD --end YYYY-MM-DD [--width N]
"""

import argparse
import asyncio
import logging

from playwright.async_api import Error as PlaywrightError

from asken_sync.app_logging import configure_logging
from asken_sync.config import parse_date_arg
from asken_sync.containers import build_container
from asken_sync.domain.errors import AskenSyncError, CredentialsMissing
from asken_sync.services.dates import date_range, effective_today
from asken_sync.services.sinks import dump_result

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2

_logger = logging.getLogger("asken_sync.cli")


def main(argv: list[str] | None = None) -> int:
    """Scrape one date, print its JSON payload and save it to disk."""
    parser = argparse.ArgumentParser(
        prog="asken-sync", description="Scrape one day of asken records."
    )
    parser.add_argument(
        "date", nargs="?", help="Target date (YYYY-MM-DD). Defaults to today."
    )
    args = parser.parse_args(argv)
    container = build_container()
    configure_logging(container.settings.log_level)

    settings = container.settings
    try:
        day = (
            parse_date_arg(args.date)
            if args.date
            else effective_today(
                boundary_hour=settings.day_boundary_hour, timezone=settings.timezone
            )
        )
    except ValueError as exc:
        _logger.error("%s", exc)
        return EXIT_CONFIG

    try:
        result = asyncio.run(container.orchestrator.scrape_day(day))
    except CredentialsMissing as exc:
        _logger.error("%s", exc)
        return EXIT_CONFIG
    except (AskenSyncError, PlaywrightError) as exc:
        _logger.error("Fatal error for %s: %s", day.isoformat(), exc)
        return EXIT_FAILURE

    print(dump_result(result))
    container.file_sink.save(result)
    _logger.info("Saved: %s", settings.output_path(day))
    return EXIT_OK


def login_main(argv: list[str] | None = None) -> int:
    """Log in and persist a confirmed session."""
    parser = argparse.ArgumentParser(
        prog="asken-sync-login", description="Log in to asken and save the session."
    )
    parser.parse_args(argv)
    container = build_container()
    configure_logging(container.settings.log_level)
    try:
        asyncio.run(container.session_manager.login())
    except CredentialsMissing as exc:
        _logger.error("%s", exc)
        return EXIT_CONFIG
    except (AskenSyncError, PlaywrightError) as exc:
        _logger.error("Login failed: %s", exc)
        return EXIT_FAILURE
    _logger.info("Login complete")
    return EXIT_OK


def backfill_main(argv: list[str] | None = None) -> int:
    """Scrape many dates with a pool of worker processes."""
    parser = argparse.ArgumentParser(
        prog="asken-sync-backfill", description="Backfill asken records for many dates."
    )
    parser.add_argument("dates", nargs="*", help="Dates to scrape (YYYY-MM-DD).")
    parser.add_argument("--start", help="First date of an inclusive range.")
    parser.add_argument("--end", help="Last date of an inclusive range.")
    parser.add_argument("--width", type=int, help="Number of parallel workers.")
    args = parser.parse_args(argv)
    container = build_container()
    configure_logging(container.settings.log_level)

    try:
        if args.width is not None and args.width < 1:
            raise ValueError("--width must be at least 1")
        days = [parse_date_arg(raw) for raw in args.dates]
        if args.start or args.end:
            if not (args.start and args.end):
                raise ValueError("--start and --end must be given together")
            days.extend(
                date_range(parse_date_arg(args.start), parse_date_arg(args.end))
            )
    except ValueError as exc:
        _logger.error("%s", exc)
        return EXIT_CONFIG
    if not days:
        _logger.error("No dates given")
        return EXIT_CONFIG

    report = asyncio.run(container.batch_service.run(days, width=args.width))
    for outcome in report.outcomes:
        status = "ok" if outcome.ok else f"not recovered: {outcome.error}"
        print(f"{outcome.day.isoformat()}: {status}")
    print(f"Done: {len(report.succeeded)} succeeded, {len(report.failed)} failed")
    return EXIT_FAILURE if report.failed else EXIT_OK
