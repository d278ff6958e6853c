"""
CLI entry point for Admissions Analytics.

PURPOSE: Command-line interface for serving the dashboard and printing data.
AI CONTEXT: Main entry points for package execution.

USAGE:
    # Serve API and dashboard (default)
    python -m admissions_analytics

    # Or via CLI command (after install)
    admissions-analytics

    # Run with subcommands
    admissions-analytics serve --port 8080          # Start web server
    admissions-analytics report --from 2024-01-01   # Print text report
    admissions-analytics snapshot --url http://...  # Print snapshot JSON
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import TYPE_CHECKING

from .config import Config

if TYPE_CHECKING:
    from .client import SnapshotSource

PROG_NAME = "admissions-analytics"


@lru_cache(maxsize=1)
def _get_logger() -> logging.Logger:
    """Get module logger (cached for thread safety)."""
    logging.basicConfig(level=logging.INFO)
    return logging.getLogger(__name__)


def _log(message: str, *, emoji: str = "") -> None:
    """Log message with optional emoji prefix for CLI output.

    Args:
        message: The message to log.
        emoji: Optional emoji prefix for visual CLI feedback.
    """
    prefix = f"{emoji} " if emoji else ""
    _get_logger().info(f"{prefix}{message}")


@contextmanager
def _open_source(url: str | None, source: SnapshotSource | None = None) -> Iterator[SnapshotSource]:
    """
    Yield the snapshot source for one CLI command.

    An injected ``source`` is yielded unchanged. Otherwise an HTTP client
    for ``url`` (closed on exit) or the in-process responder is created.
    """
    if source is not None:
        yield source
        return
    if url:
        from .client import AdmissionsClient

        with AdmissionsClient(url) as client:
            yield client
        return
    from .service import AdmissionsAnalyticsService

    yield AdmissionsAnalyticsService()


def run_serve(
    host: str = Config.DEFAULT_HOST,
    port: int = Config.DEFAULT_PORT,
    api_url: str | None = None,
) -> None:
    """
    Launch the analytics API and dashboard.

    Args:
        host: Network interface to bind to.
        port: TCP port for the HTTP server.
        api_url: Optional remote API base URL for the dashboard. Exported
            as ADMISSIONS_API_URL so the uvicorn factory picks it up.

    Returns:
        None. Blocks until server shutdown (Ctrl+C).

    Example:
        >>> # From command line:
        >>> # admissions-analytics serve --port 3000
        >>> run_serve(port=3000)
        🚀 Starting dashboard at http://127.0.0.1:3000
    """
    from .web import run_dashboard as start_web

    if api_url:
        os.environ["ADMISSIONS_API_URL"] = api_url
        _log(f"Dashboard will fetch analytics from {api_url}", emoji="🔗")
    _log(f"Starting dashboard at http://{host}:{port}", emoji="🚀")
    _log("Press Ctrl+C to stop")
    start_web(host=host, port=port)


def run_report(
    date_from: str | None = None,
    date_to: str | None = None,
    url: str | None = None,
    source: SnapshotSource | None = None,
) -> int:
    """
    Print the text analytics report to stdout.

    Fetches one snapshot (in-process unless ``url`` is given), applies the
    date filter to the trend series and prints the same report the
    /api/report endpoint serves.

    Args:
        date_from: Lower trend bound, YYYY-MM-DD.
        date_to: Upper trend bound, YYYY-MM-DD.
        url: Remote API base URL. Default: build the snapshot in-process.
        source: Injected snapshot source for testability; overrides url.

    Returns:
        0 when data was loaded, 1 when the fetch failed.

    Example:
        >>> # admissions-analytics report --from 2024-01-01 > report.txt
        >>> run_report(date_from="2024-01-01")
        ==================================================
        ADMISSIONS ANALYTICS - SUMMARY REPORT
        ...
    """
    from .dashboard import DashboardStore, DateRange, Failed
    from .presenters import DashboardPresenter

    with _open_source(url, source) as active:
        presenter = DashboardPresenter(DashboardStore(), active)
        state = presenter.refresh()
    # Note: Using print() intentionally for stdout piping support
    print(presenter.get_report(DateRange.parse(date_from, date_to)))
    return 1 if isinstance(state, Failed) else 0


def run_snapshot(url: str | None = None, source: SnapshotSource | None = None) -> int:
    """
    Print one snapshot as indented JSON.

    Args:
        url: Remote API base URL. Default: build the snapshot in-process.
        source: Injected snapshot source for testability; overrides url.

    Returns:
        0 on success, 1 when the fetch failed (message logged).
    """
    from .client import FetchError

    try:
        with _open_source(url, source) as active:
            snapshot = active.fetch_snapshot()
    except FetchError as exc:
        _log(f"{Config.FETCH_ERROR_MESSAGE}: {exc}", emoji="❌")
        return 1
    print(json.dumps(snapshot.to_dict(), indent=2))
    return 0


def main() -> int:
    """
    Main CLI entry point for Admissions Analytics.

    Parses command-line arguments and dispatches to the appropriate
    subcommand handler. With no subcommand, serves the dashboard.

    Subcommands:
    - serve [--host HOST] [--port PORT] [--api-url URL]
    - report [--from DATE] [--to DATE] [--url URL]
    - snapshot [--url URL]

    Returns:
        Exit code: 0 for success, 1 when a fetch failed.

    Raises:
        SystemExit: On --help or argument parsing errors.

    Example:
        >>> # admissions-analytics report --to 2024-01-31
        >>> sys.exit(main())
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Admissions Analytics - admissions statistics API and dashboard",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the analytics API and dashboard",
    )
    serve_parser.add_argument(
        "--host",
        default=Config.DEFAULT_HOST,
        help=f"Bind address (default: {Config.DEFAULT_HOST})",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=Config.DEFAULT_PORT,
        help=f"Port number (default: {Config.DEFAULT_PORT})",
    )
    serve_parser.add_argument(
        "--api-url",
        default=None,
        help="Fetch dashboard data from this analytics API instead of in-process",
    )

    # Report command
    report_parser = subparsers.add_parser(
        "report",
        help="Print analytics report to stdout",
    )
    report_parser.add_argument("--from", dest="date_from", default=None, help="YYYY-MM-DD")
    report_parser.add_argument("--to", dest="date_to", default=None, help="YYYY-MM-DD")
    report_parser.add_argument("--url", default=None, help="Analytics API base URL")

    # Snapshot command
    snapshot_parser = subparsers.add_parser(
        "snapshot",
        help="Print one analytics snapshot as JSON",
    )
    snapshot_parser.add_argument("--url", default=None, help="Analytics API base URL")

    args = parser.parse_args()

    if args.command == "report":
        return run_report(date_from=args.date_from, date_to=args.date_to, url=args.url)
    if args.command == "snapshot":
        return run_snapshot(url=args.url)
    if args.command == "serve":
        run_serve(host=args.host, port=args.port, api_url=args.api_url)
    else:
        # Default: serve with default bind settings
        run_serve()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
