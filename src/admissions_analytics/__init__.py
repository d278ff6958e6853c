"""
Admissions Analytics Dashboard.

PURPOSE: Serve aggregate admissions statistics and render them as a dashboard.
AI CONTEXT: Mock statistics are deterministic - no data store is queried.

PACKAGE STRUCTURE:
- config.py: Seed table, trend constants, environment settings
- models.py: Snapshot data model (ProgramCount, TrendPoint, AdmissionsSnapshot)
- statistics.py: Trend generator and totals derivation
- service.py: Analytics responder building one snapshot per request
- client.py: HTTP client fetching snapshots from a running responder
- dashboard.py: View state machine and client-side date filtering
- presenters.py: View models, text report, matplotlib charts
- web/: FastAPI application and routes
- cli.py: Command-line entry point

QUICK START:
    # Run the dashboard and API
    admissions-analytics serve

    # Print a text report
    admissions-analytics report --from 2024-01-01 --to 2024-01-31
"""

from admissions_analytics.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __url__,
    __version__,
    __version_date__,
)

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
