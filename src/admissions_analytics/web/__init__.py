"""
Web module for Admissions Analytics.

PURPOSE: FastAPI application serving the analytics API and dashboard page.
AI CONTEXT: Server-rendered HTML with htmx for refresh and date filtering.

FEATURES:
- GET /api/v1/analytics/admissions JSON snapshot
- Dashboard page with summary cards, charts and program table
- Server-side chart rendering (matplotlib)
- htmx partial updates without custom JavaScript

USAGE:
    # Via CLI
    admissions-analytics serve

    # Programmatically
    from admissions_analytics.web import create_app
    app = create_app()
    # Run with uvicorn
"""

from .app import create_app, run_dashboard

__all__ = ["create_app", "run_dashboard"]
