"""
FastAPI application for the Admissions Analytics dashboard.

PURPOSE: Main application factory and server runner.
AI CONTEXT: Creates app with all routes registered and the shared presenter.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ..__version__ import __version__
from ..client import AdmissionsClient, SnapshotSource
from ..config import Config
from ..dashboard import DashboardStore
from ..presenters import DashboardPresenter
from ..service import AdmissionsAnalyticsService
from .routes import router

__all__ = ["create_app", "run_dashboard"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """
    Manage application lifecycle with startup/shutdown hooks.

    Logs startup and shutdown, and closes the HTTP client when the
    dashboard was configured to fetch from a remote API.

    Args:
        app: The FastAPI application instance (provided by FastAPI).

    Yields:
        None. Control returns to FastAPI to handle requests.
    """
    source = app.state.dashboard_presenter.source
    logger.info(
        "Admissions Analytics dashboard starting (v%s, source: %s)",
        __version__,
        getattr(source, "url", "in-process"),
    )
    yield
    if app.state.owns_source and isinstance(source, AdmissionsClient):
        source.close()
    logger.info("Admissions Analytics dashboard shutting down")


def create_app(
    source: SnapshotSource | None = None,
    service: AdmissionsAnalyticsService | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI dashboard application.

    Factory function that wires the analytics responder, the dashboard's
    snapshot source and the shared presenter into a new FastAPI instance.

    Business context: One process serves both the JSON endpoint and the
    dashboard page. By default the dashboard reads snapshots from the
    in-process responder; setting ADMISSIONS_API_URL points it at another
    deployment over HTTP instead.

    Args:
        source: Snapshot source for the dashboard. Default: an
            AdmissionsClient when Config.get_api_url() is set, otherwise
            the responder itself.
        service: Analytics responder for the JSON endpoint. Default: a new
            AdmissionsAnalyticsService with the Config seed table.

    Returns:
        Configured FastAPI application with all routes registered.

    Example:
        >>> from fastapi.testclient import TestClient
        >>> client = TestClient(create_app())
        >>> client.get('/api/v1/analytics/admissions').json()['totalApplicants']
        3110
    """
    service = service or AdmissionsAnalyticsService()
    owns_source = False
    if source is None:
        api_url = Config.get_api_url()
        if api_url:
            source = AdmissionsClient(api_url)
            owns_source = True
        else:
            source = service

    app = FastAPI(
        title="Admissions Analytics",
        description="Admissions statistics API and dashboard",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = service
    app.state.dashboard_presenter = DashboardPresenter(DashboardStore(), source)
    app.state.owns_source = owns_source

    # Include routes
    app.include_router(router)

    return app


def run_dashboard(
    host: str = Config.DEFAULT_HOST,
    port: int = Config.DEFAULT_PORT,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the Admissions Analytics server.

    Starts a uvicorn ASGI server hosting both the JSON endpoint and the
    dashboard page.

    Args:
        host: Network interface to bind. '127.0.0.1' for local-only access
            (default) or '0.0.0.0' for network access.
        port: TCP port number. Default 8000.
        reload: Enable auto-reload on code changes for development.
        log_level: Uvicorn logging verbosity ('critical', 'error',
            'warning', 'info', 'debug', 'trace').

    Returns:
        None. Blocks until the server is stopped (Ctrl+C).

    Raises:
        OSError: If the port is already in use or host is invalid.

    Example:
        >>> run_dashboard(host='127.0.0.1', port=8000, reload=True)
    """
    uvicorn.run(
        "admissions_analytics.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


# For direct execution
if __name__ == "__main__":
    run_dashboard()
