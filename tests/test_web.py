"""Tests for web module."""

from __future__ import annotations

from unittest.mock import patch

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from admissions_analytics.client import AdmissionsClient, FetchError
from admissions_analytics.config import Config
from admissions_analytics.models import AdmissionsSnapshot
from admissions_analytics.service import AdmissionsAnalyticsService
from admissions_analytics.web import create_app, run_dashboard

from conftest import FakeSnapshotSource

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def source(small_snapshot: AdmissionsSnapshot) -> FakeSnapshotSource:
    """Dashboard source that always returns the small snapshot."""
    return FakeSnapshotSource(small_snapshot)


@pytest.fixture
def client(service: AdmissionsAnalyticsService, source: FakeSnapshotSource) -> TestClient:
    """Create FastAPI test client with a pinned responder and fake dashboard source.

    Business context:
    The JSON endpoint is exercised through the real responder while the
    dashboard reads from a scriptable source, so both halves can be
    asserted independently.

    Returns:
        TestClient wrapping create_app(source=..., service=...).
    """
    return TestClient(create_app(source=source, service=service))


class TestWebAppCreation:
    """Test suite for the application factory."""

    def test_create_app_returns_fastapi(self) -> None:
        """Verifies create_app returns a FastAPI instance."""
        assert isinstance(create_app(), FastAPI)

    def test_app_has_routes(self) -> None:
        """Verifies the API, page, partial and chart routes are registered.

        Assertion Strategy:
        Reads paths from the OpenAPI schema, which lists every included
        route regardless of how the router entries are represented.
        """
        paths = set(create_app().openapi()["paths"])
        assert {
            Config.API_PATH,
            "/",
            "/api/report",
            "/partials/dashboard",
            "/partials/trends",
            "/charts/programs.png",
            "/charts/trends.png",
        } <= paths

    def test_no_static_mount(self) -> None:
        """Verifies the app serves no /static files; all CSS is inline."""
        client = TestClient(create_app())
        assert client.get("/static/style.css").status_code == 404

    def test_default_source_is_in_process(self) -> None:
        """Verifies the dashboard reads the responder when no API URL is set."""
        app = create_app()
        assert app.state.dashboard_presenter.source is app.state.service
        assert app.state.owns_source is False

    def test_api_url_selects_http_client(self) -> None:
        """Verifies ADMISSIONS_API_URL switches the dashboard to HTTP.

        Business context:
        The dashboard can be deployed apart from the analytics API; the
        environment setting is the only switch.
        """
        Config.set_test_overrides(api_url="http://analytics.test/")
        app = create_app()
        source = app.state.dashboard_presenter.source
        try:
            assert isinstance(source, AdmissionsClient)
            assert source.url == "http://analytics.test/api/v1/analytics/admissions"
            assert app.state.owns_source is True
        finally:
            source.close()

    def test_lifespan_closes_owned_client(self) -> None:
        """Verifies shutdown closes the HTTP client the app created."""
        Config.set_test_overrides(api_url="http://analytics.test")
        app = create_app()
        source = app.state.dashboard_presenter.source

        with TestClient(app):
            pass

        assert source._http.is_closed


class TestAnalyticsEndpoint:
    """Test suite for GET /api/v1/analytics/admissions."""

    def test_returns_snapshot_json(self, client: TestClient) -> None:
        """Verifies the published document for the default seed table.

        Business context:
        External consumers read these numbers directly.
        """
        response = client.get(Config.API_PATH)

        assert response.status_code == 200
        data = response.json()
        assert data["totalApplicants"] == 3110
        assert data["verifiedApplicants"] == 2239
        assert data["rejectedApplicants"] == 560
        assert data["perProgram"][0] == {"program": "Computer Science", "applications": 1180}
        assert len(data["trends"]) == 45
        assert data["trends"][-1] == {"date": "2024-01-31", "applications": 54}
        assert data["generatedAt"] == "2024-01-31T09:15:00.000Z"

    def test_endpoint_does_not_touch_dashboard(
        self, client: TestClient, source: FakeSnapshotSource
    ) -> None:
        """Verifies the JSON endpoint never goes through the dashboard source."""
        client.get(Config.API_PATH)
        assert source.calls == 0

    def test_served_document_parses_with_client(
        self, service: AdmissionsAnalyticsService
    ) -> None:
        """Verifies AdmissionsClient can read what the endpoint serves.

        Arrangement:
        Route the client's httpx transport into the ASGI app.
        """
        app = create_app(service=service)
        with TestClient(app) as asgi:

            def handler(request: httpx.Request) -> httpx.Response:
                served = asgi.get(request.url.path)
                return httpx.Response(served.status_code, content=served.content)

            http = httpx.Client(transport=httpx.MockTransport(handler))
            snapshot = AdmissionsClient("http://analytics.test", http_client=http).fetch_snapshot()
            http.close()

        assert snapshot == service.build_snapshot(service.clock())


class TestDashboardPage:
    """Test suite for the full-page render.

    Categories:
    1. Content - Title, cards, table
    2. Loading - First visit fetches once
    3. Failure - Error card
    """

    def test_dashboard_page_returns_html(self, client: TestClient) -> None:
        """Verifies GET / returns an HTML document with the title and htmx."""
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "Admission Analytics Dashboard" in response.text
        assert "University Admin Portal" in response.text
        assert "htmx.org" in response.text

    def test_page_shows_cards_and_table(self, client: TestClient) -> None:
        """Verifies formatted numbers, highlight classes and escaped names."""
        text = client.get("/").text

        assert "1,700" in text
        assert "highlight-high" in text
        assert "Law &amp; Policy" in text
        assert 'id="programs-summary"' in text
        assert "/charts/programs.png?v=" in text

    def test_first_visit_fetches_once(self, client: TestClient, source: FakeSnapshotSource) -> None:
        """Verifies repeated page loads reuse the loaded snapshot."""
        client.get("/")
        client.get("/")
        assert source.calls == 1

    def test_first_load_failure_shows_error_card(self, service: AdmissionsAnalyticsService) -> None:
        """Verifies a failed first load renders the error and retry hint."""
        app = create_app(source=FakeSnapshotSource(FetchError("down")), service=service)
        text = TestClient(app).get("/").text

        assert "Failed to fetch analytics" in text
        assert "Use the refresh button to try again." in text
        assert 'id="programs-summary"' not in text

    def test_refresh_button_enabled_while_loading(
        self, client: TestClient, source: FakeSnapshotSource
    ) -> None:
        """Verifies a page rendered mid-refresh still has a usable button.

        Business context:
        Refresh only swaps the dashboard body, so a button rendered
        disabled would stay disabled. htmx disables it per request instead.

        Arrangement:
        Another viewer's refresh is in flight (store left in Loading).
        """
        client.app.state.dashboard_presenter.store.begin_refresh()  # type: ignore[attr-defined]

        text = client.get("/").text

        assert "Loading analytics…" in text
        assert source.calls == 0
        assert '<button type="button"\n' in text
        assert 'hx-disabled-elt="this"' in text

    def test_filter_values_prefilled(self, client: TestClient) -> None:
        """Verifies the date inputs echo the query string filter."""
        text = client.get("/?from=2024-01-02&to=2024-01-03").text
        assert 'value="2024-01-02"' in text
        assert 'value="2024-01-03"' in text


class TestPartials:
    """Test suite for htmx partial routes."""

    def test_refresh_refetches(self, client: TestClient, source: FakeSnapshotSource) -> None:
        """Verifies POST /partials/dashboard always calls the source."""
        client.get("/")
        response = client.post("/partials/dashboard", data={"from": "", "to": ""})

        assert response.status_code == 200
        assert source.calls == 2
        assert "<html" not in response.text
        assert "1,700" in response.text

    def test_refresh_failure_keeps_data(
        self, client: TestClient, source: FakeSnapshotSource
    ) -> None:
        """Verifies a failed refresh shows the error above the old data.

        Business context:
        A transient network error must not blank the page for staff.
        """
        client.get("/")
        source.queue(FetchError("down"))

        text = client.post("/partials/dashboard").text

        assert "Failed to fetch analytics" in text
        assert "1,700" in text

    def test_refresh_keeps_filter(self, client: TestClient) -> None:
        """Verifies the submitted filter applies to the refreshed trends."""
        text = client.post(
            "/partials/dashboard", data={"from": "2024-01-02", "to": "2024-01-02"}
        ).text
        assert "1 days" in text

    def test_dashboard_partial_does_not_fetch(
        self, client: TestClient, source: FakeSnapshotSource
    ) -> None:
        """Verifies GET /partials/dashboard renders the current state only."""
        response = client.get("/partials/dashboard")
        assert response.status_code == 200
        assert source.calls == 0

    def test_trends_partial_filters(self, client: TestClient, source: FakeSnapshotSource) -> None:
        """Verifies a single-day filter shows one day and does not refetch."""
        client.get("/")
        text = client.get("/partials/trends?from=2024-01-02&to=2024-01-02").text

        assert "1 days" in text
        assert "from=2024-01-02" in text
        assert source.calls == 1

    def test_trends_partial_empty_range(self, client: TestClient) -> None:
        """Verifies a range with no points shows the empty message."""
        client.get("/")
        text = client.get("/partials/trends?from=2030-01-01").text
        assert "No data in selected range" in text

    def test_invalid_filter_is_ignored(self, client: TestClient) -> None:
        """Verifies a malformed date is treated as unbounded, not a 422."""
        client.get("/")
        response = client.get("/partials/trends?from=not-a-date")
        assert response.status_code == 200
        assert "3 days" in response.text


class TestCharts:
    """Test suite for chart image routes."""

    def test_placeholder_before_load(self, client: TestClient) -> None:
        """Verifies charts return an SVG placeholder when nothing is loaded."""
        response = client.get("/charts/programs.png")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert b"No data available" in response.content

    def test_programs_chart_png(self, client: TestClient) -> None:
        """Verifies the bar chart is served as PNG after loading."""
        client.get("/")
        response = client.get("/charts/programs.png")

        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(PNG_MAGIC)

    def test_trends_chart_png_with_filter(self, client: TestClient) -> None:
        """Verifies the line chart accepts the date filter."""
        client.get("/")
        response = client.get("/charts/trends.png?from=2024-01-02&to=2024-01-03")

        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(PNG_MAGIC)


class TestReportEndpoint:
    """Test suite for GET /api/report."""

    def test_report_json(self, client: TestClient) -> None:
        """Verifies the report is wrapped in JSON and honours the filter."""
        response = client.get("/api/report?from=2024-01-02")

        assert response.status_code == 200
        report = response.json()["report"]
        assert "ADMISSIONS ANALYTICS - SUMMARY REPORT" in report
        assert "APPLICATION TRENDS (2024-01-02 to any)" in report


class TestRunDashboard:
    """Test suite for the uvicorn launcher."""

    def test_run_dashboard_calls_uvicorn(self) -> None:
        """Verifies uvicorn is started with the app factory and bind settings."""
        with patch("admissions_analytics.web.app.uvicorn.run") as mock_run:
            run_dashboard(host="0.0.0.0", port=9000)

        mock_run.assert_called_once_with(
            "admissions_analytics.web.app:create_app",
            factory=True,
            host="0.0.0.0",
            port=9000,
            reload=False,
            log_level="info",
        )
