"""
FastAPI routes for the Admissions Analytics dashboard.

PURPOSE: Thin route handlers that delegate to the responder and presenters.
AI CONTEXT: Routes should be simple - business logic in presenters.

ROUTE STRUCTURE:
- /api/v1/analytics/admissions : JSON snapshot, built fresh per request
- / : Main dashboard page (full HTML, performs the first load)
- /partials/* : htmx fragments for refresh and date filtering
- /charts/* : PNG chart images rendered from the loaded snapshot
- /api/report : Plain-text report wrapped in JSON

Handlers that may fetch are plain ``def`` so FastAPI runs them in its
thread pool; the HTTP client is synchronous.
"""

from __future__ import annotations

import html
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, Response

from ..config import Config
from ..dashboard import DateRange
from ..presenters import (
    ChartPresenter,
    DashboardPresenter,
    DashboardViewModel,
    TrendsViewModel,
)
from ..service import AdmissionsAnalyticsService

__all__ = [
    "router",
    "get_service",
    "get_dashboard_presenter",
    "get_chart_presenter",
    "get_date_range",
]

router = APIRouter()

# =============================================================================
# CSS Styles
# =============================================================================

_DASHBOARD_CSS = """
:root {
    --bg: #f1f5f9;
    --surface: #ffffff;
    --border: #e2e8f0;
    --text: #0f172a;
    --text-muted: #475569;
    --primary: #1e3a8a;
    --accent: #f59e0b;
    --high: #dc2626;
    --medium: #f97316;
    --low: #059669;
    --danger-bg: #fef2f2;
    --danger-border: #fecaca;
}
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
    font-family: system-ui, -apple-system, sans-serif;
    background: linear-gradient(to bottom, #f8fafc, var(--bg));
    color: var(--text);
    line-height: 1.6;
    min-height: 100vh;
}
header {
    position: sticky;
    top: 0;
    z-index: 10;
    background: rgba(255, 255, 255, 0.85);
    border-bottom: 1px solid var(--border);
}
.header-inner {
    max-width: 1280px;
    margin: 0 auto;
    padding: 1rem;
    display: flex;
    flex-wrap: wrap;
    gap: 0.75rem;
    justify-content: space-between;
    align-items: flex-end;
}
h1 { font-size: 1.75rem; font-weight: 800; letter-spacing: -0.02em; }
.subtitle { color: var(--text-muted); }
.filters { display: flex; align-items: flex-end; gap: 0.5rem; }
.filters label { display: block; font-size: 0.875rem; color: var(--text-muted); }
.filters input {
    padding: 0.375rem 0.5rem;
    border: 1px solid var(--border);
    border-radius: 0.375rem;
}
button {
    padding: 0.5rem 1rem;
    border: none;
    border-radius: 0.375rem;
    background: var(--primary);
    color: white;
    cursor: pointer;
}
button:disabled { opacity: 0.6; cursor: wait; }
.htmx-indicator { display: none; color: var(--text-muted); font-size: 0.875rem; }
.htmx-request .htmx-indicator, .htmx-request.htmx-indicator { display: inline; }
main { max-width: 1280px; margin: 0 auto; padding: 1.5rem 1rem; }
.cards {
    display: grid;
    grid-template-columns: repeat(auto-fit, minmax(240px, 1fr));
    gap: 1rem;
    margin-bottom: 1.5rem;
}
.charts {
    display: grid;
    grid-template-columns: 3fr 2fr;
    gap: 1.5rem;
    margin-bottom: 1.5rem;
}
@media (max-width: 1024px) { .charts { grid-template-columns: 1fr; } }
.panel {
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 0.5rem;
    padding: 1rem;
    box-shadow: 0 1px 2px rgba(15, 23, 42, 0.05);
}
.panel h2 { font-size: 1rem; font-weight: 600; margin-bottom: 0.75rem; }
.card-title { font-size: 0.875rem; color: var(--text-muted); font-weight: 500; }
.metric { font-size: 2rem; font-weight: 800; letter-spacing: -0.02em; }
.highlight-high { color: var(--high); }
.highlight-medium { color: var(--medium); }
.highlight-low { color: var(--low); }
.chart-container { display: flex; justify-content: center; }
.chart-container img { max-width: 100%; height: auto; }
.empty { color: var(--text-muted); text-align: center; padding: 3rem 0; }
.loading { color: var(--text-muted); text-align: center; padding: 20vh 0; }
.error-card {
    max-width: 28rem;
    margin: 2rem auto;
    padding: 1.5rem;
    background: var(--danger-bg);
    border: 1px solid var(--danger-border);
    border-radius: 0.5rem;
}
.error-title { color: #b91c1c; font-weight: 500; }
.error-hint { color: var(--high); font-size: 0.875rem; margin-top: 0.25rem; }
table { width: 100%; border-collapse: collapse; }
th, td { text-align: left; padding: 0.75rem; border-bottom: 1px solid var(--border); }
th { color: var(--text-muted); font-weight: 500; font-size: 0.875rem; }
.num { text-align: right; }
.trend-summary { color: var(--text-muted); font-size: 0.875rem; margin-top: 0.5rem; }
footer {
    margin-top: 2rem;
    padding: 1rem 0;
    color: var(--text-muted);
    font-size: 0.875rem;
    text-align: center;
}
"""

# =============================================================================
# Dependency Factory Functions
# =============================================================================


def get_service(request: Request) -> AdmissionsAnalyticsService:
    """
    Return the analytics responder held by the application.

    Business context: The JSON endpoint and the in-process dashboard source
    share one responder so both see the same seed table.

    Args:
        request: Incoming request, used to reach ``app.state``.

    Returns:
        AdmissionsAnalyticsService created by create_app().
    """
    return request.app.state.service


def get_dashboard_presenter(request: Request) -> DashboardPresenter:
    """
    Return the application-wide DashboardPresenter.

    One presenter (and so one DashboardStore) lives for the whole process,
    which is what lets a failed refresh keep showing the last good data.

    Args:
        request: Incoming request, used to reach ``app.state``.

    Returns:
        DashboardPresenter created by create_app().
    """
    return request.app.state.dashboard_presenter


def get_chart_presenter(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
) -> ChartPresenter:
    """Create a ChartPresenter over the dashboard's store."""
    return ChartPresenter(presenter.store)


def get_date_range(
    date_from: Annotated[str | None, Query(alias="from")] = None,
    date_to: Annotated[str | None, Query(alias="to")] = None,
) -> DateRange:
    """Build the trend filter from the ``from``/``to`` query parameters."""
    return DateRange.parse(date_from, date_to)


# ============================================================================
# API Routes (JSON)
# ============================================================================


@router.get(Config.API_PATH)
def admissions_analytics(
    service: Annotated[AdmissionsAnalyticsService, Depends(get_service)],
) -> dict[str, object]:
    """
    Return a freshly computed admissions snapshot.

    Business context: This is the single data endpoint behind the
    dashboard. Every call builds its own answer; nothing is cached or
    persisted.

    Returns:
        JSON document with totalApplicants, verifiedApplicants,
        rejectedApplicants, perProgram, trends (45 days ending today, UTC)
        and generatedAt.

    Example:
        >>> # GET /api/v1/analytics/admissions
        >>> {"totalApplicants": 3110, "verifiedApplicants": 2239, ...}
    """
    return service.fetch_snapshot().to_dict()


@router.get("/api/report")
def api_report(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    date_range: Annotated[DateRange, Depends(get_date_range)],
) -> dict[str, str]:
    """
    Get the plain-text dashboard report as JSON.

    Loads data first if the dashboard has not been opened yet.

    Returns:
        Dict with single key 'report' containing the multi-line text.
    """
    presenter.ensure_loaded()
    return {"report": presenter.get_report(date_range)}


# ============================================================================
# Full Page Routes
# ============================================================================


@router.get("/", response_class=HTMLResponse)
def dashboard_page(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    date_range: Annotated[DateRange, Depends(get_date_range)],
) -> HTMLResponse:
    """
    Render the main dashboard page.

    The first visit triggers the initial load; later visits render the
    current state without refetching. Use the Refresh button to fetch again.

    Business context: This is the admissions office's overview page with
    headline cards, the per-program bar chart, the trend line chart and the
    program summary table.

    Returns:
        HTMLResponse containing the complete page with htmx wiring for
        refresh and date filtering.
    """
    presenter.ensure_loaded()
    view = presenter.get_view(date_range)
    return HTMLResponse(content=_render_dashboard_html(view), media_type="text/html; charset=utf-8")


# ============================================================================
# Partial Routes (htmx)
# ============================================================================


@router.post("/partials/dashboard", response_class=HTMLResponse)
def refresh_dashboard(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    date_from: Annotated[str, Form(alias="from")] = "",
    date_to: Annotated[str, Form(alias="to")] = "",
) -> HTMLResponse:
    """
    Refetch the snapshot and return the re-rendered dashboard body.

    Triggered by the Refresh button, which submits the current filter
    inputs. A failed fetch renders the error card above the data that was
    already loaded.

    Returns:
        HTMLResponse with the dashboard body fragment.
    """
    presenter.refresh()
    view = presenter.get_view(DateRange.parse(date_from, date_to))
    return HTMLResponse(content=_render_dashboard_body(view), media_type="text/html; charset=utf-8")


@router.get("/partials/dashboard", response_class=HTMLResponse)
def dashboard_partial(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    date_range: Annotated[DateRange, Depends(get_date_range)],
) -> HTMLResponse:
    """Render the dashboard body from the current state without fetching."""
    view = presenter.get_view(date_range)
    return HTMLResponse(content=_render_dashboard_body(view), media_type="text/html; charset=utf-8")


@router.get("/partials/trends", response_class=HTMLResponse)
def trends_partial(
    presenter: Annotated[DashboardPresenter, Depends(get_dashboard_presenter)],
    date_range: Annotated[DateRange, Depends(get_date_range)],
) -> HTMLResponse:
    """
    Render the trends panel for a new date filter.

    Filtering happens entirely against the snapshot already loaded; the
    responder is not called.

    Returns:
        HTMLResponse with the trends panel inner HTML.
    """
    view = presenter.get_view(date_range)
    return HTMLResponse(
        content=_render_trends_panel(view.trends, view.generated_at),
        media_type="text/html; charset=utf-8",
    )


# ============================================================================
# Chart Routes (PNG images)
# ============================================================================


@router.get("/charts/programs.png")
def programs_chart(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
) -> Response:
    """
    Serve the applications-per-program bar chart.

    Returns:
        PNG image, or an SVG placeholder when nothing is loaded yet.
    """
    try:
        png_bytes = presenter.render_programs_chart()
    except LookupError:
        return Response(content=_placeholder_chart_svg("No data available"), media_type="image/svg+xml")
    return Response(content=png_bytes, media_type="image/png")


@router.get("/charts/trends.png")
def trends_chart(
    presenter: Annotated[ChartPresenter, Depends(get_chart_presenter)],
    date_range: Annotated[DateRange, Depends(get_date_range)],
) -> Response:
    """
    Serve the application trends line chart for the given date filter.

    Returns:
        PNG image, or an SVG placeholder when nothing is loaded yet.
    """
    try:
        png_bytes = presenter.render_trends_chart(date_range)
    except LookupError:
        return Response(content=_placeholder_chart_svg("No data available"), media_type="image/svg+xml")
    return Response(content=png_bytes, media_type="image/png")


# ============================================================================
# Template Rendering Helpers
# ============================================================================


def _placeholder_chart_svg(message: str) -> bytes:
    """
    Generate a placeholder SVG shown instead of a chart.

    Args:
        message: Text centred in the placeholder.

    Returns:
        UTF-8 encoded SVG bytes.

    Example:
        >>> b"No data" in _placeholder_chart_svg("No data available")
        True
    """
    svg = f"""<svg xmlns="http://www.w3.org/2000/svg" width="400" height="200">
        <rect width="100%" height="100%" fill="#f1f5f9"/>
        <text x="50%" y="50%" text-anchor="middle" fill="#64748b" font-size="16">
            {html.escape(message)}
        </text>
    </svg>"""
    return svg.encode("utf-8")


def _chart_url(path: str, generated_at: str, date_range: DateRange | None = None) -> str:
    """Build a chart URL carrying the filter and a cache-busting version."""
    params: dict[str, str] = {}
    if date_range is not None:
        if date_range.from_value:
            params["from"] = date_range.from_value
        if date_range.to_value:
            params["to"] = date_range.to_value
    params["v"] = generated_at
    return html.escape(f"{path}?{urlencode(params)}")


def _render_dashboard_html(view: DashboardViewModel) -> str:
    """
    Render the complete dashboard HTML page.

    Args:
        view: DashboardViewModel for the current state and filter.

    Returns:
        Complete HTML document with embedded CSS and the htmx script.

    Example:
        >>> page = _render_dashboard_html(presenter.get_view())
        >>> "Admission Analytics Dashboard" in page
        True
    """
    from_value = view.trends.date_range.from_value
    to_value = view.trends.date_range.to_value

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Admission Analytics Dashboard</title>
    <script src="https://unpkg.com/htmx.org@1.9.10"></script>
    <style>
        {_DASHBOARD_CSS}
    </style>
</head>
<body>
    <header>
        <div class="header-inner">
            <div>
                <h1>Admission Analytics Dashboard</h1>
                <p class="subtitle">University Admin Portal</p>
            </div>
            <form id="filters" class="filters" onsubmit="return false;">
                <div>
                    <label for="from">From</label>
                    <input id="from" name="from" type="date" value="{from_value}"
                           hx-get="/partials/trends"
                           hx-trigger="change"
                           hx-include="#filters"
                           hx-target="#trends-panel"
                           hx-swap="innerHTML">
                </div>
                <div>
                    <label for="to">To</label>
                    <input id="to" name="to" type="date" value="{to_value}"
                           hx-get="/partials/trends"
                           hx-trigger="change"
                           hx-include="#filters"
                           hx-target="#trends-panel"
                           hx-swap="innerHTML">
                </div>
                <button type="button"
                        hx-post="/partials/dashboard"
                        hx-include="#filters"
                        hx-target="#dashboard-body"
                        hx-swap="innerHTML"
                        hx-indicator="#refresh-indicator"
                        hx-disabled-elt="this">
                    Refresh
                </button>
                <span id="refresh-indicator" class="htmx-indicator">Refreshing...</span>
            </form>
        </div>
    </header>

    <main id="dashboard-body">
        {_render_dashboard_body(view)}
    </main>

    <footer>
        Admission Analytics &bull; Powered by FastAPI + htmx
    </footer>
</body>
</html>"""


def _render_dashboard_body(view: DashboardViewModel) -> str:
    """
    Render the swappable dashboard body.

    Order matches the page: loading placeholder, error card, then the data
    sections. Loading and error can appear together with data.

    Args:
        view: DashboardViewModel to render.

    Returns:
        HTML fragment for the ``#dashboard-body`` element.
    """
    parts: list[str] = []
    if view.show_loading_placeholder:
        parts.append('<div class="loading">Loading analytics…</div>')
    if view.show_error:
        parts.append(
            f"""<div class="error-card">
            <div class="error-title">{html.escape(view.error_message)}</div>
            <div class="error-hint">Use the refresh button to try again.</div>
        </div>"""
        )
    if view.has_data:
        parts.append(_render_cards(view))
        parts.append(
            f"""<section class="charts">
            <div class="panel" id="programs-panel">
                {_render_programs_chart_panel(view)}
            </div>
            <div class="panel" id="trends-panel">
                {_render_trends_panel(view.trends, view.generated_at)}
            </div>
        </section>"""
        )
        parts.append(_render_programs_table(view))
    return "\n".join(parts)


def _render_cards(view: DashboardViewModel) -> str:
    cards = "".join(
        f"""<div class="panel">
            <div class="card-title">{html.escape(card.title)}</div>
            <div class="metric {card.highlight_class}">{card.value_display}</div>
        </div>"""
        for card in view.cards
    )
    return f'<section class="cards">{cards}</section>'


def _render_programs_chart_panel(view: DashboardViewModel) -> str:
    if not view.programs:
        return '<h2>Applications per Program</h2><div class="empty">No data available</div>'
    src = _chart_url("/charts/programs.png", view.generated_at)
    return f"""<h2>Applications per Program</h2>
        <div class="chart-container">
            <img src="{src}" alt="Applications per Program">
        </div>"""


def _render_trends_panel(trends: TrendsViewModel, generated_at: str) -> str:
    """
    Render the trends panel inner HTML.

    Args:
        trends: Filtered trend view model.
        generated_at: Snapshot timestamp, used to version the chart URL.

    Returns:
        Panel HTML with the chart image and a one-line summary, or the
        empty-range message.
    """
    if trends.is_empty:
        return '<h2>Application Trends</h2><div class="empty">No data in selected range</div>'

    src = _chart_url("/charts/trends.png", generated_at, trends.date_range)
    peak = trends.peak
    peak_text = f" &bull; Peak {peak.date.isoformat()} ({peak.applications:,})" if peak else ""
    return f"""<h2>Application Trends</h2>
        <div class="chart-container">
            <img src="{src}" alt="Application Trends">
        </div>
        <div class="trend-summary">
            {len(trends.points)} days &bull; {trends.total_applications:,} applications{peak_text}
        </div>"""


def _render_programs_table(view: DashboardViewModel) -> str:
    if not view.programs:
        body = '<div class="empty">No data available</div>'
    else:
        rows = "".join(
            f"""<tr>
            <td><strong>{html.escape(row.program)}</strong></td>
            <td class="num"><strong class="{row.highlight_class}">{row.applications_display}</strong></td>
        </tr>"""
            for row in view.programs
        )
        body = f"""<table>
        <thead>
            <tr>
                <th>Program</th>
                <th class="num">Applicants</th>
            </tr>
        </thead>
        <tbody>
            {rows}
        </tbody>
    </table>"""
    return f"""<section class="panel" id="programs-summary">
        <h2>Programs Summary</h2>
        {body}
    </section>"""
