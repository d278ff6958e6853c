"""
Presenters for the Admissions Analytics dashboard.

PURPOSE: Testable layer between the snapshot source and the HTML/PNG output.
AI CONTEXT: DashboardPresenter owns fetching; view models carry no I/O.

DESIGN PRINCIPLES:
1. Presenters receive data, return view models (dataclasses)
2. No dependencies on specific UI framework
3. Fully unit-testable with a fake SnapshotSource
4. Each presenter focuses on one kind of output

USAGE:
    presenter = DashboardPresenter(DashboardStore(), service)
    presenter.ensure_loaded()
    view = presenter.get_view(DateRange.parse("2024-01-01", ""))
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .client import FetchError, SnapshotSource
from .config import Config
from .dashboard import DashboardState, DashboardStore, DateRange, Idle, filter_trends
from .models import AdmissionsSnapshot, TrendPoint

if TYPE_CHECKING:
    from matplotlib.figure import Figure

__all__ = [
    "highlight_class",
    "StatCardViewModel",
    "ProgramRowViewModel",
    "TrendsViewModel",
    "DashboardViewModel",
    "DashboardPresenter",
    "ChartPresenter",
]

logger = logging.getLogger(__name__)

# Chart color palette for consistent styling
BAR_COLOR = "#1E3A8A"
LINE_COLOR = "#F59E0B"
GRID_COLOR = "#e5e7eb"


def highlight_class(value: int) -> str:
    """
    Map a count to the CSS class used to colour it.

    Thresholds: above 1000 is high (red), above 500 is medium (orange),
    anything else is low (green).

    Args:
        value: Applicant count.

    Returns:
        "highlight-high", "highlight-medium" or "highlight-low".

    Example:
        >>> highlight_class(1180)
        'highlight-high'
        >>> highlight_class(500)
        'highlight-low'
    """
    if value > Config.HIGHLIGHT_HIGH:
        return "highlight-high"
    if value > Config.HIGHLIGHT_MEDIUM:
        return "highlight-medium"
    return "highlight-low"


def _format_count(value: int) -> str:
    return f"{value:,}"


@dataclass
class StatCardViewModel:
    """View model for one headline number card."""

    title: str
    value: int

    @property
    def value_display(self) -> str:
        """Value with thousands separators, e.g. '3,110'."""
        return _format_count(self.value)

    @property
    def highlight_class(self) -> str:
        """CSS class colouring the value by magnitude."""
        return highlight_class(self.value)


@dataclass
class ProgramRowViewModel:
    """View model for one program in the bar chart and summary table."""

    program: str
    applications: int

    @property
    def applications_display(self) -> str:
        return _format_count(self.applications)

    @property
    def highlight_class(self) -> str:
        return highlight_class(self.applications)


@dataclass
class TrendsViewModel:
    """View model for the filtered trend series."""

    points: list[TrendPoint] = field(default_factory=list)
    date_range: DateRange = field(default_factory=DateRange)

    @property
    def is_empty(self) -> bool:
        return not self.points

    @property
    def total_applications(self) -> int:
        """Sum of applications over the filtered days."""
        return sum(point.applications for point in self.points)

    @property
    def peak(self) -> TrendPoint | None:
        """
        Busiest day in the filtered series.

        Ties go to the earliest day. Returns None for an empty series.

        Example:
            >>> TrendsViewModel(points).peak.applications
            97
        """
        if not self.points:
            return None
        return max(self.points, key=lambda point: point.applications)

    @property
    def range_label(self) -> str:
        """Human label for the active filter, e.g. '2024-01-01 to any'."""
        if self.date_range.is_open:
            return "all dates"
        lower = self.date_range.from_value or "any"
        upper = self.date_range.to_value or "any"
        return f"{lower} to {upper}"


@dataclass
class DashboardViewModel:
    """
    Everything the dashboard page needs for one render.

    ``has_data`` is independent of ``status``: a failed refresh still shows
    the previously loaded cards, charts and table under the error message.
    """

    status: str
    error_message: str = ""
    cards: list[StatCardViewModel] = field(default_factory=list)
    programs: list[ProgramRowViewModel] = field(default_factory=list)
    trends: TrendsViewModel = field(default_factory=TrendsViewModel)
    generated_at: str = ""

    @property
    def has_data(self) -> bool:
        return bool(self.cards)

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"

    @property
    def show_loading_placeholder(self) -> bool:
        """True while the very first load is still pending."""
        return self.is_loading and not self.has_data

    @property
    def show_error(self) -> bool:
        return self.status == "failed" and bool(self.error_message)


class DashboardPresenter:
    """
    Presenter that loads snapshots into a store and builds view models.

    One instance is shared by the web application, so the last loaded
    snapshot survives across page renders and failed refreshes.
    """

    def __init__(self, store: DashboardStore, source: SnapshotSource) -> None:
        """
        Initialize the presenter with its state store and data source.

        Business context: The dashboard either builds snapshots in-process
        or fetches them from a separately deployed API. Both satisfy
        SnapshotSource, so the presenter does not care which it has.

        Args:
            store: DashboardStore holding the current state.
            source: Object with fetch_snapshot() (service or HTTP client).

        Example:
            >>> presenter = DashboardPresenter(DashboardStore(), AdmissionsAnalyticsService())
            >>> presenter.refresh().status
            'loaded'
        """
        self.store = store
        self.source = source

    def refresh(self) -> DashboardState:
        """
        Fetch one snapshot and record the outcome.

        FetchError becomes a Failed state carrying the static user-facing
        message; earlier data is kept. Any other exception also marks the
        refresh failed and then propagates to the web framework, which turns
        it into a 500. If another refresh started meanwhile, this one's
        outcome is discarded.

        Returns:
            The store's state after the attempt.
        """
        request_id = self.store.begin_refresh()
        try:
            snapshot = self.source.fetch_snapshot()
        except FetchError as exc:
            logger.warning("Dashboard refresh %d failed: %s", request_id, exc)
            self.store.reject(request_id, Config.FETCH_ERROR_MESSAGE)
        except Exception:
            # Leave the store out of Loading before the fault reaches FastAPI
            self.store.reject(request_id, Config.FETCH_ERROR_MESSAGE)
            raise
        else:
            self.store.resolve(request_id, snapshot)
            logger.info("Dashboard refresh %d loaded snapshot %s", request_id, snapshot.generated_at)
        return self.store.state

    def ensure_loaded(self) -> DashboardState:
        """Run the first load if nothing has been requested yet."""
        state = self.store.state
        if isinstance(state, Idle):
            return self.refresh()
        return state

    def get_view(self, date_range: DateRange | None = None) -> DashboardViewModel:
        """
        Build the dashboard view model from the current state.

        Args:
            date_range: Trend filter. Default: unbounded.

        Returns:
            DashboardViewModel. Cards, programs and trends are empty when no
            snapshot has loaded yet.

        Example:
            >>> view = presenter.get_view(DateRange.parse("2024-01-02", "2024-01-02"))
            >>> len(view.trends.points)
            1
        """
        date_range = date_range or DateRange()
        state = self.store.state
        error_message = getattr(state, "message", "")
        snapshot = state.snapshot
        if snapshot is None:
            return DashboardViewModel(
                status=state.status,
                error_message=error_message,
                trends=TrendsViewModel(date_range=date_range),
            )
        return DashboardViewModel(
            status=state.status,
            error_message=error_message,
            cards=self._build_cards(snapshot),
            programs=[
                ProgramRowViewModel(program=row.program, applications=row.applications)
                for row in snapshot.per_program
            ],
            trends=TrendsViewModel(
                points=filter_trends(snapshot.trends, date_range),
                date_range=date_range,
            ),
            generated_at=snapshot.generated_at,
        )

    def get_report(self, date_range: DateRange | None = None) -> str:
        """
        Render the current view as a plain-text report.

        Business context: Admissions staff paste this into emails and
        tickets when a screenshot of the dashboard is not practical.

        Args:
            date_range: Trend filter. Default: unbounded.

        Returns:
            Multi-line report; states the error when no data is available.

        Example:
            >>> print(presenter.get_report())
            ==================================================
            ADMISSIONS ANALYTICS - SUMMARY REPORT
            ...
        """
        view = self.get_view(date_range)
        lines = [
            "=" * 50,
            "ADMISSIONS ANALYTICS - SUMMARY REPORT",
            "=" * 50,
        ]
        if view.show_error:
            lines.append(f"⚠️ {view.error_message}")
        if not view.has_data:
            lines.extend(["", "No data available", "=" * 50])
            return "\n".join(lines)

        lines.extend([f"Generated: {view.generated_at}", "", "📊 APPLICANTS"])
        for card in view.cards:
            lines.append(f"  • {card.title}: {card.value_display}")

        lines.extend(["", "🎓 APPLICATIONS PER PROGRAM"])
        width = max(len(row.program) for row in view.programs) if view.programs else 0
        for row in view.programs:
            lines.append(f"  • {row.program.ljust(width)}  {row.applications_display:>7}")

        trends = view.trends
        lines.extend(["", f"📈 APPLICATION TRENDS ({trends.range_label})"])
        if trends.is_empty:
            lines.append("  No data in selected range")
        else:
            peak = trends.peak
            lines.append(f"  • Days: {len(trends.points)}")
            lines.append(f"  • Applications: {_format_count(trends.total_applications)}")
            if peak is not None:
                lines.append(f"  • Peak: {peak.date.isoformat()} ({peak.applications})")
        lines.extend(["", "=" * 50])
        return "\n".join(lines)

    def _build_cards(self, snapshot: AdmissionsSnapshot) -> list[StatCardViewModel]:
        return [
            StatCardViewModel("Total Applicants", snapshot.total_applicants),
            StatCardViewModel("Verified Applicants", snapshot.verified_applicants),
            StatCardViewModel("Rejected Applicants", snapshot.rejected_applicants),
        ]


class ChartPresenter:
    """
    Presenter for generating chart images.

    Uses standalone matplotlib Figure objects for server-side rendering
    from the snapshot already held by the store; charts never trigger a
    fetch. Routes run in FastAPI's thread pool, so pyplot is never used.
    """

    def __init__(self, store: DashboardStore) -> None:
        self.store = store

    def _snapshot(self) -> AdmissionsSnapshot:
        snapshot = self.store.state.snapshot
        if snapshot is None:
            raise LookupError("No admissions snapshot has been loaded yet")
        return snapshot

    def render_programs_chart(self) -> bytes:
        """
        Render applications per program as a vertical bar chart PNG.

        Business context: The bar chart is the quickest way to compare
        demand across programs at a glance.

        Returns:
            PNG image bytes.

        Raises:
            LookupError: If no snapshot has been loaded.

        Example:
            >>> png = ChartPresenter(store).render_programs_chart()
            >>> png[:8] == b"\\x89PNG\\r\\n\\x1a\\n"
            True
        """
        from matplotlib.figure import Figure

        snapshot = self._snapshot()
        programs = [row.program for row in snapshot.per_program]
        counts = [row.applications for row in snapshot.per_program]

        # Standalone Figure: no pyplot global state across pool threads
        fig = Figure(figsize=(7, 4))
        ax = fig.subplots()
        if programs:
            ax.bar(programs, counts, color=BAR_COLOR)
            ax.tick_params(axis="x", labelsize=9, labelrotation=20)
            for label in ax.get_xticklabels():
                label.set_horizontalalignment("right")
        else:
            ax.text(0.5, 0.5, "No data available", ha="center", va="center")
        ax.set_ylabel("Applications")
        ax.set_title("Applications per Program")
        ax.grid(axis="y", linestyle="--", color=GRID_COLOR)
        ax.set_axisbelow(True)

        # Clean styling
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)

        return _figure_to_png(fig)

    def render_trends_chart(self, date_range: DateRange | None = None) -> bytes:
        """
        Render the filtered trend series as a line chart PNG.

        Args:
            date_range: Trend filter. Default: unbounded.

        Returns:
            PNG image bytes. An empty range renders a labelled blank chart.

        Raises:
            LookupError: If no snapshot has been loaded.
        """
        from matplotlib.figure import Figure

        points = filter_trends(self._snapshot().trends, date_range or DateRange())

        fig = Figure(figsize=(7, 4))
        ax = fig.subplots()
        if points:
            ax.plot(
                [point.date for point in points],
                [point.applications for point in points],
                color=LINE_COLOR,
                linewidth=2,
            )
            fig.autofmt_xdate()
        else:
            ax.text(0.5, 0.5, "No data in selected range", ha="center", va="center")
        ax.set_ylabel("Applications")
        ax.set_title("Application Trends")
        ax.grid(linestyle="--", color=GRID_COLOR)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)

        return _figure_to_png(fig)


def _figure_to_png(fig: Figure) -> bytes:
    buf = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=100, bbox_inches="tight")
    buf.seek(0)
    return buf.read()
