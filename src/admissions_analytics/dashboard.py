"""
Dashboard view state for Admissions Analytics.

PURPOSE: Track fetch status and filter the trend series for display.
AI CONTEXT: No I/O here - presenters drive the store, routes render it.

STATE MACHINE:
    Idle --begin--> Loading --resolve--> Loaded
                       |    --reject---> Failed
    Loaded/Failed --begin--> Loading   (re-entrant on every refresh)

Data survives failures: Loading and Failed both carry the last
successfully loaded snapshot, and only resolve() replaces it.

OVERLAPPING REFRESHES:
Each begin_refresh() returns a new request id. Completions for any id other
than the most recent one are ignored, so a slow early response can never
overwrite the result of a later refresh.

FILTERING:
DateRange bounds are inclusive calendar dates; an absent bound is open.
Filtering is a view projection only and never reaches the responder.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from .models import AdmissionsSnapshot, TrendPoint

__all__ = [
    "Idle",
    "Loading",
    "Loaded",
    "Failed",
    "DashboardState",
    "DashboardStore",
    "DateRange",
    "filter_trends",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    """Nothing requested yet."""

    status = "idle"

    @property
    def snapshot(self) -> AdmissionsSnapshot | None:
        return None


@dataclass(frozen=True)
class Loading:
    """A fetch is outstanding; ``previous`` is whatever was shown before."""

    previous: AdmissionsSnapshot | None = None
    status = "loading"

    @property
    def snapshot(self) -> AdmissionsSnapshot | None:
        return self.previous


@dataclass(frozen=True)
class Loaded:
    """The latest fetch succeeded."""

    data: AdmissionsSnapshot
    status = "loaded"

    @property
    def snapshot(self) -> AdmissionsSnapshot | None:
        return self.data


@dataclass(frozen=True)
class Failed:
    """The latest fetch failed; earlier data, if any, is kept."""

    message: str
    last_snapshot: AdmissionsSnapshot | None = None
    status = "failed"

    @property
    def snapshot(self) -> AdmissionsSnapshot | None:
        return self.last_snapshot


DashboardState = Idle | Loading | Loaded | Failed


class DashboardStore:
    """
    Thread-safe holder of the current DashboardState.

    FastAPI runs sync routes in a thread pool, so two refreshes can overlap.
    All transitions take a lock and stale completions are dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state: DashboardState = Idle()
        self._latest_request = 0

    @property
    def state(self) -> DashboardState:
        """Current state value (immutable)."""
        with self._lock:
            return self._state

    @property
    def latest_request(self) -> int:
        """Id of the most recently started refresh, 0 if none."""
        with self._lock:
            return self._latest_request

    def begin_refresh(self) -> int:
        """
        Enter Loading and allocate a request id.

        Business context: The Refresh button can be clicked repeatedly.
        Every click supersedes the previous one instead of racing it.

        Returns:
            New request id to pass to resolve() or reject().

        Example:
            >>> store = DashboardStore()
            >>> store.begin_refresh()
            1
            >>> store.state.status
            'loading'
        """
        with self._lock:
            self._latest_request += 1
            self._state = Loading(previous=self._state.snapshot)
            return self._latest_request

    def resolve(self, request_id: int, snapshot: AdmissionsSnapshot) -> bool:
        """
        Complete a refresh successfully.

        Args:
            request_id: Id returned by begin_refresh().
            snapshot: Fetched data.

        Returns:
            True if the state changed, False if the request was superseded.
        """
        with self._lock:
            if request_id != self._latest_request:
                logger.debug(
                    "Ignoring superseded response %d (latest %d)",
                    request_id,
                    self._latest_request,
                )
                return False
            self._state = Loaded(data=snapshot)
            return True

    def reject(self, request_id: int, message: str) -> bool:
        """
        Complete a refresh with an error, keeping previously loaded data.

        Args:
            request_id: Id returned by begin_refresh().
            message: User-facing error text.

        Returns:
            True if the state changed, False if the request was superseded.
        """
        with self._lock:
            if request_id != self._latest_request:
                logger.debug(
                    "Ignoring superseded failure %d (latest %d)",
                    request_id,
                    self._latest_request,
                )
                return False
            self._state = Failed(message=message, last_snapshot=self._state.snapshot)
            return True


def _parse_bound(value: str | None, name: str) -> date | None:
    if value is None or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        logger.warning("Ignoring unparseable '%s' filter value %r", name, value)
        return None


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive calendar-date filter for the trend series.

    ``None`` on either side means unbounded. The ``date_to`` bound covers
    the whole end day.
    """

    date_from: date | None = None
    date_to: date | None = None

    @classmethod
    def parse(cls, date_from: str | None = None, date_to: str | None = None) -> DateRange:
        """
        Build a range from date-picker strings.

        Empty strings mean unbounded. Values that are not YYYY-MM-DD are
        logged and treated as unbounded, matching how the date inputs behave
        when a browser submits a partial value.

        Args:
            date_from: Lower bound as YYYY-MM-DD, or empty.
            date_to: Upper bound as YYYY-MM-DD, or empty.

        Returns:
            DateRange with parsed bounds.

        Example:
            >>> DateRange.parse("2024-01-02", "")
            DateRange(date_from=datetime.date(2024, 1, 2), date_to=None)
        """
        return cls(
            date_from=_parse_bound(date_from, "from"),
            date_to=_parse_bound(date_to, "to"),
        )

    @property
    def from_value(self) -> str:
        """Lower bound as an input value ('' when open)."""
        return self.date_from.isoformat() if self.date_from else ""

    @property
    def to_value(self) -> str:
        """Upper bound as an input value ('' when open)."""
        return self.date_to.isoformat() if self.date_to else ""

    @property
    def is_open(self) -> bool:
        """True when neither bound is set."""
        return self.date_from is None and self.date_to is None

    def contains(self, day: date) -> bool:
        """Return True if ``day`` falls within both bounds (inclusive)."""
        if self.date_from is not None and day < self.date_from:
            return False
        if self.date_to is not None and day > self.date_to:
            return False
        return True


def filter_trends(trends: Iterable[TrendPoint], date_range: DateRange) -> list[TrendPoint]:
    """
    Select the trend points inside a date range, preserving order.

    Args:
        trends: Trend series, oldest first.
        date_range: Inclusive bounds.

    Returns:
        Matching points in their original order.

    Example:
        >>> points = [TrendPoint(date(2024, 1, d), v) for d, v in ((1, 5), (2, 7), (3, 9))]
        >>> filter_trends(points, DateRange(date(2024, 1, 2), date(2024, 1, 2)))
        [TrendPoint(date=datetime.date(2024, 1, 2), applications=7)]
    """
    return [point for point in trends if date_range.contains(point.date)]
