"""
Analytics responder for Admissions Analytics.

PURPOSE: Build one complete AdmissionsSnapshot per request.
AI CONTEXT: Stateless across requests - every call computes its own answer.

RESPONSIBILITIES:
- Convert the injected seed table into ProgramCount rows
- Derive totals via AnalyticsEngine
- Generate the trend window ending on the request's UTC calendar date
- Stamp generatedAt with the request instant

The clock is injected so tests can pin the reference date. The API route
and the dashboard's in-process source both call fetch_snapshot().

USAGE:
    service = AdmissionsAnalyticsService()
    snapshot = service.fetch_snapshot()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from .config import Config
from .models import AdmissionsSnapshot, ProgramCount
from .statistics import AnalyticsEngine

__all__ = ["AdmissionsAnalyticsService", "format_timestamp"]

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """
    Format an instant as ISO 8601 UTC with millisecond precision.

    Naive datetimes are taken to be UTC already.

    Args:
        moment: Instant to format.

    Returns:
        String like '2024-01-31T09:15:00.000Z'.

    Example:
        >>> format_timestamp(datetime(2024, 1, 31, 9, 15, tzinfo=UTC))
        '2024-01-31T09:15:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


class AdmissionsAnalyticsService:
    """
    Responder producing admissions analytics snapshots.

    DESIGN:
    - Seed table is an immutable tuple injected at construction
    - Clock is injected; build_snapshot() itself is pure
    - No shared mutable state, so concurrent requests need no locking
    """

    def __init__(
        self,
        programs: Iterable[tuple[str, int]] = Config.PROGRAM_SEED,
        engine: AnalyticsEngine | None = None,
        clock: Callable[[], datetime] | None = None,
        window_days: int = Config.TREND_WINDOW_DAYS,
    ) -> None:
        """
        Initialize the responder with its seed data and collaborators.

        Business context: The seed table stands in for a real admissions
        data store. Keeping it an explicit argument lets a deployment or a
        test swap the table without touching process-wide state.

        Args:
            programs: Ordered (program name, applications) pairs. Default:
                Config.PROGRAM_SEED.
            engine: AnalyticsEngine for totals and trends. Default: a new
                engine with Config ratios.
            clock: Zero-argument callable returning the current instant.
                Default: timezone-aware UTC now.
            window_days: Trend window size. Default: Config.TREND_WINDOW_DAYS (45).

        Raises:
            ValueError: If program names repeat or a count is negative.

        Example:
            >>> service = AdmissionsAnalyticsService(programs=[("Law", 10)])
            >>> service.fetch_snapshot().total_applicants
            10
        """
        rows = tuple(ProgramCount(program=name, applications=count) for name, count in programs)
        names = [row.program for row in rows]
        if len(set(names)) != len(names):
            raise ValueError(f"Program names must be unique: {names}")
        negative = [row.program for row in rows if row.applications < 0]
        if negative:
            raise ValueError(f"Program counts must be non-negative: {negative}")

        self.programs = rows
        self.engine = engine or AnalyticsEngine()
        self.clock = clock or _utc_now
        self.window_days = window_days

    def build_snapshot(self, now: datetime) -> AdmissionsSnapshot:
        """
        Compute a snapshot for the given instant.

        The trend window ends on ``now``'s UTC calendar date. Calling this
        twice with instants on the same UTC day yields identical per-program
        and trend content; only generatedAt differs.

        Args:
            now: Request instant. Naive values are treated as UTC.

        Returns:
            Fully populated AdmissionsSnapshot.

        Example:
            >>> snap = service.build_snapshot(datetime(2024, 1, 31, tzinfo=UTC))
            >>> snap.trends[-1].date.isoformat()
            '2024-01-31'
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        today = now.astimezone(UTC).date()

        totals = self.engine.calculate_totals(self.programs)
        trends = self.engine.generate_trends(self.window_days, today)

        snapshot = AdmissionsSnapshot(
            total_applicants=totals.total,
            verified_applicants=totals.verified,
            rejected_applicants=totals.rejected,
            per_program=self.programs,
            trends=tuple(trends),
            generated_at=format_timestamp(now),
        )
        logger.debug(
            "Built admissions snapshot: %d applicants, %d trend days ending %s",
            totals.total,
            len(trends),
            today.isoformat(),
        )
        return snapshot

    def fetch_snapshot(self) -> AdmissionsSnapshot:
        """Build a snapshot for the current instant from the injected clock."""
        return self.build_snapshot(self.clock())
