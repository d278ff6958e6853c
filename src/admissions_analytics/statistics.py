"""
Statistics engine for Admissions Analytics.

PURPOSE: Derive headline totals and generate the synthetic trend series.
AI CONTEXT: Pure data processing - no visualization, no I/O, no clock.

METRIC CATEGORIES:
1. Totals: total, verified and rejected applicants from the program table
2. Trends: one deterministic sample per day over a trailing window

TREND MODEL:
For offset i counting down from N-1 to 0 (i days before the reference date):
- base  = 60 + round(40 * sin(2 * pi * i / N))
- noise = round(((i mod 5) - 2) * 3)   -> repeating -6, -3, 0, 3, 6
- value = max(10, base + noise)

The reference date is always passed in, so the same (N, date) pair yields
the same series on every call.

USAGE:
    engine = AnalyticsEngine()
    totals = engine.calculate_totals(per_program)
    trends = engine.generate_trends(45, today=date(2024, 1, 31))
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import date, timedelta

from .config import Config
from .models import ApplicantTotals, ProgramCount, TrendPoint

__all__ = ["AnalyticsEngine", "generate_trends", "round_half_up"]


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going toward positive infinity.

    Python's built-in round() uses banker's rounding (round(0.5) == 0). The
    published figures were produced with half-up rounding, so every derived
    number in this module goes through here.

    Args:
        value: Number to round.

    Returns:
        Nearest integer; exact halves round up (2.5 -> 3, -2.5 -> -2).

    Example:
        >>> round_half_up(559.8)
        560
        >>> round_half_up(-5.5)
        -5
    """
    return math.floor(value + 0.5)


def generate_trends(
    days: int = Config.TREND_DEFAULT_DAYS,
    *,
    today: date,
) -> list[TrendPoint]:
    """
    Generate a synthetic daily applications series ending on ``today``.

    Produces exactly ``days`` points in ascending date order, one per
    calendar day with no gaps. Values follow one full sine period across
    the window plus a 5-day zigzag, floored at 10.

    Business context: There is no admissions data store behind the
    dashboard. This series gives the trend chart a stable, realistic-looking
    shape that tests can pin down exactly.

    Args:
        days: Window size N. Must be at least 1.
        today: Reference calendar date; the last point falls on it.

    Returns:
        List of N TrendPoint values, oldest first.

    Raises:
        ValueError: If days is less than 1.

    Example:
        >>> points = generate_trends(4, today=date(2024, 1, 10))
        >>> [(p.date.isoformat(), p.applications) for p in points]
        [('2024-01-07', 23), ('2024-01-08', 60), ('2024-01-09', 97), ('2024-01-10', 54)]
    """
    if days < 1:
        raise ValueError(f"Trend window must be at least 1 day, got {days}")

    points: list[TrendPoint] = []
    for offset in range(days - 1, -1, -1):
        phase = (offset / days) * math.pi * 2
        base = Config.TREND_BASELINE + round_half_up(Config.TREND_AMPLITUDE * math.sin(phase))
        noise = round_half_up(
            ((offset % Config.TREND_NOISE_PERIOD) - 2) * Config.TREND_NOISE_STEP
        )
        points.append(
            TrendPoint(
                date=today - timedelta(days=offset),
                applications=max(Config.TREND_MIN_APPLICATIONS, base + noise),
            )
        )
    return points


class AnalyticsEngine:
    """
    Calculator for admissions headline numbers and trend series.

    DESIGN:
    - Stateless: Each method operates on provided data
    - Pure: No side effects, only data transformation
    - Configurable: Ratios from Config or constructor
    """

    def __init__(
        self,
        verified_ratio: float | None = None,
        rejected_ratio: float | None = None,
    ) -> None:
        """
        Initialize the engine with configurable derivation ratios.

        Args:
            verified_ratio: Share of applicants counted as verified.
                Default: Config.VERIFIED_RATIO (0.72).
            rejected_ratio: Share of applicants counted as rejected.
                Default: Config.REJECTED_RATIO (0.18).

        Example:
            >>> AnalyticsEngine().verified_ratio
            0.72
        """
        self.verified_ratio = (
            Config.VERIFIED_RATIO if verified_ratio is None else verified_ratio
        )
        self.rejected_ratio = (
            Config.REJECTED_RATIO if rejected_ratio is None else rejected_ratio
        )

    def calculate_totals(self, per_program: Iterable[ProgramCount]) -> ApplicantTotals:
        """
        Derive total, verified and rejected applicant counts.

        Business context: The summary cards at the top of the dashboard show
        these three numbers. Verified and rejected are fixed shares of the
        total rather than independently tracked counts.

        Args:
            per_program: Program rows to sum.

        Returns:
            ApplicantTotals with total = sum of applications, verified and
            rejected rounded half-up from the configured ratios.

        Example:
            >>> engine = AnalyticsEngine()
            >>> engine.calculate_totals([ProgramCount("Biology", 3110)])
            ApplicantTotals(total=3110, verified=2239, rejected=560)
        """
        total = sum(row.applications for row in per_program)
        return ApplicantTotals(
            total=total,
            verified=round_half_up(total * self.verified_ratio),
            rejected=round_half_up(total * self.rejected_ratio),
        )

    def generate_trends(self, days: int, today: date) -> list[TrendPoint]:
        """Generate the trend series; see :func:`generate_trends`."""
        return generate_trends(days, today=today)
