"""
Pytest configuration and shared fixtures for Admissions Analytics tests.

This module contains:
- FakeSnapshotSource: Scriptable snapshot source for presenter/web tests
- Shared fixtures available to all test modules
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, date, datetime

import pytest

from admissions_analytics.client import FetchError
from admissions_analytics.config import Config
from admissions_analytics.models import AdmissionsSnapshot, ProgramCount, TrendPoint
from admissions_analytics.service import AdmissionsAnalyticsService

FIXED_NOW = datetime(2024, 1, 31, 9, 15, tzinfo=UTC)


class FakeSnapshotSource:
    """
    Snapshot source returning scripted outcomes in order.

    Each queued item is either an AdmissionsSnapshot (returned) or an
    exception instance (raised). When the queue runs dry the last outcome
    repeats; an empty script raises FetchError.

    FEATURES:
    - No network or clock
    - Records how many times it was called
    """

    def __init__(self, *outcomes: AdmissionsSnapshot | Exception) -> None:
        self._outcomes = list(outcomes)
        self._last: AdmissionsSnapshot | Exception | None = None
        self.calls = 0

    def queue(self, *outcomes: AdmissionsSnapshot | Exception) -> None:
        """Append more outcomes to the script."""
        self._outcomes.extend(outcomes)

    def fetch_snapshot(self) -> AdmissionsSnapshot:
        """Return or raise the next scripted outcome."""
        self.calls += 1
        if self._outcomes:
            self._last = self._outcomes.pop(0)
        outcome = self._last
        if outcome is None:
            raise FetchError("No scripted outcome")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def _isolate_config() -> Iterator[None]:
    """Force the in-process source so ADMISSIONS_API_URL never leaks into tests."""
    Config.set_test_overrides(api_url="")
    yield
    Config.reset_test_overrides()


@pytest.fixture
def service() -> AdmissionsAnalyticsService:
    """Responder with the default seed table and a clock pinned to FIXED_NOW.

    Returns:
        AdmissionsAnalyticsService whose snapshots end on 2024-01-31.
    """
    return AdmissionsAnalyticsService(clock=lambda: FIXED_NOW)


@pytest.fixture
def snapshot(service: AdmissionsAnalyticsService) -> AdmissionsSnapshot:
    """Full default snapshot for 2024-01-31."""
    return service.fetch_snapshot()


@pytest.fixture
def small_snapshot() -> AdmissionsSnapshot:
    """Hand-built snapshot with a three-day trend (5, 7, 9).

    Business context:
    Small, readable data makes filtering and rendering assertions obvious.

    Returns:
        AdmissionsSnapshot with two programs and trends 2024-01-01..03.
    """
    return AdmissionsSnapshot(
        total_applicants=1700,
        verified_applicants=1224,
        rejected_applicants=306,
        per_program=(
            ProgramCount("Computer Science", 1180),
            ProgramCount("Law & Policy", 520),
        ),
        trends=(
            TrendPoint(date(2024, 1, 1), 5),
            TrendPoint(date(2024, 1, 2), 7),
            TrendPoint(date(2024, 1, 3), 9),
        ),
        generated_at="2024-01-03T12:00:00.000Z",
    )
