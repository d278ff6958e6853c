"""
Configuration for Admissions Analytics.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All configurable values live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Seed Data: Fixed per-program application counts
- Derived Totals: Verified and rejected ratios
- Trend Generation: Window sizes and sinusoid parameters
- View: Highlight thresholds and user-facing messages
- Server: API path, bind address and port

ENVIRONMENT VARIABLES:
- ADMISSIONS_API_URL: Base URL of a running analytics API. When set, the
  dashboard fetches snapshots over HTTP instead of building them in-process.

USAGE:
    from admissions_analytics.config import Config
    programs = Config.PROGRAM_SEED
    window = Config.TREND_WINDOW_DAYS
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for Admissions Analytics.

    DESIGN: Frozen dataclass ensures configuration immutability at runtime.
    All values are class-level constants - no instance creation needed.

    SEED TABLE:
    PROGRAM_SEED is static demo data, not computed. The responder receives
    it as an explicit argument so tests can inject their own table.
    """

    # =========================================================================
    # SEED DATA
    # =========================================================================
    PROGRAM_SEED: ClassVar[tuple[tuple[str, int], ...]] = (
        ("Computer Science", 1180),
        ("Mechanical Engineering", 640),
        ("Business Administration", 520),
        ("Psychology", 410),
        ("Biology", 360),
    )

    # =========================================================================
    # DERIVED TOTALS
    # =========================================================================
    VERIFIED_RATIO: ClassVar[float] = 0.72
    """Share of total applicants reported as verified."""

    REJECTED_RATIO: ClassVar[float] = 0.18
    """Share of total applicants reported as rejected."""

    # =========================================================================
    # TREND GENERATION
    # =========================================================================
    TREND_WINDOW_DAYS: ClassVar[int] = 45
    """Window used by the live analytics endpoint."""

    TREND_DEFAULT_DAYS: ClassVar[int] = 30
    """Window used when the generator is called without one."""

    TREND_BASELINE: ClassVar[int] = 60
    TREND_AMPLITUDE: ClassVar[int] = 40
    TREND_MIN_APPLICATIONS: ClassVar[int] = 10
    TREND_NOISE_PERIOD: ClassVar[int] = 5
    TREND_NOISE_STEP: ClassVar[int] = 3

    # =========================================================================
    # VIEW
    # =========================================================================
    HIGHLIGHT_HIGH: ClassVar[int] = 1000
    HIGHLIGHT_MEDIUM: ClassVar[int] = 500
    FETCH_ERROR_MESSAGE: ClassVar[str] = "Failed to fetch analytics"

    # =========================================================================
    # SERVER
    # =========================================================================
    API_PATH: ClassVar[str] = "/api/v1/analytics/admissions"
    DEFAULT_HOST: ClassVar[str] = "127.0.0.1"
    DEFAULT_PORT: ClassVar[int] = 8000

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _api_url_override: ClassVar[str | None] = None

    @classmethod
    def get_api_url(cls) -> str | None:
        """
        Get the base URL of a remote analytics API, if one is configured.

        Uses a priority system: test override first, then the
        ADMISSIONS_API_URL environment variable. An empty value counts as
        unset.

        Business context: The dashboard normally renders snapshots built
        in the same process. Pointing it at a separately deployed API lets
        one dashboard front a backend running elsewhere.

        Returns:
            Base URL without trailing slash, or None when the dashboard
            should use the in-process responder.

        Example:
            >>> # With env var: ADMISSIONS_API_URL=http://analytics:8000/
            >>> Config.get_api_url()
            'http://analytics:8000'
        """
        value = cls._api_url_override
        if value is None:
            value = os.environ.get("ADMISSIONS_API_URL", "")
        value = value.strip().rstrip("/")
        return value or None

    @classmethod
    def set_test_overrides(cls, api_url: str | None = None) -> None:
        """
        Set test overrides for environment-based settings.

        Must call reset_test_overrides() in test teardown to avoid
        affecting other tests.

        Args:
            api_url: Override for the remote API base URL. Use "" to force
                the in-process responder regardless of the environment.
        """
        cls._api_url_override = api_url

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Clear test overrides so settings come from the environment again."""
        cls._api_url_override = None
