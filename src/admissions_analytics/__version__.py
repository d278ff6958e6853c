"""Version information for admissions-analytics."""

__version__ = "1.0.0"
__version_date__ = "2026-10-19"

__title__ = "admissions_analytics"
__description__ = "Admissions analytics dashboard with a deterministic mock statistics endpoint"
__url__ = "https://github.com/admissions-analytics/admissions-analytics"

__author__ = "Admissions Analytics Contributors"

__license__ = "MIT"
__copyright__ = "Copyright 2026 Admissions Analytics Contributors"

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
