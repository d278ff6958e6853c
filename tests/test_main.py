"""Main test module for admissions-analytics."""

import runpy
from unittest.mock import patch

import pytest

import admissions_analytics


class TestVersion:
    """Test version information."""

    def test_version_exists(self) -> None:
        """Verifies that version string is defined in package.

        Business context:
        Version information is shown by --version and the OpenAPI docs.
        """
        assert admissions_analytics.__version__ is not None

    def test_version_format(self) -> None:
        """Verifies version follows MAJOR.MINOR.PATCH with numeric parts."""
        parts = admissions_analytics.__version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_title_exists(self) -> None:
        """Verifies the package title matches the import name."""
        assert admissions_analytics.__title__ == "admissions_analytics"

    def test_metadata_exported(self) -> None:
        """Verifies every metadata name in __all__ is defined."""
        for name in admissions_analytics.__all__:
            assert getattr(admissions_analytics, name)


class TestModuleExecution:
    """Test python -m admissions_analytics."""

    def test_module_runs_cli_main(self) -> None:
        """Verifies __main__ exits with the CLI's return code."""
        with patch("admissions_analytics.cli.main", return_value=0) as mock_main:
            with pytest.raises(SystemExit) as exc_info:
                runpy.run_module("admissions_analytics", run_name="__main__")
        assert exc_info.value.code == 0
        mock_main.assert_called_once_with()
