"""
Data models for Admissions Analytics.

PURPOSE: Type-safe dataclasses representing the analytics snapshot.
AI CONTEXT: These models define the JSON schema served by the analytics API.

MODEL HIERARCHY:
- AdmissionsSnapshot: Full payload for one request
  - ProgramCount: One row of the per-program seed table
  - TrendPoint: One day of the synthetic trend series
- ApplicantTotals: Numbers derived from the per-program table

SERIALIZATION:
All models have to_dict() producing the camelCase wire format and
from_dict() for parsing it back. from_dict() raises ValueError on a
malformed payload. Dates use YYYY-MM-DD, generatedAt is ISO 8601 UTC.

USAGE:
    snapshot = service.fetch_snapshot()
    payload = snapshot.to_dict()
    same = AdmissionsSnapshot.from_dict(payload)
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any

__all__ = [
    "ProgramCount",
    "TrendPoint",
    "ApplicantTotals",
    "AdmissionsSnapshot",
]


def _require_int(data: dict[str, Any], key: str) -> int:
    """
    Read a non-negative integer field from a parsed JSON object.

    Args:
        data: Parsed JSON object.
        key: Field name.

    Returns:
        The integer value.

    Raises:
        ValueError: If the key is missing, not an integer (bools excluded),
            or negative.
    """
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field '{key}' must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"Field '{key}' must be non-negative, got {value}")
    return value


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise ValueError(f"Field '{key}' must be a list, got {type(value).__name__}")
    return value


def _require_object(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be an object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ProgramCount:
    """Applications received by one program."""

    program: str
    applications: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format ``{"program", "applications"}``."""
        return {"program": self.program, "applications": self.applications}

    @classmethod
    def from_dict(cls, data: Any) -> ProgramCount:
        """
        Parse a program row from its wire format.

        Args:
            data: Parsed JSON object with 'program' and 'applications'.

        Returns:
            ProgramCount instance.

        Raises:
            ValueError: If the object is malformed.
        """
        obj = _require_object(data, "Program row")
        program = obj.get("program")
        if not isinstance(program, str) or not program:
            raise ValueError(f"Field 'program' must be a non-empty string, got {program!r}")
        return cls(program=program, applications=_require_int(obj, "applications"))


@dataclass(frozen=True)
class TrendPoint:
    """
    One day of the synthetic applications trend.

    The date is kept as a ``datetime.date`` so range filtering compares
    calendar days rather than strings. It is serialized as YYYY-MM-DD.
    """

    date: datetime.date
    applications: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format ``{"date": "YYYY-MM-DD", "applications"}``."""
        return {"date": self.date.isoformat(), "applications": self.applications}

    @classmethod
    def from_dict(cls, data: Any) -> TrendPoint:
        """
        Parse a trend point from its wire format.

        Args:
            data: Parsed JSON object with 'date' (YYYY-MM-DD) and 'applications'.

        Returns:
            TrendPoint instance.

        Raises:
            ValueError: If the object is malformed or the date is not ISO.
        """
        obj = _require_object(data, "Trend point")
        raw_date = obj.get("date")
        if not isinstance(raw_date, str):
            raise ValueError(f"Field 'date' must be a string, got {raw_date!r}")
        return cls(
            date=datetime.date.fromisoformat(raw_date),
            applications=_require_int(obj, "applications"),
        )


@dataclass(frozen=True)
class ApplicantTotals:
    """Headline numbers derived from the per-program table."""

    total: int
    verified: int
    rejected: int


@dataclass(frozen=True)
class AdmissionsSnapshot:
    """
    Complete analytics payload returned for one request.

    INVARIANTS:
    - total_applicants equals the sum of per_program applications
    - verified/rejected are derived from the total, never stored separately
    - trends is ascending, contiguous, one point per day

    A snapshot is built fresh for every request and never mutated after
    it is returned.
    """

    total_applicants: int
    verified_applicants: int
    rejected_applicants: int
    per_program: tuple[ProgramCount, ...]
    trends: tuple[TrendPoint, ...]
    generated_at: str

    @property
    def totals(self) -> ApplicantTotals:
        """Headline numbers as an ApplicantTotals value."""
        return ApplicantTotals(
            total=self.total_applicants,
            verified=self.verified_applicants,
            rejected=self.rejected_applicants,
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize snapshot to the JSON document served by the API.

        Business context: The dashboard and any external consumer read
        this exact shape, so keys follow the published camelCase contract.

        Returns:
            Dict with totalApplicants, verifiedApplicants,
            rejectedApplicants, perProgram, trends and generatedAt.

        Example:
            >>> snapshot.to_dict()["totalApplicants"]
            3110
        """
        return {
            "totalApplicants": self.total_applicants,
            "verifiedApplicants": self.verified_applicants,
            "rejectedApplicants": self.rejected_applicants,
            "perProgram": [row.to_dict() for row in self.per_program],
            "trends": [point.to_dict() for point in self.trends],
            "generatedAt": self.generated_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> AdmissionsSnapshot:
        """
        Parse a snapshot received from the analytics API.

        Validates field presence and types only. Derived-number invariants
        are the responder's responsibility and are not re-checked here, so
        a dashboard can still display data from an older backend.

        Args:
            data: Parsed JSON document.

        Returns:
            AdmissionsSnapshot instance.

        Raises:
            ValueError: If any field is missing or has the wrong type.

        Example:
            >>> snap = AdmissionsSnapshot.from_dict(response.json())
            >>> snap.per_program[0].program
            'Computer Science'
        """
        obj = _require_object(data, "Snapshot")
        generated_at = obj.get("generatedAt")
        if not isinstance(generated_at, str):
            raise ValueError(f"Field 'generatedAt' must be a string, got {generated_at!r}")
        return cls(
            total_applicants=_require_int(obj, "totalApplicants"),
            verified_applicants=_require_int(obj, "verifiedApplicants"),
            rejected_applicants=_require_int(obj, "rejectedApplicants"),
            per_program=tuple(
                ProgramCount.from_dict(row) for row in _require_list(obj, "perProgram")
            ),
            trends=tuple(TrendPoint.from_dict(point) for point in _require_list(obj, "trends")),
            generated_at=generated_at,
        )
