"""
HTTP client for the admissions analytics API.

PURPOSE: Fetch one AdmissionsSnapshot from a running analytics endpoint.
AI CONTEXT: The only network call the dashboard makes; one error kind out.

ERROR MODEL:
Every failure (connection error, non-2xx status, invalid JSON, malformed
payload) surfaces as FetchError. Callers show a static message and wait for
the user to refresh. There is no retry and no backoff; timeouts are httpx
defaults.

USAGE:
    with AdmissionsClient("http://127.0.0.1:8000") as client:
        snapshot = client.fetch_snapshot()
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Protocol

import httpx

from .config import Config
from .models import AdmissionsSnapshot

__all__ = ["AdmissionsClient", "FetchError", "SnapshotSource"]

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when a snapshot could not be fetched or parsed."""


class SnapshotSource(Protocol):
    """Anything that can produce an AdmissionsSnapshot on demand."""

    def fetch_snapshot(self) -> AdmissionsSnapshot:  # pragma: no cover - protocol
        ...


class AdmissionsClient:
    """
    Synchronous httpx client for GET /api/v1/analytics/admissions.

    Owns its httpx.Client unless one is injected; an injected client is
    left open on close() so the caller keeps control of its lifecycle.
    """

    def __init__(self, base_url: str, http_client: httpx.Client | None = None) -> None:
        """
        Initialize the client for one analytics API.

        Args:
            base_url: Server root, e.g. 'http://127.0.0.1:8000'. A trailing
                slash is ignored.
            http_client: Optional preconfigured httpx.Client (tests pass one
                backed by httpx.MockTransport).

        Example:
            >>> client = AdmissionsClient("http://127.0.0.1:8000/")
            >>> client.url
            'http://127.0.0.1:8000/api/v1/analytics/admissions'
        """
        self.base_url = base_url.rstrip("/")
        self.url = f"{self.base_url}{Config.API_PATH}"
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client()

    def fetch_snapshot(self) -> AdmissionsSnapshot:
        """
        Fetch and parse one snapshot.

        Business context: The dashboard loads on page open and on every
        manual refresh. A failure must not be fatal; it becomes a message
        on screen while previously loaded data stays visible.

        Returns:
            Parsed AdmissionsSnapshot.

        Raises:
            FetchError: On any network, HTTP status, JSON or schema failure.

        Example:
            >>> snapshot = client.fetch_snapshot()
            >>> snapshot.total_applicants
            3110
        """
        try:
            response = self._http.get(self.url)
            response.raise_for_status()
            return AdmissionsSnapshot.from_dict(response.json())
        except httpx.HTTPError as exc:
            logger.warning("Analytics request to %s failed: %s", self.url, exc)
            raise FetchError(f"Request to {self.url} failed: {exc}") from exc
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError subclass
            logger.warning("Analytics response from %s was malformed: %s", self.url, exc)
            raise FetchError(f"Malformed analytics response from {self.url}: {exc}") from exc

    def close(self) -> None:
        """Close the underlying httpx.Client if this instance created it."""
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> AdmissionsClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
