"""Tests for client module."""

from __future__ import annotations

import httpx
import pytest

from admissions_analytics.client import AdmissionsClient, FetchError
from admissions_analytics.models import AdmissionsSnapshot


def _client_for(handler: object) -> AdmissionsClient:
    """Build an AdmissionsClient whose transport calls ``handler``."""
    transport = httpx.MockTransport(handler)  # type: ignore[arg-type]
    return AdmissionsClient("http://analytics.test/", http_client=httpx.Client(transport=transport))


class TestFetchSnapshot:
    """Test suite for AdmissionsClient.fetch_snapshot.

    Categories:
    1. Success - Correct URL and parsed payload
    2. Failure - Every failure surfaces as FetchError
    """

    def test_requests_analytics_path(self, small_snapshot: AdmissionsSnapshot) -> None:
        """Verifies the GET targets /api/v1/analytics/admissions.

        Business context:
        The dashboard and API may be deployed separately; the path is the
        only contract between them.
        """
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=small_snapshot.to_dict())

        snapshot = _client_for(handler).fetch_snapshot()

        assert snapshot == small_snapshot
        assert seen[0].method == "GET"
        assert str(seen[0].url) == "http://analytics.test/api/v1/analytics/admissions"

    def test_url_strips_trailing_slash(self) -> None:
        """Verifies base URLs with a trailing slash build a clean URL."""
        client = AdmissionsClient("http://analytics.test/")
        try:
            assert client.url == "http://analytics.test/api/v1/analytics/admissions"
        finally:
            client.close()

    def test_server_error_raises_fetch_error(self) -> None:
        """Verifies a 500 response becomes FetchError."""
        client = _client_for(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(FetchError):
            client.fetch_snapshot()

    def test_connection_error_raises_fetch_error(self) -> None:
        """Verifies transport failures become FetchError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(FetchError, match="failed"):
            _client_for(handler).fetch_snapshot()

    def test_invalid_json_raises_fetch_error(self) -> None:
        """Verifies a non-JSON body becomes FetchError."""
        client = _client_for(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(FetchError, match="Malformed"):
            client.fetch_snapshot()

    def test_malformed_payload_raises_fetch_error(self) -> None:
        """Verifies a JSON body with the wrong shape becomes FetchError."""
        client = _client_for(lambda request: httpx.Response(200, json={"totalApplicants": "x"}))
        with pytest.raises(FetchError, match="Malformed"):
            client.fetch_snapshot()


class TestClientLifecycle:
    """Test suite for client ownership and context management."""

    def test_injected_client_left_open(self) -> None:
        """Verifies close() does not close a caller-owned httpx.Client."""
        http = httpx.Client()
        with AdmissionsClient("http://analytics.test", http_client=http):
            pass
        assert not http.is_closed
        http.close()

    def test_owned_client_closed(self) -> None:
        """Verifies the context manager closes its own httpx.Client."""
        with AdmissionsClient("http://analytics.test") as client:
            inner = client._http
        assert inner.is_closed
