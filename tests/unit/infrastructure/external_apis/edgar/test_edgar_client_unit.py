from __future__ import annotations

import httpx
import pytest
import respx

from edgar_relay.domain.exceptions.errors import (
    DataIntegrityError,
    NotFoundError,
    UpstreamUnavailableError,
)
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.infrastructure.external_apis.edgar.client import EdgarClient

BASE = "https://data.sec.gov"
UA = "Example Research ops@example.com"


@pytest.mark.anyio
@respx.mock
async def test_fetch_submissions_happy_path_and_headers() -> None:
    async with httpx.AsyncClient() as http:
        client = EdgarClient(user_agent=UA, http=http)

        expected = {"cik": "320193", "name": "Apple Inc.", "filings": {"recent": {}}}
        route = respx.get(f"{BASE}/submissions/CIK0000320193.json").mock(
            return_value=httpx.Response(200, json=expected)
        )

        payload = await client.fetch_submissions(Cik.parse("320193"))

        assert route.called
        request = route.calls.last.request
        assert request.headers["User-Agent"] == UA
        assert request.headers["Accept"] == "application/json"
        assert "gzip" in request.headers["Accept-Encoding"]
        assert payload["name"] == "Apple Inc."


@pytest.mark.anyio
@respx.mock
async def test_fetch_frame_builds_period_path() -> None:
    async with httpx.AsyncClient() as http:
        client = EdgarClient(user_agent=UA, http=http)
        route = respx.get(f"{BASE}/api/xbrl/frames/us-gaap/Revenues/USD/CY2023Q1I.json").mock(
            return_value=httpx.Response(200, json={"data": []})
        )

        await client.fetch_frame("us-gaap", "Revenues", "USD", "CY2023Q1I")

        assert route.call_count == 1


@pytest.mark.anyio
@respx.mock
async def test_status_mapping_and_json_validation() -> None:
    async with httpx.AsyncClient() as http:
        client = EdgarClient(user_agent=UA, http=http)

        # 404 -> NotFoundError
        respx.get(f"{BASE}/submissions/CIK0000000001.json").mock(
            return_value=httpx.Response(404, json={"detail": "not found"})
        )
        with pytest.raises(NotFoundError):
            await client.fetch_submissions(Cik.parse("1"))

        # 500 -> UpstreamUnavailableError (retryable)
        respx.get(f"{BASE}/submissions/CIK0000000002.json").mock(
            return_value=httpx.Response(500, json={"detail": "server error"})
        )
        with pytest.raises(UpstreamUnavailableError) as excinfo:
            await client.fetch_submissions(Cik.parse("2"))
        assert excinfo.value.retryable is True
        assert excinfo.value.details["status"] == 500

        # 403 -> UpstreamUnavailableError
        respx.get(f"{BASE}/submissions/CIK0000000003.json").mock(
            return_value=httpx.Response(403, text="forbidden")
        )
        with pytest.raises(UpstreamUnavailableError):
            await client.fetch_submissions(Cik.parse("3"))

        # Non-JSON -> UpstreamUnavailableError
        respx.get(f"{BASE}/submissions/CIK0000000004.json").mock(
            return_value=httpx.Response(200, content=b"<html>not json</html>")
        )
        with pytest.raises(UpstreamUnavailableError):
            await client.fetch_submissions(Cik.parse("4"))

        # JSON array -> DataIntegrityError
        respx.get(f"{BASE}/submissions/CIK0000000005.json").mock(
            return_value=httpx.Response(200, json=[1, 2, 3])
        )
        with pytest.raises(DataIntegrityError):
            await client.fetch_submissions(Cik.parse("5"))


@pytest.mark.anyio
@respx.mock
async def test_transport_failures_map_to_upstream_unavailable() -> None:
    async with httpx.AsyncClient() as http:
        client = EdgarClient(user_agent=UA, http=http, timeout_s=0.5)

        respx.get(f"{BASE}/api/xbrl/companyfacts/CIK0000000001.json").mock(
            side_effect=httpx.ReadTimeout("timed out")
        )
        with pytest.raises(UpstreamUnavailableError) as excinfo:
            await client.fetch_company_facts(Cik.parse("1"))
        assert excinfo.value.details["timeout_s"] == 0.5

        respx.get(f"{BASE}/api/xbrl/companyfacts/CIK0000000002.json").mock(
            side_effect=httpx.ConnectError("refused")
        )
        with pytest.raises(UpstreamUnavailableError):
            await client.fetch_company_facts(Cik.parse("2"))


@pytest.mark.anyio
async def test_aclose_leaves_injected_client_open() -> None:
    async with httpx.AsyncClient() as http:
        client = EdgarClient(user_agent=UA, http=http)
        await client.aclose()
        assert http.is_closed is False

    owned = EdgarClient(user_agent=UA, base_url="https://example.test/")
    assert owned.base_url == "https://example.test"
    await owned.aclose()
