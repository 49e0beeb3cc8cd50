# tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import httpx
import pytest

from edgar_relay.config.settings import Settings, get_settings
from edgar_relay.infrastructure.external_apis.edgar.client import EdgarClient
from edgar_relay.mcp.capabilities.context import CapabilityContext

BASE_URL = "https://data.sec.gov"

SUBMISSIONS: dict[str, Any] = {
    "cik": "320193",
    "name": "Apple Inc.",
    "filings": {
        "recent": {
            "accessionNumber": [
                "0000320193-23-000106",
                "0000320193-23-000077",
                "0000320193-23-000064",
            ],
            "filingDate": ["2023-11-03", "2023-08-04", "2023-05-05"],
            "form": ["10-K", "10-Q", "8-K"],
            "isXBRL": [1, 1, 0],
        },
        "files": [{"name": "CIK0000320193-submissions-001.json", "filingCount": 2}],
    },
}

SUBMISSIONS_FILE: dict[str, Any] = {
    "accessionNumber": ["0000320193-94-000016", "0000320193-94-000010"],
    "filingDate": ["1994-12-13", "1994-08-10"],
    "form": ["10-K", "10-Q"],
    "isXBRL": [0, 0],
}


def _usd(*facts: tuple[str, float]) -> dict[str, Any]:
    return {"units": {"USD": [{"end": end, "val": val, "form": "10-K"} for end, val in facts]}}


COMPANY_FACTS: dict[str, Any] = {
    "cik": 320193,
    "entityName": "Apple Inc.",
    "facts": {
        "dei": {
            "EntityCommonStockSharesOutstanding": {
                "label": "Entity Common Stock, Shares Outstanding",
                "description": "Shares outstanding.",
                "units": {"shares": [{"end": "2023-10-20", "val": 15552752000}]},
            }
        },
        "us-gaap": {
            "RevenueFromContractWithCustomerExcludingAssessedTax": _usd(
                ("2022-09-24", 900), ("2023-09-30", 1000)
            ),
            "CostOfRevenue": _usd(("2023-09-30", 600)),
            "NetIncomeLoss": _usd(("2022-09-24", 80), ("2023-09-30", 100)),
            "Assets": _usd(("2023-09-30", 2000)),
            "AssetsCurrent": _usd(("2023-09-30", 300)),
            "Liabilities": _usd(("2023-09-30", 1500)),
            "LiabilitiesCurrent": _usd(("2023-09-30", 150)),
            "StockholdersEquity": _usd(("2023-09-30", 500)),
            "EarningsPerShareBasic": {
                "units": {"USD/shares": [{"end": "2023-09-30", "val": 6.16}]},
            },
        },
    },
}

COMPANY_CONCEPT: dict[str, Any] = {
    "cik": 320193,
    "taxonomy": "us-gaap",
    "tag": "AccountsPayableCurrent",
    "label": "Accounts Payable, Current",
    "description": "Carrying value as of the balance sheet date.",
    "entityName": "Apple Inc.",
    "units": {
        "USD": [
            {"end": "2021-09-25", "val": 54763000000, "accn": "a1", "form": "10-K", "fy": 2021},
            {"end": "2022-09-24", "val": 64115000000, "accn": "a2", "form": "10-K", "fy": 2022},
            {"end": "2023-09-30", "val": 62611000000, "accn": "a3", "form": "10-K", "fy": 2023},
        ]
    },
}

FRAME: dict[str, Any] = {
    "taxonomy": "us-gaap",
    "tag": "Revenues",
    "uom": "USD",
    "ccp": "CY2023Q1",
    "label": "Revenues",
    "data": [
        {"accn": "x1", "cik": 1750, "entityName": "AAR CORP", "end": "2023-03-31", "val": 5},
        {"accn": "x2", "cik": 320193, "entityName": "Apple Inc.", "end": "2023-03-31", "val": 30},
        {"accn": "x3", "cik": 789019, "entityName": "Microsoft", "end": "2023-03-31", "val": 10},
        {"accn": "x4", "cik": 1018724, "entityName": "Amazon", "end": "2023-03-31", "val": None},
    ],
}

DEFAULT_ROUTES: dict[str, Any] = {
    "/submissions/CIK0000320193.json": SUBMISSIONS,
    "/submissions/CIK0000320193-submissions-001.json": SUBMISSIONS_FILE,
    "/api/xbrl/companyfacts/CIK0000320193.json": COMPANY_FACTS,
    "/api/xbrl/companyconcept/CIK0000320193/us-gaap/AccountsPayableCurrent.json": COMPANY_CONCEPT,
    "/api/xbrl/frames/us-gaap/Revenues/USD/CY2023Q1.json": FRAME,
}


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def relay_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Minimal valid environment; the settings cache is reset around the test."""
    monkeypatch.setenv("SEC_API_MAIL", "ops@example.com")
    monkeypatch.setenv("SEC_API_COMPANY", "Example Research")
    for name in ("MCP_API_KEY", "ALLOWED_ORIGINS", "INTERACTION_LOG_DIR", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        sec_api_mail="ops@example.com",
        sec_api_company="Example Research",
    )


@pytest.fixture
def routes() -> dict[str, Any]:
    """Upstream path → JSON body (or ``httpx.Response``); tests may add or replace entries."""
    return dict(DEFAULT_ROUTES)


@pytest.fixture
def upstream_calls() -> list[httpx.Request]:
    return []


@pytest.fixture
def mock_transport(
    routes: dict[str, Any],
    upstream_calls: list[httpx.Request],
) -> httpx.MockTransport:
    def _handler(request: httpx.Request) -> httpx.Response:
        upstream_calls.append(request)
        body = routes.get(request.url.path)
        if body is None:
            return httpx.Response(404, json={"message": "not found"})
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, json=body)

    return httpx.MockTransport(_handler)


@pytest.fixture
async def edgar_client(mock_transport: httpx.MockTransport) -> AsyncIterator[EdgarClient]:
    async with httpx.AsyncClient(transport=mock_transport) as http:
        yield EdgarClient(user_agent="Example Research ops@example.com", base_url=BASE_URL, http=http)


@pytest.fixture
def make_context(edgar_client: EdgarClient) -> Callable[..., CapabilityContext]:
    def _make(**overrides: Any) -> CapabilityContext:
        return CapabilityContext(client=edgar_client, **overrides)

    return _make
