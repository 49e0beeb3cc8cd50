# src/edgar_relay/infrastructure/external_apis/edgar/client.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""EDGAR Transport Client: single-attempt, instrumented, async.

This transport is framework-agnostic and provides:

* Async HTTP (httpx) with a per-request timeout and the identifying
  ``User-Agent`` the SEC fair-access policy requires.
* Exactly one attempt per call: no retries, no backoff.
* Deterministic mapping of failures to relay domain errors.
* Prometheus metrics and structured ``edgar.fetch`` log lines.

Endpoints:
    * fetch_submissions: submissions/CIK##########.json
    * fetch_submissions_file: submissions/CIK##########-submissions-###.json
    * fetch_company_facts: api/xbrl/companyfacts/CIK##########.json
    * fetch_company_concept: api/xbrl/companyconcept/CIK##########/<tax>/<tag>.json
    * fetch_frame: api/xbrl/frames/<tax>/<tag>/<unit>/<period>.json

Notes:
    Caller-facing exceptions are always relay domain exceptions; httpx types
    never cross the boundary.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any, Final

import httpx

from edgar_relay.domain.exceptions.errors import (
    DataIntegrityError,
    NotFoundError,
    RelayError,
    UpstreamUnavailableError,
)
from edgar_relay.domain.value_objects.cik import Cik
from edgar_relay.infrastructure.external_apis.edgar import paths
from edgar_relay.infrastructure.logging.logger import get_json_logger
from edgar_relay.infrastructure.observability.metrics_edgar import (
    get_edgar_errors_total,
    get_edgar_http_status_total,
    get_edgar_latency_seconds,
    get_edgar_response_bytes,
)

logger = get_json_logger(__name__)

_DEFAULT_TIMEOUT: Final[float] = 30.0
_DEFAULT_BASE_URL: Final[str] = "https://data.sec.gov"


class EdgarClient:
    """Single-attempt, instrumented transport client for SEC EDGAR."""

    def __init__(
        self,
        *,
        user_agent: str,
        base_url: str = _DEFAULT_BASE_URL,
        timeout_s: float = _DEFAULT_TIMEOUT,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport client.

        Args:
            user_agent:
                Identifying ``User-Agent`` (organization and contact e-mail).
            base_url:
                EDGAR data API base URL.
            timeout_s:
                Per-request timeout in seconds.
            http:
                Optional shared ``httpx.AsyncClient``. If omitted, a client is
                created and owned by this instance.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout_s)
        self._headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "User-Agent": user_agent,
        }
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=self._timeout)

        # Metrics handles.
        self._latency = get_edgar_latency_seconds()
        self._errors = get_edgar_errors_total()
        self._status_total = get_edgar_http_status_total()
        self._resp_bytes = get_edgar_response_bytes()

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #

    async def fetch_submissions(self, cik: Cik) -> Mapping[str, Any]:
        """Fetch the submissions document (metadata plus recent filings)."""
        return await self.get_json(paths.submissions_path(cik), endpoint="submissions")

    async def fetch_submissions_file(self, name: str) -> Mapping[str, Any]:
        """Fetch one paged filing-history file listed in ``filings.files``."""
        return await self.get_json(paths.submissions_file_path(name), endpoint="submissions_file")

    async def fetch_company_facts(self, cik: Cik) -> Mapping[str, Any]:
        """Fetch every XBRL fact reported by a company."""
        return await self.get_json(paths.company_facts_path(cik), endpoint="company_facts")

    async def fetch_company_concept(self, cik: Cik, taxonomy: str, tag: str) -> Mapping[str, Any]:
        """Fetch one concept's facts for a company."""
        return await self.get_json(
            paths.company_concept_path(cik, taxonomy, tag),
            endpoint="company_concept",
        )

    async def fetch_frame(self, taxonomy: str, tag: str, unit: str, period: str) -> Mapping[str, Any]:
        """Fetch one fact per reporting entity for a calendrical period."""
        return await self.get_json(
            paths.frame_path(taxonomy, tag, unit, period),
            endpoint="frames",
        )

    async def get_json(self, path: str, *, endpoint: str) -> Mapping[str, Any]:
        """Perform one GET and return the parsed JSON object.

        Args:
            path:
                Path relative to the EDGAR base URL.
            endpoint:
                Logical endpoint name for metrics and logs.

        Raises:
            NotFoundError:
                On 404 responses.
            UpstreamUnavailableError:
                On transport failures, timeouts, other non-2xx statuses and
                bodies that are not JSON.
            DataIntegrityError:
                When the JSON body is not an object.
        """
        url = f"{self._base_url}{path}"
        start = time.perf_counter()
        error_reason: str | None = None
        status: int | None = None

        try:
            try:
                response = await self._client.get(url, headers=self._headers, timeout=self._timeout)
            except httpx.TimeoutException as exc:
                raise UpstreamUnavailableError(
                    "EDGAR request timed out.",
                    details={"endpoint": endpoint, "path": path, "timeout_s": self._timeout},
                ) from exc
            except httpx.RequestError as exc:
                raise UpstreamUnavailableError(
                    "EDGAR transport failure.",
                    details={"endpoint": endpoint, "path": path, "error": str(exc)},
                ) from exc
            status = response.status_code
            return self._handle_json_response(response=response, endpoint=endpoint, path=path)
        except RelayError as exc:
            error_reason = type(exc).__name__
            raise
        finally:
            elapsed = time.perf_counter() - start
            outcome = "error" if error_reason else "success"
            self._latency.labels(endpoint=endpoint, outcome=outcome).observe(elapsed)
            if error_reason:
                self._errors.labels(endpoint=endpoint, reason=error_reason).inc()
            logger.info(
                "edgar.fetch",
                extra={
                    "extra": {
                        "endpoint": endpoint,
                        "path": path,
                        "status": status,
                        "outcome": outcome,
                        "elapsed_ms": round(elapsed * 1000, 1),
                    }
                },
            )

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #

    def _handle_json_response(
        self,
        *,
        response: httpx.Response,
        endpoint: str,
        path: str,
    ) -> Mapping[str, Any]:
        """Map an HTTP response into a JSON object or domain error."""
        self._status_total.labels(endpoint=endpoint, status=str(response.status_code)).inc()

        if response.status_code == 404:
            raise NotFoundError(
                "EDGAR resource not found.",
                details={"endpoint": endpoint, "path": path, "status": 404},
            )

        if not response.is_success:
            raise UpstreamUnavailableError(
                f"EDGAR responded with HTTP {response.status_code}.",
                details={"endpoint": endpoint, "path": path, "status": response.status_code},
            )

        self._resp_bytes.labels(endpoint=endpoint).observe(float(len(response.content)))

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise UpstreamUnavailableError(
                "EDGAR response was not valid JSON.",
                details={"endpoint": endpoint, "path": path, "error": str(exc)},
            ) from exc

        if not isinstance(payload, Mapping):
            raise DataIntegrityError(
                "EDGAR JSON response must be an object.",
                details={"endpoint": endpoint, "path": path, "type": type(payload).__name__},
            )

        return payload
