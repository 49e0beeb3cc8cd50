# src/edgar_relay/infrastructure/http/errors.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""HTTP error envelopes.

Purpose:
    Render transport-level failures (bad session id, malformed body, missing
    shared secret, unhandled faults) in the same envelope shape dispatched
    calls use, so HTTP clients branch on one structure.

Layer:
    infrastructure/http
"""

from __future__ import annotations

from typing import Any, Final

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.responses import Response

from edgar_relay.domain.exceptions.errors import RelayError
from edgar_relay.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

HTTP_STATUS_BY_KIND: Final[dict[str, int]] = {
    "BAD_INPUT": 400,
    "UNAUTHORIZED": 401,
    "NOT_FOUND": 404,
    "DATA_INTEGRITY": 502,
    "UPSTREAM_UNAVAILABLE": 503,
    "FATAL": 500,
    "INTERNAL_ERROR": 500,
}


def error_envelope(
    *,
    kind: str,
    message: str,
    retryable: bool = False,
    details: dict[str, Any] | None = None,
    request_id: str | int | None = None,
) -> dict[str, Any]:
    """Return ``{id, result: null, error: {type, message, retryable, details}}``."""
    return {
        "id": request_id,
        "result": None,
        "error": {
            "type": kind,
            "message": message,
            "retryable": retryable,
            "details": details,
        },
    }


def relay_error_response(exc: RelayError) -> JSONResponse:
    """Render a relay error with the HTTP status matching its kind."""
    return JSONResponse(
        status_code=HTTP_STATUS_BY_KIND.get(exc.kind, 500),
        content=error_envelope(
            kind=exc.kind,
            message=exc.message,
            retryable=exc.retryable,
            details=exc.details or None,
        ),
    )


async def handle_relay_error(request: Request, exc: RelayError) -> Response:
    return relay_error_response(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    payload = error_envelope(
        kind="BAD_INPUT",
        message="Request validation failed.",
        details={"errors": errors},
    )
    return JSONResponse(status_code=400, content=payload)


async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
    payload = error_envelope(
        kind="HTTP_ERROR",
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
    )
    return JSONResponse(status_code=exc.status_code, content=payload)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception(
        "http.unhandled_exception",
        extra={"extra": {"path": request.url.path}},
        exc_info=exc,
    )
    payload = error_envelope(kind="INTERNAL_ERROR", message="Internal server error")
    return JSONResponse(status_code=500, content=payload)
