# src/edgar_relay/mcp/server.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Edgar Relay MCP Server.

Purpose:
    Dispatch request envelopes to the registry and render every outcome as a
    response envelope. This class is transport-agnostic; the push-stream
    router and the line transport are thin adapters around :meth:`MCPServer.call`.

Exposed methods:
    - tools/list
    - tools/call        params: {name, arguments?}
    - resources/list
    - resources/read    params: {uri}

Contract:
    - Input: MCPRequest { id?, method, params? }
    - Output: MCPResponse { id, result, error }; never raises for a
      call-level fault; every RelayError becomes ``error``.
    - Events for one call are published in emission order through the
      ``publish`` function the transport supplies.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

from edgar_relay.domain.exceptions.errors import BadInputError, NotFoundError, RelayError
from edgar_relay.domain.services.size_guard import ADVISORY_STATUS
from edgar_relay.infrastructure.logging.interaction_log import InteractionLog
from edgar_relay.infrastructure.logging.logger import get_json_logger, set_request_context
from edgar_relay.infrastructure.observability.metrics_mcp import (
    get_mcp_advisories_total,
    get_mcp_call_latency_seconds,
    get_mcp_calls_total,
)
from edgar_relay.mcp.events import EventType, Publish, SessionEvent, discard_publisher
from edgar_relay.mcp.registry import Registry
from edgar_relay.mcp.schemas.envelope import MCPRequest, MCPResponse

logger = get_json_logger(__name__)

TOOLS_LIST = "tools/list"
TOOLS_CALL = "tools/call"
RESOURCES_LIST = "resources/list"
RESOURCES_READ = "resources/read"
METHODS = (TOOLS_LIST, TOOLS_CALL, RESOURCES_LIST, RESOURCES_READ)


def _require_str(params: Mapping[str, Any], key: str, method: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise BadInputError(
            f"{method} requires a non-empty string '{key}'.",
            details={"param": key},
        )
    return value


def _is_advisory(result: Any) -> bool:
    return isinstance(result, dict) and result.get("status") == ADVISORY_STATUS


class MCPServer:
    """Core dispatcher shared by every transport."""

    def __init__(self, registry: Registry, *, interaction_log: InteractionLog | None = None) -> None:
        self._registry = registry
        self._interaction_log = interaction_log
        self._calls = get_mcp_calls_total()
        self._latency = get_mcp_call_latency_seconds()
        self._advisories = get_mcp_advisories_total()

    @property
    def registry(self) -> Registry:
        return self._registry

    async def call(self, request: MCPRequest, *, publish: Publish = discard_publisher) -> MCPResponse:
        """Dispatch a single envelope.

        Args:
            request: Parsed request envelope.
            publish: Receives the events this call emits.

        Returns:
            MCPResponse carrying either ``result`` or ``error``.
        """
        if request.id is not None:
            set_request_context(request_id=str(request.id))
        params = request.params or {}
        start = time.perf_counter()
        target = request.method
        try:
            if request.method == TOOLS_LIST:
                result: Any = {"tools": self._registry.describe()}
            elif request.method == RESOURCES_LIST:
                result = {"resources": self._registry.list_resources()}
            elif request.method == TOOLS_CALL:
                target = _require_str(params, "name", TOOLS_CALL)
                result = await self._call_tool(target, params.get("arguments"), publish)
            elif request.method == RESOURCES_READ:
                target = _require_str(params, "uri", RESOURCES_READ)
                result = await self._read_resource(target, publish)
            else:
                raise NotFoundError(
                    f"Unknown method: {request.method}",
                    details={"method": request.method, "available": list(METHODS)},
                )
        except RelayError as exc:
            self._calls.labels(request.method, exc.kind).inc()
            publish(
                SessionEvent(
                    EventType.ERROR,
                    {
                        "method": request.method,
                        "name": target,
                        "kind": exc.kind,
                        "message": exc.message,
                    },
                )
            )
            logger.warning(
                "mcp.call_failed",
                extra={"extra": {"method": request.method, "name": target, "kind": exc.kind}},
            )
            return MCPResponse.failure(request.id, exc)
        finally:
            self._latency.labels(request.method).observe(time.perf_counter() - start)

        self._calls.labels(request.method, "ok").inc()
        return MCPResponse(id=request.id, result=result)

    async def _call_tool(self, name: str, arguments: Any, publish: Publish) -> Any:
        if arguments is not None and not isinstance(arguments, Mapping):
            raise BadInputError("tools/call 'arguments' must be an object.", details={"name": name})
        publish(SessionEvent(EventType.TOOL_CALL, {"name": name, "status": "started"}))
        ok = False
        try:
            result = await self._registry.invoke(name, arguments)
            ok = True
        finally:
            self._record(TOOLS_CALL, name, arguments, ok)
        advisory = _is_advisory(result)
        if advisory:
            self._advisories.labels(name).inc()
        publish(
            SessionEvent(
                EventType.TOOL_CALL,
                {"name": name, "status": "completed", "advisory": advisory},
            )
        )
        return result

    async def _read_resource(self, uri: str, publish: Publish) -> Any:
        ok = False
        try:
            data = await self._registry.read(uri)
            ok = True
        finally:
            self._record(RESOURCES_READ, uri, None, ok)
        advisory = _is_advisory(data)
        if advisory:
            self._advisories.labels("resource").inc()
        publish(SessionEvent(EventType.RESOURCE_UPDATE, {"uri": uri, "advisory": advisory}))
        return {"uri": uri, "mimeType": "application/json", "data": data}

    def _record(self, kind: str, name: str, arguments: Any, ok: bool) -> None:
        if self._interaction_log is None:
            return
        self._interaction_log.record(
            kind=kind,
            name=name,
            arguments=arguments if isinstance(arguments, Mapping) else None,
            ok=ok,
        )
