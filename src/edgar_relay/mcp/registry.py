# src/edgar_relay/mcp/registry.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Tool/Resource Registry.

Purpose:
    Hold the write-once mapping from tool name (and resource URI template) to
    descriptor plus handler, validate call arguments against each
    descriptor's parameter model, and turn every handler fault into a typed
    :class:`RelayError`.

Layer:
    mcp

Notes:
    - The registry is built once from a sequence of bindings and exposes no
      mutation API; the underlying tables are read-only mappings.
    - Resource URI templates support ``{var}`` (exactly one path segment) and
      a trailing ``{/var*}`` (optional remainder). Query-string pairs become
      extra arguments, validated in lax mode.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final
from urllib.parse import parse_qsl, unquote

from pydantic import BaseModel, ValidationError

from edgar_relay.domain.exceptions.errors import (
    BadInputError,
    InternalError,
    NotFoundError,
    RelayError,
)
from edgar_relay.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)

Handler = Callable[[Any], Awaitable[Any]]

_VAR_RE: Final[re.Pattern[str]] = re.compile(r"\{(/?)([A-Za-z_][A-Za-z0-9_]*)(\*?)\}")


def _validation_details(exc: ValidationError) -> dict[str, Any]:
    return {
        "errors": [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
    }


@dataclass(frozen=True)
class ToolDescriptor:
    """Describes one callable tool."""

    name: str
    description: str
    params_model: type[BaseModel]

    def describe(self) -> dict[str, Any]:
        """Return ``{name, description, inputSchema}`` for catalog listings."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.params_model.model_json_schema(by_alias=True),
        }


class UriTemplate:
    """Compiled resource URI template.

    Example:
        >>> UriTemplate("sec://submissions/{cik}{/path*}").match("sec://submissions/320193/recent")
        {'cik': '320193', 'path': 'recent'}
    """

    def __init__(self, template: str) -> None:
        self.template = template
        pattern: list[str] = []
        self.variables: list[str] = []
        position = 0
        for var in _VAR_RE.finditer(template):
            pattern.append(re.escape(template[position : var.start()]))
            slash, name, star = var.groups()
            if slash and star:
                if var.end() != len(template):
                    raise ValueError(f"Optional remainder must end the template: {template!r}")
                pattern.append(rf"(?:/(?P<{name}>[^?#]*))?")
            elif not slash and not star:
                pattern.append(rf"(?P<{name}>[^/?#]+)")
            else:
                raise ValueError(f"Unsupported template expression in {template!r}")
            self.variables.append(name)
            position = var.end()
        pattern.append(re.escape(template[position:]))
        self._regex = re.compile("^" + "".join(pattern) + "$")

    def match(self, uri: str) -> dict[str, str] | None:
        """Return the decoded variables if ``uri`` (without query) matches."""
        found = self._regex.match(uri)
        if found is None:
            return None
        return {
            name: unquote(value)
            for name, value in found.groupdict().items()
            if value is not None and value != ""
        }


@dataclass(frozen=True)
class ResourceDescriptor:
    """Describes one readable resource family."""

    name: str
    uri_template: str
    description: str
    params_model: type[BaseModel]
    mime_type: str = "application/json"
    template: UriTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "template", UriTemplate(self.uri_template))

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "uriTemplate": self.uri_template,
            "description": self.description,
            "mimeType": self.mime_type,
        }


@dataclass(frozen=True)
class ToolBinding:
    descriptor: ToolDescriptor
    handler: Handler


@dataclass(frozen=True)
class ResourceBinding:
    descriptor: ResourceDescriptor
    handler: Handler


class Registry:
    """Immutable registry of tools and resources."""

    def __init__(
        self,
        tools: Sequence[ToolBinding],
        resources: Sequence[ResourceBinding] = (),
    ) -> None:
        """Build the registry.

        Args:
            tools: Tool bindings, unique by name.
            resources: Resource bindings, unique by URI template.

        Raises:
            ValueError: On a duplicate tool name or resource template.
        """
        tool_table: dict[str, ToolBinding] = {}
        for binding in tools:
            name = binding.descriptor.name
            if name in tool_table:
                raise ValueError(f"Duplicate tool name: {name}")
            tool_table[name] = binding

        resource_table: dict[str, ResourceBinding] = {}
        for binding in resources:
            template = binding.descriptor.uri_template
            if template in resource_table:
                raise ValueError(f"Duplicate resource template: {template}")
            resource_table[template] = binding

        self._tools: Mapping[str, ToolBinding] = MappingProxyType(tool_table)
        self._resources: Mapping[str, ResourceBinding] = MappingProxyType(resource_table)

    @property
    def tool_names(self) -> tuple[str, ...]:
        return tuple(self._tools)

    def describe(self) -> list[dict[str, Any]]:
        """Return every tool descriptor for introspection."""
        return [binding.descriptor.describe() for binding in self._tools.values()]

    def list_resources(self) -> list[dict[str, Any]]:
        """Return every resource descriptor."""
        return [binding.descriptor.describe() for binding in self._resources.values()]

    async def invoke(self, name: str, args: Mapping[str, Any] | None) -> Any:
        """Validate ``args`` and run the named tool.

        Raises:
            NotFoundError: If ``name`` is not registered.
            BadInputError: If ``args`` do not satisfy the tool's parameters.
            RelayError: Any typed fault raised by the handler, unchanged.
            InternalError: For any other handler fault.
        """
        binding = self._tools.get(name)
        if binding is None:
            raise NotFoundError(
                f"Unknown tool: {name}",
                details={"name": name, "available": list(self._tools)},
            )
        params = self._validate(binding.descriptor.params_model, args or {}, strict=True, target=name)
        return await self._run(binding.handler, params, target=name)

    async def read(self, uri: str) -> Any:
        """Resolve ``uri`` against the resource templates and run the handler.

        Raises:
            NotFoundError: If no template matches ``uri``.
            BadInputError: If path or query arguments are invalid.
        """
        base, _, query = uri.partition("?")
        for binding in self._resources.values():
            variables = binding.descriptor.template.match(base)
            if variables is None:
                continue
            args: dict[str, Any] = dict(parse_qsl(query, keep_blank_values=False))
            args.update(variables)
            params = self._validate(binding.descriptor.params_model, args, strict=False, target=uri)
            return await self._run(binding.handler, params, target=uri)
        raise NotFoundError(f"Unknown resource: {uri}", details={"uri": uri})

    @staticmethod
    def _validate(
        model: type[BaseModel],
        args: Mapping[str, Any],
        *,
        strict: bool,
        target: str,
    ) -> BaseModel:
        try:
            return model.model_validate(dict(args), strict=strict)
        except ValidationError as exc:
            raise BadInputError(
                f"Invalid arguments for {target}.",
                details=_validation_details(exc),
            ) from exc

    @staticmethod
    async def _run(handler: Handler, params: BaseModel, *, target: str) -> Any:
        try:
            return await handler(params)
        except RelayError:
            raise
        except Exception as exc:
            logger.exception("registry.handler_failed", extra={"extra": {"target": target}})
            raise InternalError(
                "Handler failed unexpectedly.",
                details={"target": target, "error_type": type(exc).__name__},
            ) from exc
