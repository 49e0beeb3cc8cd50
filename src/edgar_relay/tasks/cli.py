# src/edgar_relay/tasks/cli.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Edgar Relay CLI: run the relay on one of its transports.

Commands:
    serve   HTTP push-stream transport (uvicorn).
    stdio   Line transport on stdin/stdout; logs go to stderr.

Environment:
    SEC_API_MAIL       Contact e-mail for the upstream User-Agent (required).
    SEC_API_COMPANY    Organization for the upstream User-Agent (required).
    HOST / PORT        HTTP listen address (serve only).
"""

from __future__ import annotations

import asyncio

import typer

from edgar_relay.adapters.transports.line_transport import serve_stdio
from edgar_relay.config.settings import Settings, get_settings
from edgar_relay.dependencies.core.bootstrap import bootstrap
from edgar_relay.domain.exceptions.errors import FatalConfigError
from edgar_relay.infrastructure.logging.logger import configure_root_logging, get_json_logger

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _load_settings() -> Settings:
    """Resolve settings or exit with status 1."""
    try:
        settings = get_settings()
    except FatalConfigError as exc:
        log.error("cli.config_invalid", extra={"extra": {"error": exc.message, **exc.details}})
        typer.echo(f"Configuration error: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    configure_root_logging(settings.log_level)
    return settings


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Listen address (defaults to HOST)."),
    port: int | None = typer.Option(None, help="Listen port (defaults to PORT)."),
) -> None:
    """Run the HTTP push-stream transport."""
    import uvicorn

    settings = _load_settings()
    uvicorn.run(
        "edgar_relay.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        log_config=None,
    )


async def _run_stdio(settings: Settings) -> int:
    async with bootstrap(settings) as state:
        return await serve_stdio(state.server)


@app.command("stdio")
def stdio() -> None:
    """Run the line transport on stdin/stdout until end of input."""
    settings = _load_settings()
    served = asyncio.run(_run_stdio(settings))
    log.info("cli.stdio_done", extra={"extra": {"served": served}})


if __name__ == "__main__":  # pragma: no cover
    app()
