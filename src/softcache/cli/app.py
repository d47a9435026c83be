# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

import asyncio
import json
from typing import Annotated, Any

import typer

from softcache.cli.commands import lists as lists_cmd
from softcache.cli.commands import queue as queue_cmd

app = typer.Typer(
    name="softcache",
    help="Cache facade with soft expiration and indexed lists",
    no_args_is_help=True,
)

app.add_typer(queue_cmd.app, name="queue", help="Inspect and manage soft expiration")
app.add_typer(lists_cmd.app, name="list", help="Push to and trim indexed lists")


def parse_value(raw: str) -> Any:
    """Interpret a command-line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Override SOFTCACHE_LOG_LEVEL")
    ] = None,
    log_format: Annotated[
        str | None, typer.Option("--log-format", help="json or text")
    ] = None,
) -> None:
    from softcache.core.config import get_settings
    from softcache.core.logging import setup_logging

    settings = get_settings()
    setup_logging(log_level or settings.log_level, log_format or settings.log_format)


@app.command()
def get(key: Annotated[str, typer.Argument(help="Cache key (without prefix)")]) -> None:
    """Print the value stored under KEY."""
    value = asyncio.run(_async_get(key))
    if value is None:
        typer.echo(f"{key}: miss", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(value))


async def _async_get(key: str) -> Any:
    from softcache.client.facade import get_client

    client = get_client()
    try:
        return await client.get(key)
    finally:
        await client.close()


@app.command("set")
def set_(
    key: Annotated[str, typer.Argument(help="Cache key (without prefix)")],
    value: Annotated[str, typer.Argument(help="Value, parsed as JSON when possible")],
    ttl: Annotated[
        int | None, typer.Option("--ttl", "-t", help="Seconds to live, 0 for no expiry")
    ] = None,
    compress: Annotated[
        bool, typer.Option("--compress", help="Compress the stored value")
    ] = False,
) -> None:
    """Store VALUE under KEY."""
    if not asyncio.run(_async_set(key, parse_value(value), ttl, compress)):
        typer.echo(f"Failed to store {key}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Stored {key}")


async def _async_set(key: str, value: Any, ttl: int | None, compress: bool) -> bool:
    from softcache.client.facade import get_client

    client = get_client()
    try:
        return await client.set(key, value, ttl, compress=compress)
    finally:
        await client.close()


@app.command()
def delete(key: Annotated[str, typer.Argument(help="Cache key (without prefix)")]) -> None:
    """Delete KEY."""
    if asyncio.run(_async_delete(key)):
        typer.echo(f"Deleted {key}")
    else:
        typer.echo(f"{key} not found")


async def _async_delete(key: str) -> bool:
    from softcache.client.facade import get_client

    client = get_client()
    try:
        return await client.delete(key)
    finally:
        await client.close()


@app.command()
def flush(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Invalidate every entry on the cache server."""
    if not yes:
        typer.confirm("Flush every entry on the server?", abort=True)
    asyncio.run(_async_flush())
    typer.echo("Cache flushed.")


async def _async_flush() -> None:
    from softcache.client.facade import get_client

    client = get_client()
    try:
        await client.flush()
    finally:
        await client.close()


@app.command()
def version() -> None:
    """Show version information."""
    from softcache import __version__

    typer.echo(f"softcache v{__version__}")
