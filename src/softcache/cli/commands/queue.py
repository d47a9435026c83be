# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Soft expiration CLI commands."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Annotated

import typer

app = typer.Typer()


@app.command("list")
def list_() -> None:
    """Show every scheduled stale deadline."""
    asyncio.run(_async_list())


async def _async_list() -> None:
    from rich.console import Console
    from rich.table import Table

    from softcache.client.facade import get_client

    client = get_client()
    try:
        deadlines = await client.list_scheduled_expirations()
    finally:
        await client.close()

    console = Console()
    if not deadlines:
        console.print("No keys scheduled for expiration.")
        return

    table = Table(title="Scheduled Expirations")
    table.add_column("Key", style="cyan")
    table.add_column("Stale At (UTC)")
    table.add_column("Epoch", justify="right")

    for key, deadline in sorted(deadlines.items(), key=lambda kv: kv[1]):
        stale_at = datetime.fromtimestamp(deadline, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")
        table.add_row(key, stale_at, str(deadline))

    console.print(table)


@app.command()
def schedule(
    key: Annotated[str, typer.Argument(help="Cache key (without prefix)")],
    seconds: Annotated[int, typer.Argument(help="Seconds until the key goes stale")] = 0,
) -> None:
    """Mark KEY stale after SECONDS.  An earlier deadline is kept."""
    written, connected = asyncio.run(_async_schedule(key, seconds))
    if written:
        typer.echo(f"{key} goes stale in {seconds}s")
    elif not connected:
        typer.echo(f"Failed to schedule {key}: cache server unreachable", err=True)
        raise typer.Exit(code=1)
    else:
        typer.echo(f"{key} already has an earlier deadline")


async def _async_schedule(key: str, seconds: int) -> tuple[bool, bool]:
    from softcache.client.facade import get_client
    from softcache.core.constants import ConnectionState

    client = get_client()
    try:
        written = await client.schedule_expiry(key, seconds)
        return written, client.state is not ConnectionState.FAILED
    finally:
        await client.close()


@app.command()
def purge() -> None:
    """Forget all scheduled deadlines (entries are kept)."""
    asyncio.run(_async_purge())
    typer.echo("Expiration schedule purged.")


async def _async_purge() -> None:
    from softcache.client.facade import get_client

    client = get_client()
    try:
        await client.purge_expiration_schedule()
    finally:
        await client.close()
