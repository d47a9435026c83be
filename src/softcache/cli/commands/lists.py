# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Indexed list CLI commands."""

from __future__ import annotations

import asyncio
import json
from typing import Annotated, Any

import typer

app = typer.Typer()


@app.command()
def push(
    name: Annotated[str, typer.Argument(help="List name")],
    value: Annotated[str, typer.Argument(help="Value, parsed as JSON when possible")],
    ttl: Annotated[
        int | None, typer.Option("--ttl", "-t", help="Seconds each slot lives")
    ] = None,
) -> None:
    """Append VALUE to list NAME."""
    from softcache.cli.app import parse_value

    if not asyncio.run(_async_push(name, parse_value(value), ttl)):
        typer.echo(f"Failed to push to {name}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Pushed to {name}")


async def _async_push(name: str, value: Any, ttl: int | None) -> bool:
    from softcache.client.facade import get_client

    client = get_client()
    try:
        return await client.push(name, value, ttl)
    finally:
        await client.close()


@app.command()
def trim(name: Annotated[str, typer.Argument(help="List name")]) -> None:
    """Read every value of list NAME in slot order."""
    asyncio.run(_async_trim(name))


async def _async_trim(name: str) -> None:
    from rich.console import Console
    from rich.table import Table

    from softcache.client.facade import get_client

    client = get_client()
    try:
        values = await client.trim(name)
    finally:
        await client.close()

    console = Console()
    if not values:
        console.print(f"List {name} is empty.")
        return

    table = Table(title=f"List {name}")
    table.add_column("Slot", justify="right", style="bold")
    table.add_column("Value")
    for slot, value in values.items():
        table.add_row(str(slot), json.dumps(value))

    console.print(table)
