"""CLI commands for keycache.

Operates directly on the configured Redis cache:
- keycache prefix: Show the cache key for an entity and raw key
- keycache peek: Read cached payloads in one batch
- keycache clear: Delete cached entries in one batch

Usage:
    keycache --help
    keycache prefix Entry id3
    keycache peek Entry id1 id3 slug3
    keycache clear Entry id1 id3 id5
"""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from keycache.cache.backend import CacheOp
from keycache.cache.keys import CacheKeys
from keycache.cache.redis import RedisCacheBackend, close_redis, get_redis
from keycache.config import settings
from keycache.observability.logging import configure_logging

app = typer.Typer(
    name="keycache",
    help="keycache: batched cache-aside layer over Redis",
    no_args_is_help=True,
)

console = Console()


@app.callback()
def callback() -> None:
    """keycache: batched cache-aside layer over Redis."""
    configure_logging(json_format=settings.log_json, level=settings.log_level)


@app.command()
def prefix(
    entity: str = typer.Argument(..., help="Entity type name, e.g. Entry"),
    key: str = typer.Argument(..., help="Primary or additional key value"),
) -> None:
    """Print the cache key used for a record slot."""
    typer.echo(CacheKeys.with_prefix(entity, key))


async def _run_batch(ops: list[CacheOp]) -> list[object]:
    client = await get_redis()
    try:
        return await RedisCacheBackend(client).execute(ops)
    finally:
        await close_redis()


@app.command()
def peek(
    entity: str = typer.Argument(..., help="Entity type name"),
    keys: list[str] = typer.Argument(..., help="Raw keys to read"),
    output_format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text, json",
    ),
) -> None:
    """Show what the cache holds for each key."""
    cache_keys = [CacheKeys.with_prefix(entity, key) for key in keys]
    payloads = asyncio.run(_run_batch([CacheOp.get(k) for k in cache_keys]))

    if output_format == "json":
        console.print(json.dumps(dict(zip(cache_keys, payloads)), indent=2))
        return

    table = Table("Cache key", "Payload")
    for cache_key, payload in zip(cache_keys, payloads):
        table.add_row(cache_key, str(payload) if payload else "[yellow]<miss>[/yellow]")
    console.print(table)


@app.command()
def clear(
    entity: str = typer.Argument(..., help="Entity type name"),
    keys: list[str] = typer.Argument(..., help="Raw keys to delete"),
) -> None:
    """Delete cached entries for the given keys."""
    results = asyncio.run(
        _run_batch([CacheOp.delete(CacheKeys.with_prefix(entity, key)) for key in keys])
    )
    deleted = sum(int(r or 0) for r in results)
    console.print(f"[green]Deleted {deleted} of {len(keys)} key(s)[/green]")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
