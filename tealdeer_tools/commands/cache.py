"""Page cache management commands."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from tealdeer_tools.core.cache import PageCache
from tealdeer_tools.core.config import AppConfig
from tealdeer_tools.core.errors import CacheError, TealdeerError
from tealdeer_tools.core.locator import page_tree, resolve_cache_root


@click.command()
@click.option("--url", "-u", help="Archive URL, overrides the configured one")
@click.pass_context
def update(ctx: click.Context, url: str | None) -> None:
    """Download the latest pages and replace the cache."""
    config: AppConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]

    cache = PageCache(config)
    try:
        with console.status("Updating page cache..."):
            cache.update(url)
    except TealdeerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.ClickException(f"Failed to update cache: {e}") from e

    console.print("[green]✓[/green] Successfully updated cache.")


@click.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete the local page cache."""
    config: AppConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]

    try:
        PageCache(config).clear()
    except TealdeerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.ClickException(f"Failed to clear cache: {e}") from e

    console.print("[green]✓[/green] Successfully deleted cache.")


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show cache location and age."""
    config: AppConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]

    try:
        cache_root = resolve_cache_root(config.cache)
    except CacheError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.ClickException(str(e)) from e

    cache = PageCache(config)
    age = cache.last_update_age()
    info = {
        "cache_root": str(cache_root),
        "page_tree_exists": page_tree(cache_root).is_dir(),
        "age_seconds": int(age.total_seconds()) if age is not None else None,
        "stale": cache.is_stale(),
    }

    if config.output_format == "json":
        print(json.dumps(info, indent=2))
        return

    table = Table(title="Page Cache")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Cache Root", info["cache_root"])
    table.add_row("Page Tree", "✓" if info["page_tree_exists"] else "✗")
    if age is None:
        table.add_row("Last Update", "never")
    else:
        table.add_row("Last Update", f"{age.days} days, {age.seconds // 3600} hours ago")
    table.add_row("Stale", "yes" if info["stale"] else "no")

    console.print(table)
