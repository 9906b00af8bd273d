"""Page display and listing commands."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import click
import structlog
from rich.console import Console

from tealdeer_tools.core.cache import PageCache
from tealdeer_tools.core.config import AppConfig
from tealdeer_tools.core.errors import TealdeerError
from tealdeer_tools.core.types import PageLookupResult, Platform
from tealdeer_tools.render.output import print_page

logger = structlog.get_logger()

PLATFORM_CHOICE = click.Choice([p.value for p in Platform], case_sensitive=False)


def _page_cache(config: AppConfig, platform: str | None) -> PageCache:
    return PageCache(config, Platform(platform.lower()) if platform else None)


def ensure_fresh_cache(cache: PageCache, console: Console) -> None:
    """Warn about a missing or stale cache, or update it when configured to."""
    config = cache.config
    age = cache.last_update_age()
    max_age = timedelta(hours=config.cache.max_age_hours)

    if config.cache.auto_update and (age is None or age > max_age):
        logger.info("auto_update", age=str(age))
        with console.status("Updating page cache..."):
            cache.update()
        return

    if age is None:
        console.print(
            "[yellow]Warning:[/yellow] Page cache not found. "
            "Run `tldr-tools update` to download the pages."
        )
    elif age > max_age:
        console.print(
            f"[yellow]Warning:[/yellow] The page cache hasn't been updated for "
            f"{age.days} days. Run `tldr-tools update` to refresh it."
        )


@click.command()
@click.argument("command", nargs=-1, required=True)
@click.option("--platform", "-p", type=PLATFORM_CHOICE, help="Override the operating system")
@click.option("--raw", "-r", is_flag=True, help="Print the raw markdown instead of rendering it")
@click.option("--pager", is_flag=True, help="Use a pager to page output")
@click.pass_context
def show(
    ctx: click.Context,
    command: tuple[str, ...],
    platform: str | None,
    raw: bool,
    pager: bool,
) -> None:
    """Show the tldr page for COMMAND."""
    config: AppConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]

    cache = _page_cache(config, platform)
    name = "-".join(command).lower()

    try:
        ensure_fresh_cache(cache, console)
        lookup = cache.find_pages(name)
        if lookup is None:
            console.print(
                f"[red]Page `{name}` not found in cache.[/red] "
                "Try updating with `tldr-tools update`, or submit a pull request to: "
                "https://github.com/tldr-pages/tldr"
            )
            ctx.exit(1)
        print_page(lookup, console, config, raw=raw, use_pager=pager)
    except TealdeerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.ClickException(str(e)) from e


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--raw", "-r", is_flag=True, help="Print the raw markdown instead of rendering it")
@click.pass_context
def render(ctx: click.Context, file: Path, raw: bool) -> None:
    """Render a local page FILE."""
    config: AppConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]

    try:
        print_page(PageLookupResult(paths=[file]), console, config, raw=raw)
    except TealdeerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.ClickException(str(e)) from e


@click.command(name="list")
@click.option("--platform", "-p", type=PLATFORM_CHOICE, help="Override the operating system")
@click.pass_context
def list_pages(ctx: click.Context, platform: str | None) -> None:
    """List all pages for the current platform."""
    config: AppConfig = ctx.obj["config"]
    console: Console = ctx.obj["console"]

    try:
        pages = _page_cache(config, platform).list_pages()
    except TealdeerError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise click.ClickException(f"Could not list pages: {e}") from e

    if config.output_format == "json":
        # Use regular print for JSON to avoid Rich formatting
        print(json.dumps(pages))
        return

    for page in pages:
        console.print(page, markup=False, highlight=False)
