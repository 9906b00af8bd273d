"""Printing of resolved pages to the terminal."""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from rich.console import Console
from rich.text import Text

from tealdeer_tools.core.config import AppConfig, StyleConfig
from tealdeer_tools.core.errors import TealdeerError
from tealdeer_tools.core.types import PageLookupResult
from tealdeer_tools.render.formatter import PageSnippet, SnippetKind, highlight_lines

logger = structlog.get_logger()


def append_snippet(text: Text, snippet: PageSnippet, style: StyleConfig) -> None:
    """Append one snippet to text with its configured style."""
    kind = snippet.kind
    if kind is SnippetKind.LINEBREAK:
        text.append("\n")
    elif kind is SnippetKind.DESCRIPTION:
        text.append("  ")
        text.append(snippet.text, style=style.description)
        text.append("\n")
    elif kind is SnippetKind.TEXT:
        text.append("  ")
        text.append(snippet.text, style=style.example_text)
        text.append("\n")
    elif kind is SnippetKind.COMMAND_NAME:
        text.append(snippet.text, style=style.command_name)
    elif kind is SnippetKind.VARIABLE:
        text.append(snippet.text, style=style.example_variable)
    else:
        text.append(snippet.text, style=style.example_code)


def render_lines(lines: Iterable[str], config: AppConfig) -> Text:
    """Render raw page lines into styled text."""
    text = Text()
    for snippet in highlight_lines(lines, keep_empty_lines=not config.display.compact):
        if not snippet.is_empty():
            append_snippet(text, snippet, config.style)
    return text


def print_page(
    lookup: PageLookupResult,
    console: Console,
    config: AppConfig,
    raw: bool = False,
    use_pager: bool = False,
) -> None:
    """Print the pages of a lookup as one document.

    Args:
        lookup: Pages to print, in order
        console: Output console
        config: Application configuration for styles and display options
        raw: Print the markdown source instead of styled text
        use_pager: Page the output, also enabled by ``display.use_pager``

    Raises:
        TealdeerError: If a page cannot be read
    """
    try:
        if raw:
            output: Text | str = "\n".join(lookup.iter_lines()) + "\n"
        else:
            output = render_lines(lookup.iter_lines(), config)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("page_read_failed", paths=[str(p) for p in lookup], error=str(e))
        raise TealdeerError(f"Error while reading from a page: {e}") from e

    if use_pager or config.display.use_pager:
        with console.pager(styles=True):
            _emit(console, output)
    else:
        _emit(console, output)


def _emit(console: Console, output: Text | str) -> None:
    console.print(output, end="", soft_wrap=True, highlight=False, markup=False)
