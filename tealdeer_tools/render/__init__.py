"""Terminal rendering of tldr pages."""

from tealdeer_tools.render.formatter import PageSnippet, SnippetKind, highlight_lines
from tealdeer_tools.render.output import print_page

__all__ = ["PageSnippet", "SnippetKind", "highlight_lines", "print_page"]
