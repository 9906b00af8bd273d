"""CLI command implementations for tealdeer_tools.

This module contains all command-line interface implementations:
- show: Show the page for a command
- render: Render a local page file
- list: List pages for a platform
- update: Refresh the page cache
- clear: Delete the page cache
- status: Show cache location and age
"""

from tealdeer_tools.commands.cache import clear, status, update
from tealdeer_tools.commands.pages import list_pages, render, show

__all__ = ["clear", "list_pages", "render", "show", "status", "update"]
