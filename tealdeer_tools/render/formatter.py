"""Classification of tldr markdown lines into styled snippets.

A tldr page looks like::

    # tar

    > Archiving utility.

    - Create an archive from files:

    `tar cf {{target.tar}} {{file1}} {{file2}}`
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum

import structlog

logger = structlog.get_logger()

CODE_INDENT = "      "

_VARIABLE_RE = re.compile(r"\{\{(.*?)\}\}")


class LineKind(Enum):
    """Kinds of lines in a tldr page."""
    EMPTY = "empty"
    TITLE = "title"
    DESCRIPTION = "description"
    EXAMPLE_TEXT = "example_text"
    EXAMPLE_CODE = "example_code"
    OTHER = "other"


class SnippetKind(Enum):
    """Kinds of styled output fragments."""
    COMMAND_NAME = "command_name"
    VARIABLE = "example_variable"
    NORMAL_CODE = "example_code"
    DESCRIPTION = "description"
    TEXT = "example_text"
    LINEBREAK = "linebreak"


@dataclass(frozen=True)
class PageLine:
    kind: LineKind
    text: str = ""


@dataclass(frozen=True)
class PageSnippet:
    """A fragment of output and the style it is printed with."""
    kind: SnippetKind
    text: str = ""

    def is_empty(self) -> bool:
        return self.kind is not SnippetKind.LINEBREAK and not self.text


def classify_line(line: str) -> PageLine:
    """Classify one raw markdown line."""
    stripped = line.strip()
    if not stripped:
        return PageLine(LineKind.EMPTY)
    if stripped.startswith("#"):
        return PageLine(LineKind.TITLE, stripped.lstrip("#").strip())
    if stripped.startswith(">"):
        return PageLine(LineKind.DESCRIPTION, stripped[1:].strip())
    if stripped.startswith("-"):
        return PageLine(LineKind.EXAMPLE_TEXT, stripped[1:].strip())
    if len(stripped) >= 2 and stripped.startswith("`") and stripped.endswith("`"):
        return PageLine(LineKind.EXAMPLE_CODE, stripped[1:-1])
    return PageLine(LineKind.OTHER, stripped)


def _highlight_command(command: str, text: str) -> Iterator[PageSnippet]:
    if not command:
        if text:
            yield PageSnippet(SnippetKind.NORMAL_CODE, text)
        return

    pattern = re.compile(rf"(?<![\w-]){re.escape(command)}(?![\w-])")
    pos = 0
    for match in pattern.finditer(text):
        if match.start() > pos:
            yield PageSnippet(SnippetKind.NORMAL_CODE, text[pos:match.start()])
        yield PageSnippet(SnippetKind.COMMAND_NAME, match.group(0))
        pos = match.end()
    if pos < len(text):
        yield PageSnippet(SnippetKind.NORMAL_CODE, text[pos:])


def highlight_code(command: str, code: str) -> Iterator[PageSnippet]:
    """Split example code into command name, variable, and plain code snippets.

    Args:
        command: Command name taken from the page title
        code: Example code without the surrounding backticks

    Yields:
        Snippets in output order
    """
    pos = 0
    for match in _VARIABLE_RE.finditer(code):
        yield from _highlight_command(command, code[pos:match.start()])
        yield PageSnippet(SnippetKind.VARIABLE, match.group(1))
        pos = match.end()
    yield from _highlight_command(command, code[pos:])


def highlight_lines(lines: Iterable[str], keep_empty_lines: bool = True) -> Iterator[PageSnippet]:
    """Turn page lines into snippets.

    Args:
        lines: Raw markdown lines of one or more concatenated pages
        keep_empty_lines: Emit line breaks for empty lines, False for compact output

    Yields:
        Snippets in output order, always ending with a line break
    """
    command = ""
    for raw in lines:
        line = classify_line(raw)
        if line.kind is LineKind.EMPTY:
            if keep_empty_lines:
                yield PageSnippet(SnippetKind.LINEBREAK)
        elif line.kind is LineKind.TITLE:
            command = line.text
            logger.debug("page_title_detected", command=command)
        elif line.kind is LineKind.DESCRIPTION:
            yield PageSnippet(SnippetKind.DESCRIPTION, line.text)
        elif line.kind is LineKind.EXAMPLE_TEXT:
            yield PageSnippet(SnippetKind.TEXT, line.text)
        elif line.kind is LineKind.EXAMPLE_CODE:
            yield PageSnippet(SnippetKind.NORMAL_CODE, CODE_INDENT)
            yield from highlight_code(command, line.text)
            yield PageSnippet(SnippetKind.LINEBREAK)
        else:
            logger.debug("unknown_line_type", line=line.text)
    yield PageSnippet(SnippetKind.LINEBREAK)
