"""Plain-text rendering helpers for the terminal.

Contains:
- truncate / to_single_line: Cell formatting
- render_table: Fixed-width table with a flexible last column
- render_box: ASCII box around a block of text
- render_group_table: File / Kind / Preview table for a topic group
"""

import re
import shutil
from typing import Optional

from committy.changes.models import ChangeItem

ELLIPSIS = "…"


def truncate(text: str, max_length: int) -> str:
    """Shorten ``text`` to ``max_length`` characters, marking the cut."""
    if max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    if max_length == 1:
        return text[:1]
    return text[: max_length - 1] + ELLIPSIS


def to_single_line(text: str) -> str:
    """Collapse newlines and runs of whitespace into single spaces."""
    return re.sub(r"\s+", " ", text).strip()


def render_table(
    headers: list[str],
    rows: list[list[str]],
    column_max_widths: Optional[list[int]] = None,
    max_width: Optional[int] = None,
    gutter: str = "  ",
) -> str:
    """Render rows as a fixed-width table.

    Every column but the last is as wide as its widest cell (capped by
    ``column_max_widths``); the last column takes the remaining terminal
    width, never less than 10 characters.

    Args:
        headers: Column titles.
        rows: Table rows; missing cells render empty.
        column_max_widths: Optional per-column caps.
        max_width: Total width. Defaults to the terminal width.
        gutter: Separator between columns.

    Returns:
        Header line, a dashed separator and one line per row.
    """
    if max_width is None:
        max_width = shutil.get_terminal_size((100, 20)).columns
    caps = column_max_widths or []
    column_count = len(headers)

    content = [headers] + [
        [to_single_line(row[c]) if c < len(row) else "" for c in range(column_count)]
        for row in rows
    ]
    natural = [max(len(line[c]) for line in content) for c in range(column_count)]

    widths = []
    available = max(20, max_width - len(gutter) * (column_count - 1))
    for c in range(column_count - 1):
        width = natural[c]
        if c < len(caps) and caps[c] > 0:
            width = min(width, caps[c])
        widths.append(width)
        available -= width
    widths.append(max(10, available))

    lines = [
        gutter.join(truncate(cell, widths[c]).ljust(widths[c]) for c, cell in enumerate(line)).rstrip()
        for line in content
    ]
    separator = "-" * min(len(lines[0]), max_width)
    return "\n".join([lines[0], separator] + lines[1:])


def render_box(text: str, padding: int = 1) -> str:
    """Draw an ASCII box around ``text``."""
    pad = " " * max(0, padding)
    content = [f"{pad}{line}{pad}" for line in (text or "").split("\n")]
    width = max(len(line) for line in content)
    border = "+" + "-" * width + "+"
    body = [f"|{line.ljust(width)}|" for line in content]
    return "\n".join([border] + body + [border])


def render_group_table(items: list[ChangeItem]) -> str:
    """Render a topic group's items as a File / Kind / Preview table."""
    rows = [
        [item.file, item.kind.value, " ".join((item.preview or item.patch or "").split("\n")[:2])]
        for item in items
    ]
    return render_table(["File", "Kind", "Preview"], rows, column_max_widths=[40, 8])
