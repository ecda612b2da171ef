"""Caret remapping across a whole-buffer rewrite.

After the server reformats the source there is no structural diff to follow,
so the caret is placed by character identity: the n-th occurrence of the
character under the caret in the old line maps to the n-th occurrence of the
same character in the new line. When the reformatter moved things around too
much the caret falls back to the end of the line.
"""

from __future__ import annotations

from playground.transport.models import CursorPosition


def find_corresponding_column(
    original_line: str | None, formatted_line: str | None, original_column: int
) -> int:
    """Column in `formatted_line` for the caret; an empty or missing line on either side gives 0."""
    if not original_line or not formatted_line:
        return 0

    if original_column < 0 or original_column >= len(original_line):
        return len(formatted_line)

    target = original_line[original_column]
    occurrence = original_line.count(target, 0, original_column)

    position = -1
    for _ in range(occurrence + 1):
        position = formatted_line.find(target, position + 1)
        if position < 0:
            return len(formatted_line)
    return position


def remap_position(original_text: str, formatted_text: str, position: CursorPosition) -> CursorPosition:
    """Map a caret from `original_text` onto `formatted_text`."""
    original_lines = original_text.split("\n")
    formatted_lines = formatted_text.split("\n")

    if position.row >= len(formatted_lines):
        last = len(formatted_lines) - 1
        return CursorPosition(last, len(formatted_lines[last]))

    original_line = original_lines[position.row] if position.row < len(original_lines) else None
    column = find_corresponding_column(original_line, formatted_lines[position.row], position.column)
    return CursorPosition(position.row, column)
