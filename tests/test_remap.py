from __future__ import annotations

import pytest

from playground.remap import find_corresponding_column, remap_position
from playground.transport.models import CursorPosition


@pytest.mark.parametrize("column", range(len("fmt.Println(1)")))
def test_unchanged_line_maps_to_same_column(column: int) -> None:
    line = "fmt.Println(1)"
    assert find_corresponding_column(line, line, column) == column


def test_character_follows_its_occurrence() -> None:
    assert find_corresponding_column("ab", "ba", 0) == 1


def test_column_past_end_goes_to_line_end() -> None:
    assert find_corresponding_column("abc", "xyz", 5) == 3
    assert find_corresponding_column("abc", "xyzw", 3) == 4


def test_missing_line_maps_to_column_zero() -> None:
    assert find_corresponding_column(None, "x := 1", 2) == 0
    assert find_corresponding_column("x := 1", None, 2) == 0
    assert find_corresponding_column("", "x := 1", 0) == 0
    assert find_corresponding_column("x := 1", "", 3) == 0


def test_nth_occurrence_is_preserved_across_reindent() -> None:
    original = "x:=f(a,b,c)"
    formatted = "\tx := f(a, b, c)"
    # Caret on the second comma.
    column = original.index(",", original.index(",") + 1)
    assert formatted[find_corresponding_column(original, formatted, column)] == ","
    assert find_corresponding_column(original, formatted, column) == formatted.rindex(",")


def test_vanished_character_falls_back_to_line_end() -> None:
    assert find_corresponding_column("a;", "a", 1) == 1
    assert find_corresponding_column("f(x,y,z)", "f(x, y)", 5) == len("f(x, y)")


def test_remap_position_uses_same_row() -> None:
    original = "package main\nfunc main(){\nfmt.Println(1)\n}"
    formatted = "package main\n\nfunc main() {\n\tfmt.Println(1)\n}\n"
    moved = remap_position(original, formatted, CursorPosition(1, 11))
    assert moved.row == 1


def test_remap_position_reindented_line() -> None:
    original = "func main() {\nfmt.Println(1)\n}"
    formatted = "func main() {\n\tfmt.Println(1)\n}\n"
    assert remap_position(original, formatted, CursorPosition(1, 4)) == CursorPosition(1, 5)


def test_remap_position_clamps_row_past_end() -> None:
    original = "a\nb\nc\nd"
    formatted = "a\nbcd"
    assert remap_position(original, formatted, CursorPosition(3, 0)) == CursorPosition(1, 3)
