"""Output sinks for program output.

`BufferSink` keeps everything in memory (embedding apps and tests read it
back); `TerminalSink` writes to a terminal for the CLI, styling notices with rich.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TextIO

from rich.console import Console
from rich.text import Text

from playground.transport.models import EntryKind

_PREFIXES = {
    EntryKind.INPUT_ECHO: "> ",
}

_STYLES = {
    EntryKind.INPUT_ECHO: "cyan",
    EntryKind.ERROR: "red",
    EntryKind.INVALID: "yellow",
    EntryKind.EXITED: "green",
    EntryKind.CONNECTION_ERROR: "red",
}


@dataclass
class BufferSink:
    entries: list[tuple[EntryKind, str]] = field(default_factory=list)
    input_reserved: bool = False
    clear_count: int = 0

    def append(self, text: str, kind: EntryKind = EntryKind.OUTPUT) -> None:
        self.entries.append((kind, text))

    def clear(self) -> None:
        self.entries.clear()
        self.clear_count += 1

    def reserve_input(self) -> None:
        self.input_reserved = True

    def release_input(self) -> None:
        self.input_reserved = False

    @property
    def text(self) -> str:
        return "".join(text for kind, text in self.entries if kind is EntryKind.OUTPUT)

    def lines(self, kind: EntryKind | None = None) -> list[str]:
        return [text for k, text in self.entries if kind is None or k is kind]


class TerminalSink:
    """Writes output to a terminal as it arrives; notices are styled."""

    def __init__(self, stream: TextIO | None = None, echo_input: bool = False):
        self.stream = stream or sys.stdout
        self.console = Console(file=self.stream, markup=False, highlight=False)
        self.echo_input = echo_input
        self.input_reserved = False
        self._at_line_start = True

    def append(self, text: str, kind: EntryKind = EntryKind.OUTPUT) -> None:
        if kind is EntryKind.OUTPUT:
            self._write(text)
            return
        if kind is EntryKind.INPUT_ECHO and not self.echo_input:
            return
        if not self._at_line_start:
            self._write("\n")
        self.console.print(Text(f"{_PREFIXES.get(kind, '')}{text}", style=_STYLES.get(kind, "")), soft_wrap=True)
        self._at_line_start = True

    def clear(self) -> None:
        if self.console.is_terminal:
            self.console.clear()
        self._at_line_start = True

    def reserve_input(self) -> None:
        self.input_reserved = True
        if not self._at_line_start:
            self._write("\n")

    def release_input(self) -> None:
        self.input_reserved = False

    def _write(self, text: str) -> None:
        if not text:
            return
        self.stream.write(text)
        self.stream.flush()
        self._at_line_start = text.endswith("\n")
