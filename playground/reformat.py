"""Save/format round trip that keeps the caret in place."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from playground.lifecycle.sessions import error_entry_kind
from playground.ports import OutputSink, Transport
from playground.remap import remap_position
from playground.transport.models import CursorPosition, Selection, TransportError

_log = logging.getLogger("playground.reformat")


@dataclass(frozen=True)
class ReformatResult:
    text: str
    cursor: CursorPosition
    selection: Selection | None


class ReformatCoordinator:
    def __init__(self, transport: Transport, sink: OutputSink | None = None):
        self.transport = transport
        self.sink = sink

    async def reformat(
        self, text: str, cursor: CursorPosition, selection: Selection | None = None
    ) -> ReformatResult:
        """Reformat `text` on the server and remap the caret and selection.

        Raises TransportError when the server rejects the source; nothing the
        caller holds is touched in that case.
        """
        try:
            formatted = await self.transport.format_code(text)
        except TransportError as e:
            _log.error(f"Format request failed: {e}")
            if self.sink is not None:
                self.sink.clear()
                self.sink.append(f"Error: {e.detail}", error_entry_kind(e.detail))
            raise

        new_cursor = remap_position(text, formatted, cursor)
        new_selection = None
        if selection is not None:
            new_selection = Selection(
                start=remap_position(text, formatted, selection.start),
                end=remap_position(text, formatted, selection.end),
            )
        return ReformatResult(formatted, new_cursor, new_selection)
