"""Ports (interfaces) for the session core.

The session layer depends on these contracts rather than on aiohttp or on a
concrete output widget.
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from playground.transport.models import EntryKind


@runtime_checkable
class Transport(Protocol):
    """Requests and server-push streams against the playground server."""

    async def start_run(self, code: str, previous_session_id: str | None = None) -> str:
        ...

    def stream_events(self, session_id: str) -> AsyncIterator[dict]:
        ...

    async def send_input(self, session_id: str, text: str) -> None:
        ...

    async def format_code(self, code: str) -> str:
        ...


@runtime_checkable
class OutputSink(Protocol):
    """Where program output, input echoes and notices are rendered."""

    def append(self, text: str, kind: EntryKind = EntryKind.OUTPUT) -> None:
        ...

    def clear(self) -> None:
        ...

    def reserve_input(self) -> None:
        ...

    def release_input(self) -> None:
        ...
