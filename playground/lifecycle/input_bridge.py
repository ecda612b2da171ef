"""Relay of user-typed lines into a running program."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from playground.ports import OutputSink, Transport
from playground.transport.models import EntryKind, Session, SessionStatus, TransportError

_log = logging.getLogger("playground.input")

SendFailureCallback = Callable[[Session, TransportError], Awaitable[None]]


class InputBridge:
    """Owns the single line-input listener.

    At most one session is bound at a time; binding a new one always detaches
    the previous binding first, even when it belongs to a stale session.
    """

    def __init__(
        self,
        transport: Transport,
        sink: OutputSink,
        on_send_failure: SendFailureCallback | None = None,
    ):
        self.transport = transport
        self.sink = sink
        self.on_send_failure = on_send_failure
        self._session: Session | None = None

    @property
    def bound_session(self) -> Session | None:
        return self._session

    @property
    def active(self) -> bool:
        return self._session is not None

    def bind(self, session: Session) -> None:
        self.detach()
        self._session = session
        session.input_listener_active = True
        _log.debug(f"Input bound to {session.id}")

    def detach(self) -> None:
        session = self._session
        if session is None:
            return
        session.input_listener_active = False
        self._session = None
        _log.debug(f"Input detached from {session.id}")

    async def submit(self, line: str) -> bool:
        """Forward one line to the bound session; returns True if it was sent."""
        session = self._session
        if not line or session is None:
            return False
        if session.status is not SessionStatus.WAITING_FOR_INPUT:
            return False

        self.sink.append(line, EntryKind.INPUT_ECHO)
        try:
            await self.transport.send_input(session.id, line)
        except TransportError as e:
            _log.error(f"Failed to send input to {session.id}: {e}")
            if self.on_send_failure is not None:
                await self.on_send_failure(session, e)
            else:
                self.detach()
                self.sink.append(f"Error: {e.detail}", EntryKind.ERROR)
            return False
        return True
