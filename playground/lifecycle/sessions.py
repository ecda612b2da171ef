"""Session lifecycle operations.

Goal: keep run/supersede/teardown semantics in one place so the CLI, the
reformat flow and the input relay don't drift.

Semantics:
- At most one session is current. Starting a run tears the previous one down
  before the run request is sent, and names it in `X-Previous-Session` so the
  server can reclaim it.
- Each session's stream is consumed by one task, strictly in arrival order.
  That task is the session's cancellation token.
- `done`, `error`, a dropped stream and supersede are the only ways a session
  ends; every one of them funnels through `teardown`, which runs once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from playground.lifecycle.input_bridge import InputBridge
from playground.ports import OutputSink, Transport
from playground.transport.events import classify_error, coerce_events
from playground.transport.models import (
    EntryKind,
    ErrorKind,
    EventKind,
    Session,
    SessionEvent,
    SessionStatus,
    TransportError,
)

_log = logging.getLogger("playground.sessions")

CLEAR_MARKER = "\x0c"
EXIT_MARKER = "Program exited."
CONNECTION_ERROR_NOTICE = "Connection error"


def error_entry_kind(message: str) -> EntryKind:
    if classify_error(message) is ErrorKind.INVALID:
        return EntryKind.INVALID
    return EntryKind.ERROR


class SessionManager:
    """Owns the current session and everything attached to it."""

    def __init__(self, transport: Transport, sink: OutputSink):
        self.transport = transport
        self.sink = sink
        self.input_bridge = InputBridge(transport, sink, on_send_failure=self._on_send_failure)
        self._current: Session | None = None
        self._start_lock = asyncio.Lock()

    @property
    def current(self) -> Session | None:
        return self._current

    async def start_run(self, source: str) -> str:
        """Start a new run, superseding the current one; returns the session id."""
        async with self._start_lock:
            previous = self._current
            previous_id = previous.id if previous else None
            if previous is not None:
                previous.status = _absorb(previous.status, SessionStatus.CANCELLED)
                self.teardown(previous)
                self._current = None
                await _settle(previous)
                _log.info(f"Superseded run {previous.id}")

            self.sink.clear()
            try:
                session_id = await self.transport.start_run(source, previous_id)
            except TransportError as e:
                _log.error(f"Run request failed: {e}")
                self.sink.append(f"Error: {e.detail}", error_entry_kind(e.detail))
                raise

            session = Session(id=session_id)
            self._current = session
            self.attach_stream(session)
            return session_id

    def attach_stream(self, session: Session) -> asyncio.Task:
        task = asyncio.create_task(self._consume(session), name=f"playground-stream-{session.id}")
        session.stream_task = task
        return task

    async def cancel(self) -> bool:
        """Stop the current run without starting another one."""
        async with self._start_lock:
            session = self._current
            if session is None:
                return False
            session.status = _absorb(session.status, SessionStatus.CANCELLED)
            closed = self.teardown(session)
            await _settle(session)
            return closed

    async def wait(self) -> SessionStatus | None:
        """Wait for the current session's stream to finish."""
        session = self._current
        if session is None:
            return None
        task = session.stream_task
        if task is not None:
            await asyncio.wait({task})
        return session.status

    def wants_input(self, session: Session) -> bool:
        return (
            not session.closed
            and session.status is SessionStatus.WAITING_FOR_INPUT
            and self.input_bridge.bound_session is session
        )

    async def wait_for_input(self, session: Session) -> bool:
        """Wait until `session` asks for a line; False once it has ended instead."""
        await _wait_until(session, lambda: session.closed or self.wants_input(session))
        return not session.closed

    async def wait_input_withdrawn(self, session: Session) -> None:
        """Wait until `session` no longer takes a line (output resumed or run ended)."""
        await _wait_until(session, lambda: not self.wants_input(session))

    def teardown(self, session: Session) -> bool:
        """Close the session's stream and detach its listener.

        Safe to call from any trigger and any number of times; returns False
        when the session was already torn down.
        """
        if session.closed:
            return False
        session.closed = True

        task = session.stream_task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

        if self.input_bridge.bound_session is session:
            self.input_bridge.detach()
        session.input_listener_active = False

        if session.input_reserved:
            session.input_reserved = False
            self.sink.release_input()

        session.changed.set()
        _log.debug(f"Tore down {session.id} ({session.status.value})")
        return True

    async def _consume(self, session: Session) -> None:
        stream = self.transport.stream_events(session.id)
        try:
            async for payload in stream:
                for event in coerce_events(payload):
                    if session.closed:
                        return
                    self.apply_event(session, event)
                if session.closed:
                    return
        except asyncio.CancelledError:
            # Superseded or cancelled; teardown already ran.
            raise
        except TransportError as e:
            _log.warning(f"Output stream for {session.id} failed: {e}")
        except Exception:
            _log.exception(f"Output stream for {session.id} crashed")
        finally:
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()

        if not session.closed:
            self._fail_connection(session)

    def apply_event(self, session: Session, event: SessionEvent) -> None:
        if session.closed:
            return
        self._apply(session, event)
        session.changed.set()

    def _apply(self, session: Session, event: SessionEvent) -> None:
        if event.kind is EventKind.ERROR:
            session.status = SessionStatus.ERRORED
            self.teardown(session)
            self.sink.append(f"Error: {event.text}", error_entry_kind(event.text))
            return

        if event.kind is EventKind.WAITING_FOR_INPUT:
            session.status = SessionStatus.WAITING_FOR_INPUT
            if not session.input_reserved:
                session.input_reserved = True
                self.sink.reserve_input()
            self.input_bridge.bind(session)
            return

        self._release_input(session)

        if event.kind is EventKind.OUTPUT:
            text = event.text
            if CLEAR_MARKER in text:
                self.sink.clear()
                text = text.rsplit(CLEAR_MARKER, 1)[1]
            if text:
                self.sink.append(text, EntryKind.OUTPUT)
            return

        if event.kind is EventKind.DONE:
            session.status = SessionStatus.COMPLETED
            self.teardown(session)
            self.sink.append(EXIT_MARKER, EntryKind.EXITED)

    def _release_input(self, session: Session) -> None:
        if session.status is SessionStatus.WAITING_FOR_INPUT:
            session.status = SessionStatus.RUNNING
        if session.input_reserved:
            session.input_reserved = False
            self.sink.release_input()

    def _fail_connection(self, session: Session) -> None:
        session.status = _absorb(session.status, SessionStatus.CANCELLED)
        if self.teardown(session):
            self.sink.append(CONNECTION_ERROR_NOTICE, EntryKind.CONNECTION_ERROR)

    async def _on_send_failure(self, session: Session, error: TransportError) -> None:
        if session.closed:
            _log.info(f"Dropped input failure for finished run {session.id}: {error}")
            return
        session.status = SessionStatus.ERRORED
        self.teardown(session)
        self.sink.append(f"Error: {error.detail}", error_entry_kind(error.detail))


def _absorb(current: SessionStatus, new: SessionStatus) -> SessionStatus:
    return current if current.terminal else new


async def _wait_until(session: Session, predicate: Callable[[], bool]) -> None:
    while not predicate():
        session.changed.clear()
        await session.changed.wait()


async def _settle(session: Session) -> None:
    """Wait until a torn-down session's stream has actually closed."""
    task = session.stream_task
    if task is not None and task is not asyncio.current_task():
        await asyncio.wait({task})
