"""Shared playground data structures."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum


class SessionStatus(str, Enum):
    RUNNING = "running"
    WAITING_FOR_INPUT = "waiting_for_input"
    COMPLETED = "completed"
    ERRORED = "errored"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = {SessionStatus.COMPLETED, SessionStatus.ERRORED, SessionStatus.CANCELLED}


class ErrorKind(str, Enum):
    """How an error message should be styled."""

    ERROR = "error"
    INVALID = "invalid"


class EntryKind(str, Enum):
    """Kind of a line appended to an output sink."""

    OUTPUT = "output"
    INPUT_ECHO = "input"
    ERROR = "error"
    INVALID = "invalid"
    EXITED = "exited"
    CONNECTION_ERROR = "connection_error"


class EventKind(str, Enum):
    OUTPUT = "output"
    WAITING_FOR_INPUT = "waiting_for_input"
    ERROR = "error"
    DONE = "done"


@dataclass(frozen=True)
class SessionEvent:
    """One unit pushed over a session's output stream."""

    kind: EventKind
    text: str = ""


@dataclass
class Session:
    """A single remote execution run."""

    id: str
    status: SessionStatus = SessionStatus.RUNNING
    stream_task: asyncio.Task | None = field(default=None, repr=False)
    input_listener_active: bool = False
    input_reserved: bool = False
    closed: bool = False
    # Set whenever status, input binding or `closed` changes; waiters clear it.
    changed: asyncio.Event = field(default_factory=asyncio.Event, repr=False, compare=False)


@dataclass(frozen=True)
class CursorPosition:
    row: int
    column: int


@dataclass(frozen=True)
class Selection:
    start: CursorPosition
    end: CursorPosition


class TransportError(RuntimeError):
    """A request was rejected or the server could not be reached.

    `status` is the HTTP status code, or None when no response arrived.
    `detail` is the raw error text from the server (or the connection error).
    """

    def __init__(self, detail: str, status: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status = status
