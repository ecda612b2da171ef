"""Playground stream payload normalization helpers."""

from __future__ import annotations

from playground.transport.models import ErrorKind, EventKind, SessionEvent

INVALID_CODE_PHRASE = "invalid or potentially unsafe"


def extract_session_id(payload: object) -> str | None:
    if not isinstance(payload, dict):
        return None
    for key in ("sessionId", "sessionID", "session_id"):
        value = payload.get(key)
        # The server hands out numeric ids; they are opaque to us.
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str) and value:
            return value
    return None


def coerce_events(payload: dict) -> list[SessionEvent]:
    """Split one stream message into events, in application order.

    A message may carry any subset of `error`, `output`, `waitingForInput`
    and `done`; they apply in exactly that order.
    """
    events: list[SessionEvent] = []

    error = payload.get("error")
    if isinstance(error, str) and error:
        events.append(SessionEvent(EventKind.ERROR, error))

    output = payload.get("output")
    if isinstance(output, str) and output:
        events.append(SessionEvent(EventKind.OUTPUT, output))

    if payload.get("waitingForInput") is True:
        events.append(SessionEvent(EventKind.WAITING_FOR_INPUT))

    if payload.get("done") is True:
        events.append(SessionEvent(EventKind.DONE))

    return events


def classify_error(message: str) -> ErrorKind:
    if INVALID_CODE_PHRASE in message.lower():
        return ErrorKind.INVALID
    return ErrorKind.ERROR


def extract_error_detail(text: str, payload: object) -> str:
    """Pick the human readable part of an error response body."""
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return text.strip()
