"""Playground server transport package."""

from playground.transport.client import PlaygroundClient
from playground.transport.config import ClientConfig
from playground.transport.models import EventKind, Session, SessionEvent, SessionStatus, TransportError

__all__ = [
    "ClientConfig",
    "EventKind",
    "PlaygroundClient",
    "Session",
    "SessionEvent",
    "SessionStatus",
    "TransportError",
]
