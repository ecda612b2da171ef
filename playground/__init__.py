"""Interactive execution-session client for the playground server."""

from playground.lifecycle.input_bridge import InputBridge
from playground.lifecycle.sessions import SessionManager
from playground.ports import OutputSink, Transport
from playground.reformat import ReformatCoordinator, ReformatResult
from playground.remap import find_corresponding_column, remap_position
from playground.sinks import BufferSink, TerminalSink
from playground.transport import ClientConfig, PlaygroundClient, Session, SessionStatus, TransportError

__all__ = [
    "BufferSink",
    "ClientConfig",
    "InputBridge",
    "OutputSink",
    "PlaygroundClient",
    "ReformatCoordinator",
    "ReformatResult",
    "Session",
    "SessionManager",
    "SessionStatus",
    "TerminalSink",
    "Transport",
    "TransportError",
    "find_corresponding_column",
    "remap_position",
]
