"""Playground client configuration.

Configuration lives at the transport boundary so the session layer doesn't
grow a dependency on how the server is located.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = "8088"
DEFAULT_HTTP_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class ClientConfig:
    server_url: str | None = None

    # Optional overrides (otherwise env defaults apply)
    http_timeout_s: float | None = None

    def resolve_server_url(self) -> str:
        if self.server_url:
            return self.server_url.rstrip("/")

        base_url = os.getenv("PLAYGROUND_SERVER_URL")
        if base_url:
            return base_url.rstrip("/")

        host = os.getenv("PLAYGROUND_SERVER_HOST", DEFAULT_HOST)
        port = os.getenv("PLAYGROUND_SERVER_PORT", DEFAULT_PORT)
        return f"http://{host}:{port}"

    def resolve_http_timeout(self) -> float:
        if self.http_timeout_s is not None:
            return self.http_timeout_s
        raw = os.getenv("PLAYGROUND_HTTP_TIMEOUT")
        if not raw:
            return DEFAULT_HTTP_TIMEOUT_S
        try:
            return float(raw)
        except ValueError:
            return DEFAULT_HTTP_TIMEOUT_S
