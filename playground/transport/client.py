"""HTTP client for the playground server."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import AsyncIterator

import aiohttp

from playground.transport.config import ClientConfig
from playground.transport.events import extract_error_detail, extract_session_id
from playground.transport.models import TransportError

log = logging.getLogger("playground")

# Program output streams stay open for as long as the program runs.
_STREAM_TIMEOUT = aiohttp.ClientTimeout(total=None, sock_connect=10, sock_read=None)


class PlaygroundClient:
    """HTTP + SSE transport for the playground server."""

    def __init__(self, config: ClientConfig | None = None, http: aiohttp.ClientSession | None = None):
        self.config = config or ClientConfig()
        self.server_url = self.config.resolve_server_url()
        self._timeout = aiohttp.ClientTimeout(total=self.config.resolve_http_timeout())
        self._http = http
        self._owns_http = http is None

    async def __aenter__(self) -> "PlaygroundClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._http is not None and self._owns_http and not self._http.closed:
            await self._http.close()
        self._http = None

    def _get_http(self) -> aiohttp.ClientSession:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_http = True
        return self._http

    def _make_url(self, path: str) -> str:
        return f"{self.server_url}{path}"

    async def request_json(self, method: str, path: str, **kwargs) -> object | None:
        url = self._make_url(path)
        try:
            async with self._get_http().request(method, url, **kwargs) as resp:
                text = await resp.text()
                payload = _maybe_json(text)
                if not 200 <= resp.status < 300:
                    detail = extract_error_detail(text, payload) or resp.reason or ""
                    raise TransportError(detail, status=resp.status)
                if resp.status == 204 or not text:
                    return None
                return payload
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} {path} timed out") from e

    async def check_health(self) -> None:
        response = await self.request_json("GET", "/health")
        if isinstance(response, str) and response.strip() == "OK":
            return
        raise TransportError("Playground server unhealthy or unreachable")

    async def start_run(self, code: str, previous_session_id: str | None = None) -> str:
        headers = {"X-Previous-Session": previous_session_id or ""}
        response = await self.request_json("POST", "/run", json={"code": code}, headers=headers)
        session_id = extract_session_id(response)
        if session_id:
            log.info(f"Started run {session_id}")
            return session_id
        raise TransportError("Playground run did not return a session id")

    async def send_input(self, session_id: str, text: str) -> None:
        await self.request_json(
            "POST", "/send-input", params={"sessionId": session_id}, json={"input": text}
        )

    async def format_code(self, code: str) -> str:
        response = await self.request_json("POST", "/save", json={"code": code})
        if isinstance(response, dict):
            formatted = response.get("code")
            if isinstance(formatted, str):
                return formatted
        raise TransportError("Playground format returned no code")

    async def stream_events(self, session_id: str) -> AsyncIterator[dict]:
        """Yield the JSON payloads of a session's output stream, in order."""
        headers = {"Accept": "text/event-stream"}
        try:
            async with self._get_http().get(
                self._make_url("/program-output"),
                params={"sessionId": session_id},
                headers=headers,
                timeout=_STREAM_TIMEOUT,
            ) as resp:
                if resp.status >= 300:
                    detail = (await resp.text()).strip() or resp.reason or ""
                    raise TransportError(detail, status=resp.status)
                async for event in self.read_sse_stream(resp):
                    yield event
        except aiohttp.ClientError as e:
            raise TransportError(f"Output stream for {session_id} failed: {e}") from e

    async def read_sse_stream(self, resp: aiohttp.ClientResponse) -> AsyncIterator[dict]:
        data_lines: list[str] = []
        async for raw in resp.content:
            line = raw.decode("utf-8", errors="replace").strip("\r\n")
            if not line:
                if not data_lines:
                    continue
                payload = "\n".join(data_lines)
                data_lines = []
                try:
                    event = json.loads(payload)
                except json.JSONDecodeError:
                    log.debug(f"Skipping non-JSON stream payload: {payload[:80]}")
                    continue
                if isinstance(event, dict):
                    yield event
                continue
            if line.startswith(":"):
                continue
            if line.startswith("data:"):
                data_lines.append(line[len("data:") :].lstrip())


def _maybe_json(text: str) -> object | None:
    if not text:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
