from __future__ import annotations

import asyncio
import json

from aiohttp import web

from playground.transport.models import TransportError

_END = object()
_DROP = object()


class FakeTransport:
    """Scripted stand-in for the playground server.

    Each run gets its own queue; tests push payloads into it and the
    session manager reads them back through `stream_events`.
    """

    def __init__(self) -> None:
        self.runs: list[tuple[str, str | None]] = []
        self.inputs: list[tuple[str, str]] = []
        self.formats: list[str] = []
        self.log: list[tuple[str, str]] = []
        self.streams: dict[str, asyncio.Queue] = {}
        self.run_error: TransportError | None = None
        self.input_error: TransportError | None = None
        self.format_error: TransportError | None = None
        self.formatted: str = ""
        self._counter = 0

    async def start_run(self, code: str, previous_session_id: str | None = None) -> str:
        self.runs.append((code, previous_session_id))
        self.log.append(("run", previous_session_id or ""))
        if self.run_error is not None:
            raise self.run_error
        self._counter += 1
        session_id = str(self._counter)
        self.streams[session_id] = asyncio.Queue()
        return session_id

    async def stream_events(self, session_id: str):
        self.log.append(("open", session_id))
        queue = self.streams[session_id]
        try:
            while True:
                item = await queue.get()
                if item is _END:
                    return
                if item is _DROP:
                    raise TransportError("connection reset by peer")
                yield item
        finally:
            self.log.append(("close", session_id))

    async def send_input(self, session_id: str, text: str) -> None:
        self.inputs.append((session_id, text))
        if self.input_error is not None:
            raise self.input_error

    async def format_code(self, code: str) -> str:
        self.formats.append(code)
        if self.format_error is not None:
            raise self.format_error
        return self.formatted

    def push(self, session_id: str, **payload: object) -> None:
        self.streams[session_id].put_nowait(payload)

    def end(self, session_id: str) -> None:
        self.streams[session_id].put_nowait(_END)

    def drop(self, session_id: str) -> None:
        self.streams[session_id].put_nowait(_DROP)


async def settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakePlaygroundServer:
    """In-process server speaking the playground wire protocol."""

    def __init__(self) -> None:
        self.run_headers: list[str] = []
        self.run_bodies: list[dict] = []
        self.inputs: list[tuple[str, str]] = []
        self.scripts: dict[str, list[object]] = {}
        self.reject_run: str | None = None
        self.inputs_ready = asyncio.Event()
        self.unhealthy: str | None = None

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/run", self.run)
        app.router.add_get("/program-output", self.program_output)
        app.router.add_post("/send-input", self.send_input)
        app.router.add_post("/save", self.save)
        app.router.add_get("/health", self.health)
        return app

    async def run(self, request: web.Request) -> web.Response:
        self.run_headers.append(request.headers.get("X-Previous-Session", "<missing>"))
        self.run_bodies.append(await request.json())
        if self.reject_run:
            return web.Response(status=400, text=self.reject_run + "\n")
        return web.json_response({"sessionId": len(self.run_bodies)})

    async def program_output(self, request: web.Request) -> web.StreamResponse:
        session_id = request.query["sessionId"]
        if session_id not in self.scripts:
            return web.Response(status=404, text="Session not found")
        resp = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
        await resp.prepare(request)
        await resp.write(b": keep-alive\n\n")
        for item in self.scripts[session_id]:
            if item == "wait-input":
                await self.inputs_ready.wait()
                continue
            if isinstance(item, bytes):
                await resp.write(item)
                continue
            await resp.write(f"data: {json.dumps(item)}\n\n".encode())
        return resp

    async def send_input(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.inputs.append((request.query["sessionId"], body["input"]))
        self.inputs_ready.set()
        return web.Response(status=200)

    async def save(self, request: web.Request) -> web.Response:
        body = await request.json()
        if "func {" in body["code"]:
            return web.Response(status=500, text="Error formatting code\n")
        return web.json_response({"code": body["code"].replace("(){", "() {")})

    async def health(self, request: web.Request) -> web.Response:
        if self.unhealthy:
            return web.Response(status=503, text=self.unhealthy)
        return web.Response(text="OK\n")



class ScriptedPrompt:
    """Stands in for a prompt_toolkit `PromptSession`.

    Hands out `lines` in order; an exception instance in the list is raised
    instead. Once the script runs out, the prompt blocks like a user who
    has not typed anything yet, until it is cancelled.
    """

    def __init__(self, *lines: object, on_prompt=None) -> None:
        self.lines = list(lines)
        self.on_prompt = on_prompt
        self.prompts = 0
        self.withdrawn = 0

    async def prompt_async(self, message: str = "") -> str:
        self.prompts += 1
        if self.on_prompt is not None:
            self.on_prompt()
        if self.lines:
            item = self.lines.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.withdrawn += 1
            raise
        return ""
