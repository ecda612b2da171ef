from __future__ import annotations

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from playground.sinks import BufferSink
from playground.transport.client import PlaygroundClient
from playground.transport.config import ClientConfig
from tests.utils import FakePlaygroundServer, FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sink() -> BufferSink:
    return BufferSink()


@pytest_asyncio.fixture
async def playground():
    state = FakePlaygroundServer()
    server = TestServer(state.app())
    await server.start_server()
    client = PlaygroundClient(ClientConfig(server_url=str(server.make_url("/")), http_timeout_s=5))
    try:
        yield state, client
    finally:
        await client.close()
        await server.close()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep the developer's playground settings out of the tests."""
    for name in (
        "PLAYGROUND_SERVER_URL",
        "PLAYGROUND_SERVER_HOST",
        "PLAYGROUND_SERVER_PORT",
        "PLAYGROUND_HTTP_TIMEOUT",
        "PLAYGROUND_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
