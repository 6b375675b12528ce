import json
import os

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.core import db as db_module
from app.core.lifecycle import RealtimeHub
from app.main import app


db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


class MockWebSocket:
    """Mock WebSocket that records outbound frames."""

    def __init__(self):
        self.sent_texts = []

    async def send_text(self, text: str):
        self.sent_texts.append(text)

    def frames(self) -> list[dict]:
        return [json.loads(t) for t in self.sent_texts]

    def events(self, name: str | None = None) -> list[dict]:
        """Decoded frames, optionally only those with the given event name."""
        return [f for f in self.frames() if name is None or f["event"] == name]

    def reset(self):
        self.sent_texts.clear()


@pytest.fixture
def ws_factory():
    """The MockWebSocket class, for tests that wire sockets by hand."""
    return MockWebSocket


@pytest.fixture
def hub():
    """A fresh RealtimeHub with default policy and no group lookup."""
    return RealtimeHub()


@pytest.fixture
def connect(hub):
    """
    Factory fixture registering a connection with a MockWebSocket on `hub`.
    The `connected` greeting is cleared so tests only see what follows.
    """

    async def _connect(connection_id: str) -> MockWebSocket:
        ws = MockWebSocket()
        await hub.connect(connection_id, ws)
        ws.reset()
        return ws

    return _connect


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(db):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
