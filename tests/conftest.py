"""
pytest configuration and fixtures.
"""

import json

import pytest
import pytest_asyncio

from database.database import make_engine, init_db
from database.executor import QueryExecutor
from handlers import Dispatcher, ReplyChannel, SessionAuthority

SECRET = "test-secret"


@pytest_asyncio.fixture
async def db(tmp_path):
    """Fresh file-backed SQLite store behind a small bounded pool."""
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}", pool_size=5, pool_timeout=5)
    await init_db(engine)
    executor = QueryExecutor(engine)
    yield executor
    await executor.dispose()


@pytest.fixture
def authority(db) -> SessionAuthority:
    return SessionAuthority(db)


@pytest.fixture
def dispatcher(db, authority) -> Dispatcher:
    return Dispatcher(db, authority, SECRET)


class FakeSocket:
    """Records what a ReplyChannel writes."""

    def __init__(self, fail: Exception | None = None):
        self.sent: list[str] = []
        self.fail = fail

    async def send_str(self, data: str) -> None:
        if self.fail is not None:
            raise self.fail
        self.sent.append(data)

    @property
    def replies(self) -> list:
        return [json.loads(s) for s in self.sent]


@pytest.fixture
def ask(dispatcher):
    """Send one request through the dispatcher and return its single reply."""

    async def _ask(payload):
        sock = FakeSocket()
        raw = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
        await dispatcher.handle(raw, ReplyChannel(sock.send_str, "test"))
        assert len(sock.sent) == 1, sock.sent
        return sock.replies[0]

    return _ask


@pytest.fixture
def register(ask):
    """Register a user and return their authkey."""

    async def _register(uname="alice", password="hunter22", email=None):
        reply = await ask({
            "action": "register", "uname": uname, "pass": password,
            "email": email or f"{uname}@example.com",
        })
        assert reply["status"] == "ok", reply
        return reply["authkey"]

    return _register
