"""Shared pytest fixtures configured to use SQLite in-memory and an in-memory Redis."""

import asyncio
import logging
import os
from typing import Dict, List, Optional

# Tell app lifespan to skip real DB init
os.environ.setdefault("CLOUDNOTES_SKIP_LIFESPAN_DB", "1")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cloudnotes.config import get_settings
from cloudnotes.core import models  # noqa: F401  registers every table
from cloudnotes.core import realtime as realtime_module
from cloudnotes.core import redis_client as redis_client_module
from cloudnotes.core.models.base import BaseModel
from cloudnotes.core.realtime import ChangeFeed, get_change_feed
from cloudnotes.database import get_db_session, get_session_factory
from cloudnotes.main import app

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_PASSWORD = "TestPassword123!"
ADMIN_EMAIL = "admin@example.com"


class InMemoryPubSub:
    """Minimal stand-in for a redis.asyncio PubSub subscribed to one channel."""

    def __init__(self, broker: "FakeRedisClient", channel: str):
        self.broker = broker
        self.channel = channel
        self.queue: asyncio.Queue = asyncio.Queue()
        self.unsubscribed = False
        self.closed = False

    async def get_message(self, ignore_subscribe_messages: bool = False, timeout: Optional[float] = 0.0):
        if timeout:
            try:
                return await asyncio.wait_for(self.queue.get(), timeout)
            except asyncio.TimeoutError:
                return None
        try:
            return self.queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    async def unsubscribe(self, *channels):
        self.unsubscribed = True
        self.broker.detach(self)

    async def aclose(self):
        self.closed = True


class FakeRedisClient:
    """In-memory RedisClient: key/value for the token blacklist plus pub/sub."""

    def __init__(self):
        self.storage: Dict[str, str] = {}
        self.subscribers: Dict[str, List[InMemoryPubSub]] = {}
        self.published: List[tuple] = []
        # HealthService pings the raw connection
        self.redis = self

    async def connect(self):
        return None

    async def disconnect(self):
        return None

    async def ping(self):
        return True

    async def set(self, key, value, expire=None):
        self.storage[key] = value
        return True

    async def exists(self, key):
        return key in self.storage

    async def add_to_blacklist(self, token_jti, expire):
        return await self.set(f"blacklist:{token_jti}", "blacklisted", expire)

    async def is_token_blacklisted(self, token_jti):
        return await self.exists(f"blacklist:{token_jti}")

    async def publish(self, channel, message):
        self.published.append((channel, message))
        receivers = list(self.subscribers.get(channel, []))
        for pubsub in receivers:
            pubsub.queue.put_nowait({"type": "message", "channel": channel, "data": message})
        return len(receivers)

    async def open_pubsub(self, channel):
        pubsub = InMemoryPubSub(self, channel)
        self.subscribers.setdefault(channel, []).append(pubsub)
        return pubsub

    def detach(self, pubsub: InMemoryPubSub):
        receivers = self.subscribers.get(pubsub.channel, [])
        if pubsub in receivers:
            receivers.remove(pubsub)


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Route every Redis use (blacklist and change feed) to memory."""
    client = FakeRedisClient()
    monkeypatch.setattr(redis_client_module, "_redis_client", client)
    monkeypatch.setattr(realtime_module, "_change_feed", ChangeFeed(client, prefix="realtime"))
    return client


@pytest.fixture
def change_feed(fake_redis) -> ChangeFeed:
    return realtime_module._change_feed


@pytest.fixture
def admin_emails(monkeypatch):
    """Accounts registered with ADMIN_EMAIL get the admin flag."""
    monkeypatch.setattr(get_settings(), "admin_emails", [ADMIN_EMAIL])
    return [ADMIN_EMAIL]


@pytest.fixture
async def test_engine():
    """Fresh SQLite in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces ON DELETE CASCADE with this pragma
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    """Database session for tests that talk to repositories/services directly."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def test_app(session_factory, change_feed):
    """App wired to the test database and the in-memory change feed."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_change_feed] = lambda: change_feed
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Test client sharing one event loop for requests and websockets."""
    with TestClient(test_app) as test_client:
        yield test_client


class ApiHelper:
    """Account and note shortcuts over the HTTP API.

    Logging in also stores that user's session cookie on the client, so the
    last login decides who the page routes see.
    """

    def __init__(self, client: TestClient):
        self.client = client

    def register(self, email: str, password: str = TEST_PASSWORD, full_name: Optional[str] = None) -> dict:
        resp = self.client.post(
            "/api/auth/register",
            json={
                "email": email,
                "password": password,
                "confirm_password": password,
                "full_name": full_name,
            },
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    def login(self, email: str, password: str = TEST_PASSWORD) -> str:
        resp = self.client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return resp.json()["access_token"]

    def signup(self, email: str, full_name: Optional[str] = None) -> str:
        self.register(email, full_name=full_name)
        return self.login(email)

    @staticmethod
    def bearer(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def create_note(self, token: str, title: str, content: str, is_public: bool = False) -> dict:
        resp = self.client.post(
            "/api/notes/",
            json={"title": title, "content": content, "is_public": is_public},
            headers=self.bearer(token),
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    def my_notes(self, token: str) -> List[dict]:
        resp = self.client.get("/api/notes/", headers=self.bearer(token))
        assert resp.status_code == 200, resp.text
        return resp.json()


@pytest.fixture
def api(client) -> ApiHelper:
    return ApiHelper(client)


@pytest.fixture
def user_token(api) -> str:
    """Registered, signed-in regular user."""
    return api.signup("alice@example.com", full_name="Alice")


@pytest.fixture
def admin_token(api, admin_emails) -> str:
    return api.signup(ADMIN_EMAIL, full_name="Admin")
