"""
Shared fixtures.

No test needs a running MongoDB: the real SubscriberStore is built around
FakeCollection, which keeps documents in memory, enforces the unique email
index and raises pymongo's own error types.

Run with: pytest -v
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import DuplicateKeyError

from applysync.core.config import settings
from applysync.db.monitor import ConnectionMonitor
from applysync.db.session import SubscriberStore, get_store
from applysync.main import app

LOCAL_SERVER = ("localhost", 27017)


class FakeCollection:
    """In-memory stand-in for an async Mongo collection."""

    def __init__(self, hold_lookups: int = 0):
        self.docs = []
        self.calls = []
        self.indexes = []
        self.fail_with = None
        # when set, find_one blocks until this many lookups are in flight
        self.hold_lookups = hold_lookups
        self._in_flight = 0
        self._release = asyncio.Event()

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def create_index(self, key, unique=False):
        self.calls.append(("create_index", key))
        self._maybe_fail()
        self.indexes.append((key, unique))
        return f"{key}_1"

    async def find_one(self, query):
        self.calls.append(("find_one", query))
        self._maybe_fail()
        if self.hold_lookups:
            self._in_flight += 1
            if self._in_flight >= self.hold_lookups:
                self._release.set()
            await self._release.wait()
        await asyncio.sleep(0)
        for doc in self.docs:
            if all(doc.get(k) == v for k, v in query.items()):
                return dict(doc)
        return None

    async def insert_one(self, doc):
        self.calls.append(("insert_one", doc))
        self._maybe_fail()
        await asyncio.sleep(0)
        if any(d["email"] == doc["email"] for d in self.docs):
            raise DuplicateKeyError(
                f"E11000 duplicate key error collection: appsync.emails index: email_1 "
                f"dup key: {{ email: \"{doc['email']}\" }}",
                11000,
            )
        self.docs.append(dict(doc))

    def store_calls(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def monitor():
    m = ConnectionMonitor()
    m.mark(LOCAL_SERVER, True)
    return m


@pytest.fixture
def store(collection, monitor):
    return SubscriberStore(collection, monitor)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def development(monkeypatch):
    monkeypatch.setattr(settings, "APP_ENV", "development")
