from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from applysync.core.config import Settings
from applysync.core.errors import DuplicateSubscriber, StartupFailure, StoreFailure
from applysync.db.monitor import ConnectionMonitor
from applysync.models.subscriber import COLLECTION_NAME, Subscriber

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "appsync"


# ── Store ──────────────────────────────────────────────────────────────────────
class SubscriberStore:
    """
    Subscriber persistence over a single Mongo collection.

    Driver errors never leave this class: a unique-index violation becomes
    DuplicateSubscriber, anything else becomes StoreFailure.
    """

    def __init__(
        self,
        collection: Any,
        monitor: ConnectionMonitor,
        client: Optional[AsyncIOMotorClient] = None,
    ):
        self.collection = collection
        self.monitor    = monitor
        self._client    = client

    @property
    def connected(self) -> bool:
        return self.monitor.connected

    async def ensure_indexes(self) -> None:
        try:
            await self.collection.create_index("email", unique=True)
        except PyMongoError as exc:
            raise StoreFailure(str(exc)) from exc

    async def find_by_email(self, email: str) -> Optional[Subscriber]:
        try:
            doc = await self.collection.find_one({"email": email})
        except PyMongoError as exc:
            raise StoreFailure(str(exc)) from exc
        return Subscriber.from_document(doc) if doc else None

    async def insert(self, subscriber: Subscriber) -> None:
        try:
            await self.collection.insert_one(subscriber.to_document())
        except DuplicateKeyError as exc:
            raise DuplicateSubscriber(subscriber.email) from exc
        except PyMongoError as exc:
            raise StoreFailure(str(exc)) from exc

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            logger.info("Store connection closed")


# ── Connection ─────────────────────────────────────────────────────────────────
async def connect_store(settings: Settings) -> SubscriberStore:
    monitor = ConnectionMonitor()
    client  = AsyncIOMotorClient(
        settings.MONGO_URI,
        serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
        event_listeners=[monitor],
    )
    db    = client[settings.MONGO_DB] if settings.MONGO_DB else client.get_default_database(DEFAULT_DATABASE)
    store = SubscriberStore(db[COLLECTION_NAME], monitor, client=client)

    try:
        await client.admin.command("ping")
        await store.ensure_indexes()
    except (PyMongoError, StoreFailure) as exc:
        client.close()
        logger.error("Store connection error: %s", exc)
        raise StartupFailure(f"could not connect to {db.name}: {exc}") from exc

    logger.info("Store connected to database %r", db.name)
    return store


# ── FastAPI dependency ─────────────────────────────────────────────────────────
def get_store(request: Request) -> SubscriberStore:
    return request.app.state.store
