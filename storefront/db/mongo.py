"""
storefront/db/mongo.py

Purpose: MongoDB connection for STORE_BACKEND=mongo

Collections:
- users: one document per phone number; balance stored as a decimal string
- order_intents: _id = gateway order id
- applied_orders: _id = gateway order id, one per verified order
- counters: {_id: <sequence name>, seq: <int>}
"""

import asyncio
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import ConnectionFailure, PyMongoError, ServerSelectionTimeoutError

from storefront.core.config import Settings
from storefront.core.exceptions import ConfigurationError
from storefront.core.logging import get_logger

logger = get_logger(__name__)

CONNECT_ATTEMPTS = 3
FIRST_RETRY_DELAY = 2


class MongoConnection:
    """Owns one motor client for the lifetime of the store."""

    def __init__(self, url: str, db_name: str):
        self.url = url
        self.db_name = db_name
        self.client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoConnection":
        if not settings.MONGODB_URL:
            raise ConfigurationError("MONGODB_URL is required when STORE_BACKEND=mongo")
        return cls(settings.MONGODB_URL, settings.MONGODB_DB_NAME)

    async def open(self) -> None:
        """
        Pings the server before accepting the client, backing off 2s, 4s
        between attempts.

        Raises:
            ConnectionError: When every attempt failed
        """
        if self.client is not None:
            return

        delay = FIRST_RETRY_DELAY
        for attempt in range(1, CONNECT_ATTEMPTS + 1):
            client = AsyncIOMotorClient(
                self.url,
                maxPoolSize=20,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=10000,
                retryWrites=True,
            )
            try:
                await client.admin.command("ping")
            except (ConnectionFailure, ServerSelectionTimeoutError) as e:
                client.close()
                logger.error(f"MongoDB ping failed ({attempt}/{CONNECT_ATTEMPTS}): {e}")
                if attempt == CONNECT_ATTEMPTS:
                    raise ConnectionError("Could not establish MongoDB connection") from e
                await asyncio.sleep(delay)
                delay *= 2
                continue

            self.client = client
            self._db = client[self.db_name]
            logger.info(f"✅ Connected to MongoDB database {self.db_name}")
            return

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
            self._db = None
            logger.info("MongoDB connection closed")

    async def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"MongoDB health check failed: {e}")
            return False
        return True

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise RuntimeError("MongoDB connection is not open")
        return self._db

    @property
    def users(self) -> AsyncIOMotorCollection:
        return self.db["users"]

    @property
    def order_intents(self) -> AsyncIOMotorCollection:
        return self.db["order_intents"]

    @property
    def applied_orders(self) -> AsyncIOMotorCollection:
        return self.db["applied_orders"]

    @property
    def counters(self) -> AsyncIOMotorCollection:
        return self.db["counters"]
