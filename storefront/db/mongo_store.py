"""
storefront/db/mongo_store.py

Purpose: MongoDB backend for the Store interface

- Sequential user ids from a counter document
- Duplicate phone numbers rejected by a unique index
- Ledger entry inserted before the user update, rolled back on failure
"""

import asyncio
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from storefront.core.config import Settings
from storefront.core.exceptions import ConflictError
from storefront.core.logging import get_logger
from storefront.db.indexes import create_indexes
from storefront.db.mongo import MongoConnection
from storefront.db.store import Store
from storefront.models.order import AppliedOrder, OrderIntent
from storefront.models.user import UserRecord, utcnow

logger = get_logger(__name__)


def _to_document(record, key: Optional[str] = None) -> Dict[str, Any]:
    document = record.model_dump(mode="json")
    if key is not None:
        document["_id"] = key
    return document


def _from_document(document: Dict[str, Any]) -> Dict[str, Any]:
    document = dict(document)
    document.pop("_id", None)
    return document


class MongoStore(Store):

    def __init__(self, settings: Settings):
        self.connection = MongoConnection.from_settings(settings)
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        await self.connection.open()
        await create_indexes(self.connection)

    async def close(self) -> None:
        self.connection.close()

    async def is_healthy(self) -> bool:
        return await self.connection.ping()

    def write_lock(self):
        return self._lock

    async def _next_user_id(self) -> int:
        counter = await self.connection.counters.find_one_and_update(
            {"_id": "users"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    async def get_user_by_phone(self, phone_number: str) -> Optional[UserRecord]:
        document = await self.connection.users.find_one({"phone_number": phone_number})
        return UserRecord.model_validate(_from_document(document)) if document else None

    async def create_user(self, phone_number: str, password_hash: str, invitation_code: str) -> UserRecord:
        users = self.connection.users
        if await users.find_one({"phone_number": phone_number}, projection={"_id": 1}):
            raise ConflictError("User with this phone number already exists.")

        user = UserRecord(
            id=await self._next_user_id(),
            phone_number=phone_number,
            password_hash=password_hash,
            invitation_code=invitation_code,
        )
        try:
            await users.insert_one(_to_document(user))
        except DuplicateKeyError as e:
            raise ConflictError("User with this phone number already exists.") from e

        logger.info(f"User {user.id} inserted")
        return user

    async def save_user(self, user: UserRecord) -> None:
        stored = user.model_copy(update={"updated_at": utcnow()})
        await self.connection.users.replace_one(
            {"phone_number": stored.phone_number},
            _to_document(stored),
            upsert=True,
        )

    async def list_users(self) -> List[UserRecord]:
        cursor = self.connection.users.find({}).sort("id", 1)
        return [UserRecord.model_validate(_from_document(doc)) async for doc in cursor]

    async def save_order_intent(self, intent: OrderIntent) -> None:
        await self.connection.order_intents.replace_one(
            {"_id": intent.order_id},
            _to_document(intent, key=intent.order_id),
            upsert=True,
        )

    async def get_order_intent(self, order_id: str) -> Optional[OrderIntent]:
        document = await self.connection.order_intents.find_one({"_id": order_id})
        return OrderIntent.model_validate(_from_document(document)) if document else None

    async def get_applied_order(self, order_id: str) -> Optional[AppliedOrder]:
        document = await self.connection.applied_orders.find_one({"_id": order_id})
        return AppliedOrder.model_validate(_from_document(document)) if document else None

    async def apply_order(self, user: UserRecord, applied: AppliedOrder) -> None:
        ledger = self.connection.applied_orders
        try:
            await ledger.insert_one(_to_document(applied, key=applied.order_id))
        except DuplicateKeyError as e:
            raise ConflictError(f"Order {applied.order_id} was already applied.") from e

        try:
            await self.save_user(user)
        except Exception:
            logger.error(f"User update failed, removing ledger entry for {applied.order_id}")
            await ledger.delete_one({"_id": applied.order_id})
            raise

        await self.connection.order_intents.delete_one({"_id": applied.order_id})
