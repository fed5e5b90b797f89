"""
storefront/db/indexes.py

Purpose: Index setup for the Mongo backend, run on every connect
"""

from pymongo import ASCENDING, DESCENDING, IndexModel

from storefront.core.logging import get_logger
from storefront.db.mongo import MongoConnection

logger = get_logger(__name__)

USER_INDEXES = [
    IndexModel([("phone_number", ASCENDING)], unique=True, name="phone_number_unique"),
    IndexModel([("id", ASCENDING)], unique=True, name="user_id_unique"),
]

INTENT_INDEXES = [
    IndexModel([("phone_number", ASCENDING), ("created_at", DESCENDING)], name="intent_phone_created_idx"),
]

LEDGER_INDEXES = [
    IndexModel([("phone_number", ASCENDING), ("applied_at", DESCENDING)], name="applied_phone_applied_idx"),
]


async def create_indexes(connection: MongoConnection) -> None:
    """
    Idempotent; create_indexes is a no-op for indexes that already exist.
    The phone number index is what makes concurrent registrations safe.
    """
    await connection.users.create_indexes(USER_INDEXES)
    await connection.order_intents.create_indexes(INTENT_INDEXES)
    await connection.applied_orders.create_indexes(LEDGER_INDEXES)
    logger.info("✅ Mongo indexes in place")
