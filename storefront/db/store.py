"""
storefront/db/store.py

Purpose: Storage interface shared by the file and Mongo backends

- Users keyed by phone number, sequential integer ids
- Order intents captured at order creation
- Applied-orders ledger for idempotent payment verification
- Single-writer lock around read-check-mutate-write sequences
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from storefront.core.config import Settings
from storefront.models.order import AppliedOrder, OrderIntent
from storefront.models.user import UserRecord


class Store(ABC):
    """
    Records returned by the store are copies: mutating one has no effect
    until it is passed back to save_user() or apply_order().

    Mutating calls are expected to run inside ``async with store.write_lock()``.
    """

    @abstractmethod
    async def connect(self) -> None: ...

    @abstractmethod
    async def close(self) -> None: ...

    @abstractmethod
    async def is_healthy(self) -> bool: ...

    @abstractmethod
    def write_lock(self):
        """Async context manager serializing all writers."""

    @abstractmethod
    async def get_user_by_phone(self, phone_number: str) -> Optional[UserRecord]: ...

    @abstractmethod
    async def create_user(self, phone_number: str, password_hash: str, invitation_code: str) -> UserRecord:
        """
        Creates a user with the next sequential id.

        Raises:
            ConflictError: If the phone number is already registered
        """

    @abstractmethod
    async def save_user(self, user: UserRecord) -> None: ...

    @abstractmethod
    async def list_users(self) -> List[UserRecord]: ...

    @abstractmethod
    async def save_order_intent(self, intent: OrderIntent) -> None: ...

    @abstractmethod
    async def get_order_intent(self, order_id: str) -> Optional[OrderIntent]: ...

    @abstractmethod
    async def get_applied_order(self, order_id: str) -> Optional[AppliedOrder]: ...

    @abstractmethod
    async def apply_order(self, user: UserRecord, applied: AppliedOrder) -> None:
        """
        Persists the mutated user together with its ledger entry and
        discards the order intent it replaces.
        """


def build_store(settings: Settings) -> Store:
    """
    Returns the store backend selected by STORE_BACKEND.
    """
    if settings.STORE_BACKEND == "mongo":
        from storefront.db.mongo_store import MongoStore
        return MongoStore(settings)

    from storefront.db.file_store import JsonFileStore
    return JsonFileStore(settings.USERS_FILE)
