"""
storefront/db/file_store.py

Purpose: JSON file backend (default)

- Whole store kept in memory, mirrored to one JSON file
- Every commit writes a temp file beside the target and renames it over
- Memory is only updated after the file write succeeded
- Accepts files holding a bare list of users
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from storefront.core.exceptions import ConflictError
from storefront.core.logging import get_logger
from storefront.db.store import Store
from storefront.models.order import AppliedOrder, OrderIntent
from storefront.models.user import UserRecord, utcnow

logger = get_logger(__name__)


def _section(raw: Dict[str, Any], key: str) -> List[Any]:
    items = raw.get(key, [])
    if not isinstance(items, list):
        raise ValueError(f"\"{key}\" must be a list, got {type(items).__name__}")
    return items


class JsonFileStore(Store):

    def __init__(self, path):
        self.path = Path(path)
        self._users: Dict[str, UserRecord] = {}
        self._intents: Dict[str, OrderIntent] = {}
        self._applied: Dict[str, AppliedOrder] = {}
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        await asyncio.to_thread(self._load)

    async def close(self) -> None:
        logger.info(f"File store closed: {self.path}")

    async def is_healthy(self) -> bool:
        return self.path.exists()

    def write_lock(self):
        return self._lock

    # ------------------------------------------------------------------
    # Loading / writing
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._write_snapshot(self._snapshot({}, {}, {}))
            logger.info(f"Created new store file: {self.path}")
            return

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "[]")
            if isinstance(raw, list):
                raw = {"users": raw}
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object or a list, got {type(raw).__name__}")

            users = [UserRecord.model_validate(item) for item in _section(raw, "users")]
            intents = [OrderIntent.model_validate(item) for item in _section(raw, "order_intents")]
            applied = [AppliedOrder.model_validate(item) for item in _section(raw, "applied_orders")]
        except (OSError, ValueError, PydanticValidationError) as e:
            # Unreadable store: start empty, the next commit rewrites the file
            logger.error(f"Error loading store file {self.path}: {e}", exc_info=True)
            return

        self._users = {user.phone_number: user for user in users}
        self._intents = {intent.order_id: intent for intent in intents}
        self._applied = {entry.order_id: entry for entry in applied}
        logger.info(f"Loaded {len(self._users)} users from {self.path}")

    @staticmethod
    def _snapshot(
        users: Dict[str, UserRecord],
        intents: Dict[str, OrderIntent],
        applied: Dict[str, AppliedOrder],
    ) -> Dict[str, Any]:
        return {
            "users": [user.model_dump(mode="json") for user in users.values()],
            "order_intents": [intent.model_dump(mode="json") for intent in intents.values()],
            "applied_orders": [entry.model_dump(mode="json") for entry in applied.values()],
        }

    def _write_snapshot(self, snapshot: Dict[str, Any]) -> None:
        directory = self.path.parent
        fd, tmp_path = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(snapshot, handle, indent=2)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    async def _commit(
        self,
        users: Dict[str, UserRecord],
        intents: Dict[str, OrderIntent],
        applied: Dict[str, AppliedOrder],
    ) -> None:
        snapshot = self._snapshot(users, intents, applied)
        await asyncio.to_thread(self._write_snapshot, snapshot)
        self._users, self._intents, self._applied = users, intents, applied

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user_by_phone(self, phone_number: str) -> Optional[UserRecord]:
        user = self._users.get(phone_number)
        return user.model_copy(deep=True) if user else None

    async def create_user(self, phone_number: str, password_hash: str, invitation_code: str) -> UserRecord:
        if phone_number in self._users:
            raise ConflictError("User with this phone number already exists.")

        next_id = max((user.id for user in self._users.values()), default=0) + 1
        user = UserRecord(
            id=next_id,
            phone_number=phone_number,
            password_hash=password_hash,
            invitation_code=invitation_code,
        )

        users = dict(self._users)
        users[phone_number] = user
        await self._commit(users, self._intents, self._applied)
        return user.model_copy(deep=True)

    async def save_user(self, user: UserRecord) -> None:
        stored = user.model_copy(deep=True, update={"updated_at": utcnow()})
        users = dict(self._users)
        users[stored.phone_number] = stored
        await self._commit(users, self._intents, self._applied)

    async def list_users(self) -> List[UserRecord]:
        return sorted(
            (user.model_copy(deep=True) for user in self._users.values()),
            key=lambda user: user.id,
        )

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    async def save_order_intent(self, intent: OrderIntent) -> None:
        intents = dict(self._intents)
        intents[intent.order_id] = intent.model_copy(deep=True)
        await self._commit(self._users, intents, self._applied)

    async def get_order_intent(self, order_id: str) -> Optional[OrderIntent]:
        intent = self._intents.get(order_id)
        return intent.model_copy(deep=True) if intent else None

    async def get_applied_order(self, order_id: str) -> Optional[AppliedOrder]:
        entry = self._applied.get(order_id)
        return entry.model_copy(deep=True) if entry else None

    async def apply_order(self, user: UserRecord, applied: AppliedOrder) -> None:
        if applied.order_id in self._applied:
            raise ConflictError(f"Order {applied.order_id} was already applied.")

        users = dict(self._users)
        users[user.phone_number] = user.model_copy(deep=True, update={"updated_at": utcnow()})
        ledger = dict(self._applied)
        ledger[applied.order_id] = applied.model_copy(deep=True)
        # The ledger entry supersedes the intent
        intents = {order_id: intent for order_id, intent in self._intents.items() if order_id != applied.order_id}
        await self._commit(users, intents, ledger)
