"""
storefront/services/user_service.py

Purpose: Account operations

- Registration with unique phone number
- Login and password change against salted hashes
- Purchase history lookup
- Balance-funded product purchase
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from storefront.core.exceptions import (
    AuthenticationError,
    InsufficientBalanceError,
    ResourceNotFoundError,
    ValidationError,
)
from storefront.core.logging import get_logger, LogContext
from storefront.core.security import hash_password, verify_password
from storefront.db.store import Store
from storefront.models.user import UserRecord
from storefront.utils.validation_utils import clean_text, is_valid_password, parse_positive_amount

logger = get_logger(__name__)


class UserService:

    def __init__(self, store: Store, min_password_length: int = 8):
        self.store = store
        self.min_password_length = min_password_length

    async def _require_user(self, phone_number: str) -> UserRecord:
        user = await self.store.get_user_by_phone(phone_number)
        if not user:
            raise ResourceNotFoundError("User not found.")
        return user

    async def register(self, phone_number: str, password: str, invitation_code: str) -> UserRecord:
        """
        Creates a new account.

        Raises:
            ValidationError: Missing fields or short password
            ConflictError: Phone number already registered
        """
        phone_number = clean_text(phone_number)
        invitation_code = clean_text(invitation_code)

        if not phone_number or not password or not invitation_code:
            raise ValidationError("All fields are required.")

        if not is_valid_password(password, self.min_password_length):
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters long."
            )

        with LogContext(phone_number=phone_number):
            async with self.store.write_lock():
                user = await self.store.create_user(
                    phone_number=phone_number,
                    password_hash=hash_password(password),
                    invitation_code=invitation_code,
                )
            logger.info(f"New user registered: id={user.id}")
            return user

    async def authenticate(self, phone_number: str, password: str) -> UserRecord:
        """
        Returns the user iff the phone number exists and the password matches.
        """
        phone_number = clean_text(phone_number)
        if not phone_number or not password:
            raise ValidationError("Phone number and password are required.")

        user = await self.store.get_user_by_phone(phone_number)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt", extra={"phone_number": phone_number})
            raise AuthenticationError("Invalid phone number or password.")

        return user

    async def update_password(self, phone_number: str, current_password: str, new_password: str) -> None:
        phone_number = clean_text(phone_number)
        if not phone_number or not current_password or not new_password:
            raise ValidationError("All fields are required to update password.")

        if not is_valid_password(new_password, self.min_password_length):
            raise ValidationError(
                f"New password must be at least {self.min_password_length} characters long."
            )

        with LogContext(phone_number=phone_number):
            async with self.store.write_lock():
                user = await self._require_user(phone_number)

                if not verify_password(current_password, user.password_hash):
                    raise AuthenticationError("Incorrect current password.")

                user.password_hash = hash_password(new_password)
                await self.store.save_user(user)

            logger.info("Password updated")

    async def get_purchases(self, phone_number: Optional[str]) -> List[Dict[str, Any]]:
        phone_number = clean_text(phone_number)
        if not phone_number:
            raise ValidationError("Phone number is required.")

        user = await self._require_user(phone_number)
        return user.purchases

    async def buy_product(self, phone_number: str, product: Optional[Dict[str, Any]]) -> Decimal:
        """
        Spends balance on a product.

        The balance check, deduction and purchase-list append happen under
        the store's write lock and are persisted in one commit.

        Returns:
            The new balance
        """
        phone_number = clean_text(phone_number)
        price = parse_positive_amount(product.get("price")) if isinstance(product, dict) else None

        if not phone_number or price is None:
            raise ValidationError("Valid phone number and product data are required.")

        with LogContext(phone_number=phone_number):
            async with self.store.write_lock():
                user = await self._require_user(phone_number)

                if user.balance < price:
                    raise InsufficientBalanceError("Insufficient balance.")

                user.balance -= price
                user.purchases.append(dict(product))
                await self.store.save_user(user)

            logger.info(f"Purchase for {price}. New balance: {user.balance}")
            return user.balance
