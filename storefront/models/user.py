"""
storefront/models/user.py

Purpose: User record model

- Phone number is the unique key
- Password kept only as a salted hash
- Balance in major currency units (Decimal)
- Purchase list of opaque product entries
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRecord(BaseModel):
    id: int
    phone_number: str
    password_hash: str
    invitation_code: str
    balance: Decimal = Decimal("0")
    purchases: List[Dict[str, Any]] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def public_view(self) -> Dict[str, Any]:
        """Fields safe to hand back to the client."""
        return {"phoneNumber": self.phone_number, "balance": float(self.balance)}

    def product_names(self) -> List[str]:
        return [str(product.get("name", "")) for product in self.purchases]
