"""
storefront/models/order.py

Purpose: Payment order records kept on our side of the gateway round trip

- OrderIntent: what was asked for when the gateway order was created
- AppliedOrder: idempotency ledger entry, one per verified order
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from storefront.models.user import utcnow


class PurchaseType(str, Enum):
    PRODUCT = "product"
    RECHARGE = "recharge"


class OrderIntent(BaseModel):
    order_id: str
    phone_number: str
    amount: int  # minor units
    currency: str
    purchase_type: PurchaseType = PurchaseType.RECHARGE
    product: Optional[Dict[str, Any]] = None
    qr_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class AppliedOrder(BaseModel):
    order_id: str
    payment_id: str
    phone_number: str
    purchase_type: PurchaseType
    amount: Decimal  # major units
    result: Dict[str, Any]
    applied_at: datetime = Field(default_factory=utcnow)
