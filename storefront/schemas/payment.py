"""
storefront/schemas/payment.py

Pydantic models for order creation and payment verification.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Union


class CreateOrderRequest(BaseModel):
    amount: Optional[Union[int, float, str]] = None
    currency: Optional[str] = None
    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    qr_id: Optional[str] = Field(default=None, alias="qrId")
    notes: Optional[Dict[str, Any]] = None
    product_data: Optional[Dict[str, Any]] = Field(default=None, alias="productData")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "amount": 499,
                "currency": "INR",
                "phoneNumber": "9876543210",
                "notes": {"purchaseType": "product", "productName": "Miner S1"},
                "productData": {"name": "Miner S1", "price": 499}
            }
        }


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: Optional[str] = None
    razorpay_payment_id: Optional[str] = None
    razorpay_signature: Optional[str] = None
    product_data: Optional[Dict[str, Any]] = Field(default=None, alias="productData")

    class Config:
        populate_by_name = True


class KeyResponse(BaseModel):
    key: Optional[str]
