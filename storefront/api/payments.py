"""
storefront/api/payments.py

Purpose: Razorpay checkout endpoints

- Publishes the public key id to the frontend
- Creates orders before checkout
- Verifies the checkout callback and applies the payment
"""

from fastapi import APIRouter, Depends

from storefront.api.deps import get_payment_service, get_settings
from storefront.core.config import Settings
from storefront.schemas.payment import CreateOrderRequest, KeyResponse, VerifyPaymentRequest
from storefront.services.payment_service import PaymentService

router = APIRouter(tags=["Payments"])


@router.get("/api/get-key", response_model=KeyResponse)
async def get_key(settings: Settings = Depends(get_settings)):
    return {"key": settings.RAZORPAY_KEY_ID}


@router.post("/create-order")
async def create_order(body: CreateOrderRequest, payments: PaymentService = Depends(get_payment_service)):
    """
    Returns the gateway order object as-is; the frontend hands its id to checkout.
    """
    return await payments.create_order(
        amount=body.amount,
        currency=body.currency,
        phone_number=body.phone_number,
        qr_id=body.qr_id,
        notes=body.notes,
        product=body.product_data,
    )


@router.post("/verify-payment")
async def verify_payment(body: VerifyPaymentRequest, payments: PaymentService = Depends(get_payment_service)):
    return await payments.verify_payment(
        order_id=body.razorpay_order_id,
        payment_id=body.razorpay_payment_id,
        signature=body.razorpay_signature,
        product=body.product_data,
    )
