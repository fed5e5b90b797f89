"""
storefront/services/payment_service.py

Purpose: Payment order creation and verification

- Creates gateway orders carrying the phone number and purchase intent in notes
- Captures the order intent server-side
- Authenticates checkout callbacks with the HMAC signature
- Applies the top-up or product purchase exactly once per order
"""

import time
from decimal import Decimal
from typing import Any, Dict, Optional

from storefront.core.exceptions import (
    InvalidSignatureError,
    PaymentGatewayError,
    ResourceNotFoundError,
    ValidationError,
)
from storefront.core.logging import get_logger, LogContext
from storefront.core.security import verify_payment_signature
from storefront.db.store import Store
from storefront.models.order import AppliedOrder, OrderIntent, PurchaseType
from storefront.models.user import UserRecord
from storefront.services.razorpay_service import RazorpayClient
from storefront.utils.validation_utils import (
    clean_text,
    from_minor_units,
    parse_positive_amount,
    to_minor_units,
)

logger = get_logger(__name__)


def _order_notes(order: Dict[str, Any]) -> Dict[str, Any]:
    # Razorpay returns an empty list when an order has no notes
    notes = order.get("notes")
    return notes if isinstance(notes, dict) else {}


class PaymentService:

    def __init__(self, store: Store, gateway: RazorpayClient, key_secret: str):
        self.store = store
        self.gateway = gateway
        self.key_secret = key_secret

    async def create_order(
        self,
        amount: Any,
        currency: Optional[str],
        phone_number: Optional[str],
        qr_id: Optional[str] = None,
        notes: Optional[Dict[str, Any]] = None,
        product: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Creates a gateway order for a top-up or a product purchase.

        Args:
            amount: Amount in major units (number or numeric string)
            currency: ISO currency code
            phone_number: Paying user, recovered from the order notes on verification
            qr_id: Recharge page reference, stored in notes
            notes: Extra notes; purchaseType="product" marks a product order
            product: Product payload for product orders, captured server-side

        Returns:
            The gateway order object

        Raises:
            ValidationError: Before any gateway call, on missing or invalid input
            PaymentGatewayError: If the gateway rejects the order
        """
        currency = clean_text(currency)
        phone_number = clean_text(phone_number)

        if not currency or not phone_number or amount is None:
            raise ValidationError("Amount, currency, and phone number are all required.")

        numeric_amount = parse_positive_amount(amount)
        if numeric_amount is None:
            raise ValidationError("A valid, positive amount is required.")

        order_notes = dict(notes or {})
        order_notes["phoneNumber"] = phone_number
        if qr_id:
            order_notes["qrId"] = qr_id

        purchase_type = (
            PurchaseType.PRODUCT
            if order_notes.get("purchaseType") == PurchaseType.PRODUCT.value
            else PurchaseType.RECHARGE
        )

        amount_minor = to_minor_units(numeric_amount)

        with LogContext(phone_number=phone_number):
            order = await self.gateway.create_order(
                amount=amount_minor,
                currency=currency,
                receipt=f"receipt_order_{int(time.time() * 1000)}",
                notes=order_notes,
            )

            intent = OrderIntent(
                order_id=order["id"],
                phone_number=phone_number,
                amount=amount_minor,
                currency=currency,
                purchase_type=purchase_type,
                product=dict(product) if purchase_type is PurchaseType.PRODUCT and product else None,
                qr_id=qr_id,
            )
            async with self.store.write_lock():
                await self.store.save_order_intent(intent)

            logger.info(f"Order {intent.order_id} created ({purchase_type.value}, {amount_minor} minor units)")

        return order

    async def verify_payment(
        self,
        order_id: Optional[str],
        payment_id: Optional[str],
        signature: Optional[str],
        product: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Verifies a checkout callback and applies the payment.

        1. HMAC-SHA256 over "<order_id>|<payment_id>" must equal the signature
        2. An order that was already applied returns its original result
        3. The order is re-fetched from the gateway; its notes decide whose
           order it is and whether it buys a product or tops up balance

        Returns:
            Response body: {status, orderId, newBalance} or {status, message, orderId, newBalance}
        """
        if not order_id or not payment_id or not signature:
            raise ValidationError("Missing payment details.")

        with LogContext(order_id=order_id, payment_id=payment_id):
            if not verify_payment_signature(order_id, payment_id, signature, self.key_secret):
                logger.error("Payment verification failed: Invalid signature.")
                raise InvalidSignatureError("Invalid signature.")

            applied = await self.store.get_applied_order(order_id)
            if applied:
                logger.info("Order already applied, returning previous result")
                return applied.result

            try:
                order = await self.gateway.fetch_order(order_id)
            except PaymentGatewayError as e:
                logger.error(f"Error fetching order from gateway: {e.message}")
                raise PaymentGatewayError(
                    "Could not update user balance.",
                    status_code=500,
                    details={"description": e.message},
                ) from e

            notes = _order_notes(order)
            intent = await self.store.get_order_intent(order_id)
            phone_number = notes.get("phoneNumber") or (intent.phone_number if intent else None)

            async with self.store.write_lock():
                # A concurrent call may have applied it while we were fetching
                applied = await self.store.get_applied_order(order_id)
                if applied:
                    logger.info("Order already applied, returning previous result")
                    return applied.result

                user = await self.store.get_user_by_phone(phone_number) if phone_number else None
                if not user:
                    logger.error(f"User not found for phone number: {phone_number} from order {order_id}")
                    raise ResourceNotFoundError("User associated with order not found.")

                order_product = self._resolve_product(order, notes, intent, product)
                if order_product is not None:
                    result = self._apply_product(user, order_id, order_product)
                    purchase_type = PurchaseType.PRODUCT
                else:
                    result = self._apply_top_up(user, order_id, order)
                    purchase_type = PurchaseType.RECHARGE

                await self.store.apply_order(
                    user,
                    AppliedOrder(
                        order_id=order_id,
                        payment_id=payment_id,
                        phone_number=user.phone_number,
                        purchase_type=purchase_type,
                        amount=from_minor_units(order.get("amount", 0)),
                        result=result,
                    ),
                )

            logger.info(f"Payment applied ({purchase_type.value}). New balance: {user.balance}")
            return result

    def _resolve_product(
        self,
        order: Dict[str, Any],
        notes: Dict[str, Any],
        intent: Optional[OrderIntent],
        client_product: Optional[Dict[str, Any]],
    ) -> Optional[Dict[str, Any]]:
        """
        Product to append for a product order, or None to treat the order as a top-up.

        The payload captured at order creation wins over the client's copy;
        a client copy is only accepted when its price matches the paid amount.
        """
        if notes.get("purchaseType") != PurchaseType.PRODUCT.value:
            return None

        if intent and intent.product:
            return intent.product

        if not isinstance(client_product, dict) or not client_product:
            return None

        price = parse_positive_amount(client_product.get("price"))
        if price is None or to_minor_units(price) != int(order.get("amount", 0)):
            logger.warning(
                f"Product price {client_product.get('price')!r} does not match paid amount {order.get('amount')}"
            )
            raise ValidationError("Product data does not match the paid order.")

        return dict(client_product)

    @staticmethod
    def _apply_product(user: UserRecord, order_id: str, product: Dict[str, Any]) -> Dict[str, Any]:
        user.purchases.append(product)
        logger.info(f"Product purchase successful. Product: {product.get('name')}")
        return {
            "status": "success",
            "message": "Product purchased successfully.",
            "orderId": order_id,
            "newBalance": float(user.balance),
        }

    @staticmethod
    def _apply_top_up(user: UserRecord, order_id: str, order: Dict[str, Any]) -> Dict[str, Any]:
        amount_paid: Decimal = from_minor_units(order.get("amount", 0))
        user.balance += amount_paid
        return {
            "status": "success",
            "orderId": order_id,
            "newBalance": float(user.balance),
        }
