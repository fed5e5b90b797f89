"""
storefront/services/razorpay_service.py

Purpose: Razorpay Orders API client

- Creates orders (amount in minor units, notes carried across the round trip)
- Fetches orders back by id
- Bounded timeout, one retry on transient network failures
- Gateway error descriptions surfaced as PaymentGatewayError
"""

import httpx
from typing import Dict, Any, Optional

from storefront.core.config import Settings
from storefront.core.exceptions import PaymentGatewayError
from storefront.core.logging import get_logger

logger = get_logger(__name__)


class RazorpayClient:
    """
    Thin async wrapper over the Razorpay REST API.
    """

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 10.0,
        max_retries: int = 1,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self.max_retries = max_retries
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=(key_id, key_secret),
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "RazorpayClient":
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_BASE_URL,
            timeout=settings.GATEWAY_TIMEOUT_SECONDS,
            max_retries=settings.GATEWAY_MAX_RETRIES,
        )

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
        notes: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Creates a gateway order.

        Args:
            amount: Amount in the currency's smallest unit (e.g. paise)
            currency: ISO currency code
            receipt: Our receipt reference
            notes: Metadata echoed back by fetch_order()

        Returns:
            The gateway order object
        """
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or {},
        }
        order = await self._request("POST", "/orders", json=payload)
        logger.info(f"Razorpay order created: {order.get('id')}")
        return order

    async def fetch_order(self, order_id: str) -> Dict[str, Any]:
        """
        Fetches an order, including the notes set at creation time.
        """
        return await self._request("GET", f"/orders/{order_id}")

    async def close(self):
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        attempts = self.max_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.request(method, path, **kwargs)
                break
            except httpx.TransportError as e:
                logger.warning(
                    f"Razorpay {method} {path} failed (attempt {attempt}/{attempts}): {e!r}"
                )
                if attempt == attempts:
                    logger.error(f"Razorpay unreachable after {attempts} attempts")
                    raise PaymentGatewayError(
                        "Payment gateway is unavailable. Please try again.",
                        status_code=500,
                    ) from e

        if response.is_success:
            return response.json()

        # Full detail stays in the server log
        logger.error(
            f"Razorpay {method} {path} returned {response.status_code}: {response.text}"
        )

        description = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            description = body["error"].get("description")

        if description:
            raise PaymentGatewayError(
                description,
                status_code=response.status_code or 400,
                details={"gateway_status": response.status_code},
            )

        raise PaymentGatewayError(status_code=500, details={"gateway_status": response.status_code})
