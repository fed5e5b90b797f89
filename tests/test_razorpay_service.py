import asyncio
import base64
import json

import httpx
import pytest

from storefront.core.exceptions import PaymentGatewayError
from storefront.services.razorpay_service import RazorpayClient

BASE_URL = "https://api.razorpay.test/v1"


def make_client(handler, max_retries=1):
    return RazorpayClient(
        key_id="rzp_test_key",
        key_secret="test_secret",
        base_url=BASE_URL,
        timeout=1.0,
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


def run_with(client, coro_factory):
    async def scenario():
        try:
            return await coro_factory(client)
        finally:
            await client.close()

    return asyncio.run(scenario())


def test_create_order_posts_payload_with_basic_auth():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "order_1", "amount": 1000, "notes": seen["body"]["notes"]})

    client = make_client(handler)
    order = run_with(
        client,
        lambda c: c.create_order(1000, "INR", "receipt_order_1", {"phoneNumber": "9876543210"}),
    )

    assert order["id"] == "order_1"
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/orders"
    assert seen["auth"] == "Basic " + base64.b64encode(b"rzp_test_key:test_secret").decode()
    assert seen["body"] == {
        "amount": 1000,
        "currency": "INR",
        "receipt": "receipt_order_1",
        "notes": {"phoneNumber": "9876543210"},
    }


def test_fetch_order():
    def handler(request):
        assert request.url.path == "/v1/orders/order_1"
        return httpx.Response(200, json={"id": "order_1", "amount": 500, "notes": {"phoneNumber": "1"}})

    order = run_with(make_client(handler), lambda c: c.fetch_order("order_1"))
    assert order["notes"]["phoneNumber"] == "1"


def test_gateway_error_description_is_surfaced():
    def handler(request):
        return httpx.Response(
            400,
            json={"error": {"code": "BAD_REQUEST_ERROR", "description": "The amount must be atleast INR 1.00"}},
        )

    with pytest.raises(PaymentGatewayError) as exc_info:
        run_with(make_client(handler), lambda c: c.create_order(10, "INR", "r"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "The amount must be atleast INR 1.00"


def test_gateway_error_without_description_is_generic():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(PaymentGatewayError) as exc_info:
        run_with(make_client(handler), lambda c: c.fetch_order("order_1"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "An unexpected error occurred."


def test_transient_failure_is_retried_once():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, json={"id": "order_1"})

    order = run_with(make_client(handler), lambda c: c.fetch_order("order_1"))
    assert order == {"id": "order_1"}
    assert len(calls) == 2


def test_retries_exhausted_raise_gateway_error():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(PaymentGatewayError) as exc_info:
        run_with(make_client(handler), lambda c: c.fetch_order("order_1"))

    assert len(calls) == 2
    assert exc_info.value.status_code == 500
