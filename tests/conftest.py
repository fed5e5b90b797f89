import itertools

import pytest
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.core.exceptions import PaymentGatewayError
from storefront.core.security import compute_payment_signature
from storefront.db.file_store import JsonFileStore
from storefront.main import create_app

KEY_ID = "rzp_test_key"
KEY_SECRET = "test_secret"
PASSWORD = "password123"


class FakeGateway:
    """
    In-memory stand-in for RazorpayClient.
    """

    def __init__(self):
        self.orders = {}
        self.created = []
        self.create_error = None
        self.fetch_error = None
        self.closed = False
        self._ids = itertools.count(1)

    async def create_order(self, amount, currency, receipt, notes=None):
        if self.create_error:
            raise self.create_error
        order = {
            "id": f"order_test{next(self._ids)}",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes or [],
            "status": "created",
        }
        self.orders[order["id"]] = order
        self.created.append(order)
        return order

    async def fetch_order(self, order_id):
        if self.fetch_error:
            raise self.fetch_error
        if order_id not in self.orders:
            raise PaymentGatewayError("The id provided does not exist", status_code=400)
        return self.orders[order_id]

    async def close(self):
        self.closed = True


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        RAZORPAY_KEY_ID=KEY_ID,
        RAZORPAY_KEY_SECRET=KEY_SECRET,
        USERS_FILE=str(tmp_path / "users.json"),
        STATIC_DIR=None,
    )


@pytest.fixture
def store(settings):
    return JsonFileStore(settings.USERS_FILE)


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(settings, store, gateway):
    return create_app(settings=settings, store=store, gateway=gateway)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def sign(order_id, payment_id, secret=KEY_SECRET):
    return compute_payment_signature(order_id, payment_id, secret)


def register(client, phone="9876543210", password=PASSWORD, invitation_code="FW2024"):
    return client.post(
        "/register",
        json={"phoneNumber": phone, "password": password, "invitationCode": invitation_code},
    )


def create_order(client, phone="9876543210", amount=500, **extra):
    payload = {"amount": amount, "currency": "INR", "phoneNumber": phone}
    payload.update(extra)
    return client.post("/create-order", json=payload)


def verify(client, order_id, payment_id="pay_test1", signature=None, **extra):
    payload = {
        "razorpay_order_id": order_id,
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature if signature is not None else sign(order_id, payment_id),
    }
    payload.update(extra)
    return client.post("/verify-payment", json=payload)


def top_up(client, phone="9876543210", amount=500):
    order = create_order(client, phone=phone, amount=amount).json()
    response = verify(client, order["id"], payment_id=f"pay_{order['id']}")
    assert response.status_code == 200
    return response.json()


def balance_of(client, phone="9876543210"):
    response = client.post("/login", json={"phoneNumber": phone, "password": PASSWORD})
    return response.json()["user"]["balance"]
