import asyncio
import json
from decimal import Decimal

import pytest

from storefront.core.exceptions import ConflictError
from storefront.db.file_store import JsonFileStore
from storefront.models.order import AppliedOrder, OrderIntent, PurchaseType


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def connected_store(tmp_path):
    store = JsonFileStore(tmp_path / "data" / "users.json")
    run(store.connect())
    return store


def test_connect_creates_empty_store_file(connected_store):
    assert connected_store.path.exists()
    assert json.loads(connected_store.path.read_text()) == {
        "users": [],
        "order_intents": [],
        "applied_orders": [],
    }


def test_users_survive_reload(connected_store):
    run(connected_store.create_user("1111111111", "hash-a", "INV1"))
    user = run(connected_store.create_user("2222222222", "hash-b", "INV2"))
    user.balance = Decimal("12.50")
    user.purchases.append({"name": "Miner S1", "price": 10})
    run(connected_store.save_user(user))

    reloaded = JsonFileStore(connected_store.path)
    run(reloaded.connect())

    users = run(reloaded.list_users())
    assert [u.id for u in users] == [1, 2]
    assert users[1].balance == Decimal("12.50")
    assert users[1].purchases == [{"name": "Miner S1", "price": 10}]


def test_duplicate_phone_number_conflicts(connected_store):
    run(connected_store.create_user("1111111111", "hash", "INV"))

    with pytest.raises(ConflictError):
        run(connected_store.create_user("1111111111", "hash", "INV"))


def test_returned_records_are_copies(connected_store):
    run(connected_store.create_user("1111111111", "hash", "INV"))

    user = run(connected_store.get_user_by_phone("1111111111"))
    user.balance = Decimal("1000")

    assert run(connected_store.get_user_by_phone("1111111111")).balance == Decimal("0")


def test_failed_write_leaves_memory_and_file_unchanged(connected_store, monkeypatch):
    run(connected_store.create_user("1111111111", "hash", "INV"))
    before = connected_store.path.read_text()

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("storefront.db.file_store.os.replace", broken_replace)

    user = run(connected_store.get_user_by_phone("1111111111"))
    user.balance = Decimal("50")
    with pytest.raises(OSError):
        run(connected_store.save_user(user))

    assert run(connected_store.get_user_by_phone("1111111111")).balance == Decimal("0")
    assert connected_store.path.read_text() == before
    assert [p.name for p in connected_store.path.parent.iterdir()] == ["users.json"]


def test_bare_user_list_file_is_loaded(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(json.dumps([
        {
            "id": 1,
            "phone_number": "1111111111",
            "password_hash": "hash",
            "invitation_code": "INV",
            "balance": 5,
            "purchases": [],
        }
    ]))

    store = JsonFileStore(path)
    run(store.connect())

    assert run(store.get_user_by_phone("1111111111")).balance == Decimal("5")


@pytest.mark.parametrize(
    "content",
    ["{not json", "null", "42", "\"x\"", "{\"users\": null}", "{\"users\": {}}", "[42]"],
)
def test_corrupted_file_starts_empty(tmp_path, content):
    path = tmp_path / "users.json"
    path.write_text(content)

    store = JsonFileStore(path)
    run(store.connect())

    assert run(store.list_users()) == []


def test_order_intents_and_ledger(connected_store):
    user = run(connected_store.create_user("1111111111", "hash", "INV"))
    intent = OrderIntent(order_id="order_1", phone_number=user.phone_number, amount=1000, currency="INR")
    run(connected_store.save_order_intent(intent))
    assert run(connected_store.get_order_intent("order_1")).amount == 1000

    user.balance += Decimal("10")
    applied = AppliedOrder(
        order_id="order_1",
        payment_id="pay_1",
        phone_number=user.phone_number,
        purchase_type=PurchaseType.RECHARGE,
        amount=Decimal("10"),
        result={"status": "success", "orderId": "order_1", "newBalance": 10.0},
    )
    run(connected_store.apply_order(user, applied))

    assert run(connected_store.get_order_intent("order_1")) is None
    assert json.loads(connected_store.path.read_text())["order_intents"] == []
    assert run(connected_store.get_applied_order("order_1")).result["newBalance"] == 10.0
    assert run(connected_store.get_user_by_phone("1111111111")).balance == Decimal("10")

    with pytest.raises(ConflictError):
        run(connected_store.apply_order(user, applied))
