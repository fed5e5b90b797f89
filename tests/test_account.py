from conftest import PASSWORD, balance_of, register, top_up

PHONE = "9876543210"


def update_profile(client, current=PASSWORD, new="newpassword1", phone=PHONE):
    return client.put(
        "/api/update-profile",
        json={"phoneNumber": phone, "currentPassword": current, "newPassword": new},
    )


def buy(client, product, phone=PHONE):
    return client.post("/api/buy-product", json={"phoneNumber": phone, "productData": product})


def test_update_profile_changes_password(client):
    register(client)

    response = update_profile(client)
    assert response.status_code == 200

    old = client.post("/login", json={"phoneNumber": PHONE, "password": PASSWORD})
    new = client.post("/login", json={"phoneNumber": PHONE, "password": "newpassword1"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_update_profile_rejects_short_password(client):
    register(client)

    response = update_profile(client, new="short")
    assert response.status_code == 400


def test_update_profile_wrong_current_password(client):
    register(client)

    response = update_profile(client, current="not-the-password")
    assert response.status_code == 401
    assert response.json()["message"] == "Incorrect current password."


def test_update_profile_unknown_user(client):
    response = update_profile(client, phone="0000000000")
    assert response.status_code == 404


def test_get_hashrate_requires_phone(client):
    response = client.get("/api/get-hashrate")
    assert response.status_code == 400


def test_get_hashrate_unknown_user(client):
    response = client.get("/api/get-hashrate", params={"phoneNumber": "0000000000"})
    assert response.status_code == 404


def test_get_hashrate_empty_for_new_user(client):
    register(client)

    response = client.get("/api/get-hashrate", params={"phoneNumber": PHONE})
    assert response.status_code == 200
    assert response.json() == {"purchases": []}


def test_buy_product_with_insufficient_balance_keeps_balance(client):
    register(client)
    top_up(client, amount=100)

    response = buy(client, {"name": "Miner S1", "price": 150})
    assert response.status_code == 402
    assert response.json()["code"] == "INSUFFICIENT_BALANCE"
    assert balance_of(client) == 100.0

    purchases = client.get("/api/get-hashrate", params={"phoneNumber": PHONE}).json()["purchases"]
    assert purchases == []


def test_buy_product_deducts_and_records(client):
    register(client)
    top_up(client, amount=500)

    response = buy(client, {"name": "Miner S1", "price": "199.50"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "newBalance": 300.5}

    purchases = client.get("/api/get-hashrate", params={"phoneNumber": PHONE}).json()["purchases"]
    assert purchases == [{"name": "Miner S1", "price": "199.50"}]


def test_buy_product_exact_balance(client):
    register(client)
    top_up(client, amount=250)

    response = buy(client, {"name": "Miner S2", "price": 250})
    assert response.status_code == 200
    assert response.json()["newBalance"] == 0.0


def test_buy_product_rejects_invalid_price(client):
    register(client)

    for price in (0, -5, "abc", None, 1e30):
        response = buy(client, {"name": "Miner", "price": price})
        assert response.status_code == 400


def test_buy_product_requires_product_data(client):
    register(client)

    response = client.post("/api/buy-product", json={"phoneNumber": PHONE})
    assert response.status_code == 400


def test_buy_product_unknown_user(client):
    response = buy(client, {"name": "Miner", "price": 10}, phone="0000000000")
    assert response.status_code == 404
