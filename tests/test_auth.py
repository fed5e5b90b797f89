import json

from conftest import PASSWORD, register


def test_register_creates_user(client, store):
    response = register(client)
    assert response.status_code == 201
    assert response.json()["message"] == "User registered successfully! Please log in."


def test_register_same_phone_twice_conflicts(client):
    assert register(client).status_code == 201

    response = register(client, password="anotherpass")
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"


def test_register_rejects_short_password(client):
    response = register(client, password="short7!")
    assert response.status_code == 400
    assert "at least 8 characters" in response.json()["message"]


def test_register_requires_all_fields(client):
    response = client.post("/register", json={"phoneNumber": "9876543210", "password": PASSWORD})
    assert response.status_code == 400
    assert response.json()["message"] == "All fields are required."


def test_registered_ids_are_sequential(client, store):
    register(client, phone="1111111111")
    register(client, phone="2222222222")

    with open(store.path, encoding="utf-8") as handle:
        users = json.load(handle)["users"]

    assert [user["id"] for user in users] == [1, 2]


def test_password_is_not_stored_in_clear(client, store):
    register(client)

    content = store.path.read_text(encoding="utf-8")
    assert PASSWORD not in content


def test_login_returns_public_user_view(client):
    register(client)

    response = client.post("/login", json={"phoneNumber": "9876543210", "password": PASSWORD})
    assert response.status_code == 200
    data = response.json()
    assert data["user"] == {"phoneNumber": "9876543210", "balance": 0.0}
    assert "password" not in response.text.lower()


def test_login_wrong_password(client):
    register(client)

    response = client.post("/login", json={"phoneNumber": "9876543210", "password": PASSWORD + "x"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid phone number or password."


def test_login_unknown_phone(client):
    response = client.post("/login", json={"phoneNumber": "0000000000", "password": PASSWORD})
    assert response.status_code == 401


def test_login_missing_fields(client):
    response = client.post("/login", json={"phoneNumber": "9876543210"})
    assert response.status_code == 400


def test_logout_is_stateless(client):
    response = client.post("/logout")
    assert response.status_code == 200
    assert response.json() == {"message": "Logout successful."}
