from fastapi.testclient import TestClient


def test_profile_read_and_update(client: TestClient, register) -> None:
    alice = register("alice")

    profile = client.get("/api/user/profile", headers=alice["headers"])
    assert profile.status_code == 200
    assert profile.json()["user"]["login"] == "alice"
    assert profile.json()["user"]["email"] == "alice@example.com"
    assert "passwordHash" not in profile.json()["user"]

    updated = client.put(
        "/api/user/profile",
        json={"username": "Alice_L", "email": "Alice@Wonder.land", "phone": "+79991234567"},
        headers=alice["headers"],
    )
    assert updated.status_code == 200
    assert updated.json()["user"]["username"] == "Alice_L"
    assert updated.json()["user"]["email"] == "alice@wonder.land"
    assert updated.json()["user"]["phone"] == "+79991234567"


def test_profile_update_rejects_taken_email(client: TestClient, register) -> None:
    alice = register("alice")
    register("bob")

    response = client.put(
        "/api/user/profile",
        json={"username": "Alice", "email": "bob@example.com"},
        headers=alice["headers"],
    )

    assert response.status_code == 400
    assert response.json()["message"] == "A user with this email already exists"


def test_profile_requires_authentication(client: TestClient) -> None:
    assert client.get("/api/user/profile").status_code == 401
    assert client.get("/api/user/stats").status_code == 401


def test_stats(client: TestClient, register, make_wishlist, make_item) -> None:
    alice = register("alice")
    bob = register("bob")
    wishlist = make_wishlist(alice["headers"])
    make_item(alice["headers"], wishlist["id"])
    item = make_item(alice["headers"], wishlist["id"], title="Kite")
    client.post(f"/api/items/{item['id']}/reserve", headers=bob["headers"])

    alice_stats = client.get("/api/user/stats", headers=alice["headers"]).json()["stats"]
    bob_stats = client.get("/api/user/stats", headers=bob["headers"]).json()["stats"]

    assert alice_stats == {"wishlistsCount": 1, "itemsCount": 2, "reservedItemsCount": 0}
    assert bob_stats == {"wishlistsCount": 0, "itemsCount": 0, "reservedItemsCount": 1}


def test_delete_account_with_wrong_password_keeps_everything(client: TestClient, register) -> None:
    alice = register("alice")

    response = client.request(
        "DELETE",
        "/api/user/profile",
        json={"confirmPassword": "wrong-password1"},
        headers=alice["headers"],
    )

    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "Wrong password confirmation"}
    assert client.get("/api/auth/check", headers=alice["headers"]).status_code == 200
    login = client.post("/api/auth/login", json={"login": "alice", "password": "secret1"})
    assert login.status_code == 200


def test_delete_account_releases_reservations_and_sessions(
    client: TestClient, register, make_wishlist, make_item
) -> None:
    alice = register("alice")
    bob = register("bob")
    wishlist = make_wishlist(alice["headers"])
    item = make_item(alice["headers"], wishlist["id"])
    client.post(f"/api/items/{item['id']}/reserve", headers=bob["headers"])

    response = client.request(
        "DELETE",
        "/api/user/profile",
        json={"confirmPassword": "secret1"},
        headers=bob["headers"],
    )

    assert response.status_code == 200
    assert "1970" in response.headers["set-cookie"]
    assert client.get("/api/auth/check", headers=bob["headers"]).status_code == 401
    released = client.get(f"/api/items/{item['id']}", headers=alice["headers"]).json()["item"]
    assert released["isReserved"] is False
    failed_login = client.post("/api/auth/login", json={"login": "bob", "password": "secret1"})
    assert failed_login.status_code == 401
