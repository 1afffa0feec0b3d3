from fastapi.testclient import TestClient


def test_full_wishlist_flow(client: TestClient) -> None:
    register_response = client.post(
        "/api/auth/register",
        json={
            "login": "owner",
            "password": "password123",
            "confirmPassword": "password123",
            "username": "Owner",
            "email": "user@example.com",
        },
    )
    assert register_response.status_code == 200
    headers = {"Authorization": f"Bearer {register_response.json()['sessionId']}"}
    client.cookies.clear()

    check_response = client.get("/api/auth/check", headers=headers)
    assert check_response.status_code == 200
    assert check_response.json()["username"] == "Owner"

    friend_register_response = client.post(
        "/api/auth/register",
        json={
            "login": "friend",
            "password": "password123",
            "confirmPassword": "password123",
            "username": "Friend",
            "email": "friend@example.com",
        },
    )
    assert friend_register_response.status_code == 200
    friend_id = friend_register_response.json()["user"]["id"]
    friend_headers = {"Authorization": f"Bearer {friend_register_response.json()['sessionId']}"}
    client.cookies.clear()

    wishlist_response = client.post(
        "/api/wishlists",
        json={"title": "Birthday", "description": "Party gifts", "eventDate": "2026-12-01"},
        headers=headers,
    )
    assert wishlist_response.status_code == 200
    wishlist = wishlist_response.json()["wishlist"]
    wishlist_id = wishlist["id"]

    suggestions_response = client.get("/api/links/ai/Camera")
    assert suggestions_response.status_code == 200
    suggestion = suggestions_response.json()["links"][0]

    item_response = client.post(
        "/api/items",
        json={
            "wishlistId": wishlist_id,
            "title": "Camera",
            "price": 1000.0,
            "desireLevel": 3,
            "links": [suggestion, {"url": "https://shop.example/camera", "isSelected": True}],
        },
        headers=headers,
    )
    assert item_response.status_code == 200
    item = item_response.json()["item"]
    item_id = item["id"]
    assert item["links"][0]["isSelected"] is True
    assert item["links"][1]["isSelected"] is False

    public_wishlist_response = client.get(f"/api/public/wishlists/{wishlist['shareToken']}")
    assert public_wishlist_response.status_code == 200
    public_items = public_wishlist_response.json()["wishlist"]["items"]
    assert len(public_items) == 1

    save_response = client.post(
        "/api/friend-wishlists/save-from-url",
        json={"url": f"http://testserver/wishlist/{wishlist['shareToken']}", "friendName": "Owner"},
        headers=friend_headers,
    )
    assert save_response.status_code == 200

    reserve_response = client.post(f"/api/items/{item_id}/reserve", headers=friend_headers)
    assert reserve_response.status_code == 200

    friend_view_response = client.get(
        f"/api/friend-wishlists/{save_response.json()['friendWishlist']['id']}",
        headers=friend_headers,
    )
    assert friend_view_response.status_code == 200
    assert friend_view_response.json()["wishlist"]["items"][0]["reservedByUserId"] == friend_id

    owner_wishlist_response = client.get(f"/api/wishlists/{wishlist_id}", headers=headers)
    assert owner_wishlist_response.status_code == 200
    owner_items = owner_wishlist_response.json()["wishlist"]["items"]
    assert len(owner_items) == 1
    owner_item = owner_items[0]
    assert owner_item["isReserved"] is True
    assert owner_item["reservedByUserId"] is None

    stats_response = client.get("/api/user/stats", headers=friend_headers)
    assert stats_response.json()["stats"]["reservedItemsCount"] == 1

    logout_response = client.post("/api/auth/logout", headers=headers)
    assert logout_response.status_code == 200
    assert client.get("/api/wishlists", headers=headers).status_code == 401


def test_wishlists_are_isolated_between_users(client: TestClient, register, make_wishlist) -> None:
    user_a = register("user_a")
    make_wishlist(user_a["headers"], title="Private A")

    list_response_a = client.get("/api/wishlists", headers=user_a["headers"])
    assert list_response_a.status_code == 200
    assert any(w["title"] == "Private A" for w in list_response_a.json()["wishlists"])

    user_b = register("user_b")
    list_response_b = client.get("/api/wishlists", headers=user_b["headers"])
    assert list_response_b.status_code == 200
    assert all(w["title"] != "Private A" for w in list_response_b.json()["wishlists"])


def test_register_requires_non_empty_name(client: TestClient) -> None:
    response = client.post(
        "/api/auth/register",
        json={
            "login": "noname",
            "password": "password123",
            "confirmPassword": "password123",
            "username": "",
            "email": "noname@example.com",
        },
    )
    assert response.status_code == 400
