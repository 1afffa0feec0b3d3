from fastapi.testclient import TestClient

from giftregistry.services.friends import share_token_from_url


def test_share_token_from_url() -> None:
    assert share_token_from_url("abc123") == "abc123"
    assert share_token_from_url("https://gifts.example/wishlist/abc123") == "abc123"
    assert share_token_from_url("https://gifts.example/wishlist/abc123/?from=chat") == "abc123"
    assert share_token_from_url("/wishlist/abc123") == "abc123"


def test_save_list_view_and_delete_friend_wishlist(
    client: TestClient, register, make_wishlist, make_item
) -> None:
    alice = register("alice")
    bob = register("bob")
    carol = register("carol")
    wishlist = make_wishlist(alice["headers"], title="Alice birthday")
    item = make_item(alice["headers"], wishlist["id"])
    client.post(f"/api/items/{item['id']}/reserve", headers=carol["headers"])

    added = client.post(
        "/api/friend-wishlists",
        json={"shareToken": wishlist["shareToken"], "friendName": "Alice"},
        headers=bob["headers"],
    )
    assert added.status_code == 200
    bookmark = added.json()["friendWishlist"]
    assert bookmark["friendName"] == "Alice"
    assert bookmark["wishlist"]["title"] == "Alice birthday"

    listing = client.get("/api/friend-wishlists", headers=bob["headers"]).json()["friendWishlists"]
    assert [entry["id"] for entry in listing] == [bookmark["id"]]

    shown = client.get(f"/api/friend-wishlists/{bookmark['id']}", headers=bob["headers"])
    assert shown.status_code == 200
    detail = shown.json()["wishlist"]
    assert detail["isOwner"] is False
    assert detail["items"][0]["reservedByUserId"] == carol["id"]

    assert client.get(f"/api/friend-wishlists/{bookmark['id']}", headers=carol["headers"]).status_code == 404
    assert client.delete(f"/api/friend-wishlists/{bookmark['id']}", headers=carol["headers"]).status_code == 403
    assert client.delete(f"/api/friend-wishlists/{bookmark['id']}", headers=bob["headers"]).status_code == 200
    assert client.delete(f"/api/friend-wishlists/{bookmark['id']}", headers=bob["headers"]).status_code == 404
    assert client.get("/api/friend-wishlists", headers=bob["headers"]).json()["friendWishlists"] == []


def test_friend_wishlist_rules(client: TestClient, register, make_wishlist) -> None:
    alice = register("alice")
    bob = register("bob")
    wishlist = make_wishlist(alice["headers"])
    payload = {"shareToken": wishlist["shareToken"], "friendName": "Alice"}

    own = client.post("/api/friend-wishlists", json=payload, headers=alice["headers"])
    first = client.post("/api/friend-wishlists", json=payload, headers=bob["headers"])
    duplicate = client.post("/api/friend-wishlists", json=payload, headers=bob["headers"])
    unknown = client.post(
        "/api/friend-wishlists",
        json={"shareToken": "nope", "friendName": "Alice"},
        headers=bob["headers"],
    )
    nameless = client.post(
        "/api/friend-wishlists",
        json={"shareToken": wishlist["shareToken"], "friendName": "  "},
        headers=bob["headers"],
    )

    assert own.status_code == 400
    assert own.json()["message"] == "You cannot save your own wishlist"
    assert first.status_code == 200
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "This wishlist is already saved"
    assert unknown.status_code == 404
    assert nameless.status_code == 400


def test_save_from_url_defaults_friend_name(client: TestClient, register, make_wishlist) -> None:
    alice = register("alice")
    bob = register("bob")
    wishlist = make_wishlist(alice["headers"])

    response = client.post(
        "/api/friend-wishlists/save-from-url",
        json={"url": f"http://testserver/wishlist/{wishlist['shareToken']}"},
        headers=bob["headers"],
    )

    assert response.status_code == 200
    assert response.json()["friendWishlist"]["friendName"] == "Friend"
    assert response.json()["friendWishlist"]["wishlistId"] == wishlist["id"]


def test_friend_wishlists_require_authentication(client: TestClient) -> None:
    assert client.get("/api/friend-wishlists").status_code == 401
    assert client.post("/api/friend-wishlists", json={}).status_code == 401
