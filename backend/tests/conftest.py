from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from giftregistry.container import Container
from giftregistry.core.config import Settings
from giftregistry.db.session import create_db_engine
from giftregistry.main import create_app


PASSWORD = "secret1"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    static_root = tmp_path / "static"
    static_root.mkdir()
    (static_root / "index.html").write_text("<h1>index shell</h1>")
    (static_root / "public-wishlist.html").write_text("<h1>public wishlist shell</h1>")
    (static_root / "css").mkdir()
    (static_root / "css" / "site.css").write_text("body { color: black; }")
    return Settings(
        _env_file=None,
        database_url_override="sqlite://",
        static_root=str(static_root),
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    engine = create_db_engine(settings.database_url, poolclass=StaticPool)
    return create_app(settings, engine)


@pytest.fixture
def container(app: FastAPI) -> Container:
    return app.state.container


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register a user and return its id, session token and Bearer headers."""

    def _register(login: str, username: str | None = None, email: str | None = None) -> dict[str, Any]:
        response = client.post(
            "/api/auth/register",
            json={
                "login": login,
                "password": PASSWORD,
                "confirmPassword": PASSWORD,
                "username": username or login.capitalize(),
                "email": email or f"{login}@example.com",
            },
        )
        assert response.status_code == 200, response.text
        client.cookies.clear()
        data = response.json()
        token = data["sessionId"]
        return {
            "id": data["user"]["id"],
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
        }

    return _register


@pytest.fixture
def make_wishlist(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _make_wishlist(headers: dict[str, str], title: str = "Birthday", **extra: Any) -> dict[str, Any]:
        response = client.post("/api/wishlists", json={"title": title, **extra}, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()["wishlist"]

    return _make_wishlist


@pytest.fixture
def make_item(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _make_item(headers: dict[str, str], wishlist_id: int, title: str = "Bicycle", **extra: Any) -> dict[str, Any]:
        response = client.post(
            "/api/items",
            json={"wishlistId": wishlist_id, "title": title, **extra},
            headers=headers,
        )
        assert response.status_code == 200, response.text
        return response.json()["item"]

    return _make_item
