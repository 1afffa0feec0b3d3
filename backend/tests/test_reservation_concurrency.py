import threading
from pathlib import Path

from giftregistry.container import build_container
from giftregistry.core.config import Settings
from giftregistry.core.errors import ValidationError
from giftregistry.db.session import create_db_engine, create_session_factory, init_db
from giftregistry.models import WishlistItem
from giftregistry.schemas.item import ItemCreate
from giftregistry.schemas.wishlist import WishlistCreate


WORKERS = 8


def test_concurrent_reservations_have_exactly_one_winner(tmp_path: Path) -> None:
    settings = Settings(
        _env_file=None,
        database_url_override=f"sqlite:///{tmp_path / 'registry.db'}",
        static_root=str(tmp_path),
        upload_dir=str(tmp_path / "uploads"),
    )
    engine = create_db_engine(settings.database_url, connect_args={"timeout": 30})
    init_db(engine)
    container = build_container(settings, create_session_factory(engine))

    owner = container.users.create_user(login="owner", email="owner@example.com", username="Owner", password="secret1")
    guests = [
        container.users.create_user(
            login=f"guest{n}", email=f"guest{n}@example.com", username=f"Guest{n}", password="secret1"
        )
        for n in range(WORKERS)
    ]
    wishlist = container.wishlists.create(owner.id, WishlistCreate(title="Birthday"))
    item = container.items.create_item(owner.id, ItemCreate(wishlist_id=wishlist.id, title="Bicycle"))

    barrier = threading.Barrier(WORKERS)
    winners: list[int] = []
    losers: list[int] = []
    unexpected: list[BaseException] = []
    lock = threading.Lock()

    def attempt(user_id: int) -> None:
        barrier.wait()
        try:
            container.items.reserve_item(item.id, user_id)
        except ValidationError:
            with lock:
                losers.append(user_id)
        except Exception as exc:
            with lock:
                unexpected.append(exc)
        else:
            with lock:
                winners.append(user_id)

    threads = [threading.Thread(target=attempt, args=(guest.id,)) for guest in guests]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    try:
        assert unexpected == []
        assert len(winners) == 1
        assert len(losers) == WORKERS - 1
        with container.session_factory() as db:
            stored = db.get(WishlistItem, item.id)
            assert stored.is_reserved is True
            assert stored.reserved_by_user_id == winners[0]
    finally:
        engine.dispose()
