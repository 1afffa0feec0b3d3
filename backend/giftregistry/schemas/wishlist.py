from datetime import date, datetime

from giftregistry.schemas.base import CamelModel
from giftregistry.schemas.item import ItemRead
from giftregistry.schemas.theme import ThemeRead


class WishlistCreate(CamelModel):
    title: str = ""
    description: str | None = None
    event_date: date | None = None
    theme_id: int | None = None


class WishlistUpdate(CamelModel):
    title: str = ""
    description: str | None = None
    event_date: date | None = None
    theme_id: int | None = None


class WishlistSummary(CamelModel):
    id: int
    user_id: int
    title: str
    description: str | None = None
    event_date: date | None = None
    theme_id: int
    theme: ThemeRead | None = None
    share_token: str
    item_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WishlistDetail(WishlistSummary):
    items: list[ItemRead] = []
    owner_name: str | None = None
    is_owner: bool = False
