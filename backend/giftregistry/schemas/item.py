from datetime import datetime

from giftregistry.schemas.base import CamelModel, EntityId
from giftregistry.schemas.link import LinkCreate, LinkRead


class ItemCreate(CamelModel):
    wishlist_id: EntityId
    title: str = ""
    description: str | None = None
    price: float | None = None
    image_url: str | None = None
    image_data: str | None = None
    desire_level: int = 1
    comment: str | None = None
    links: list[LinkCreate] | None = None


class ItemUpdate(CamelModel):
    title: str = ""
    description: str | None = None
    price: float | None = None
    image_url: str | None = None
    image_data: str | None = None
    desire_level: int = 1
    comment: str | None = None
    links: list[LinkCreate] | None = None


class ItemRead(CamelModel):
    id: int
    wishlist_id: int
    title: str
    description: str | None = None
    price: float | None = None
    image_url: str | None = None
    desire_level: int
    comment: str | None = None
    is_reserved: bool
    reserved_by_user_id: int | None = None
    created_at: datetime | None = None
    links: list[LinkRead] = []
