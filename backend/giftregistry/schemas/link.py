from datetime import datetime

from pydantic import Field

from giftregistry.schemas.base import CamelModel, EntityId


class LinkCreate(CamelModel):
    url: str
    title: str | None = None
    price: float | None = None
    is_from_ai: bool = Field(default=False, alias="isFromAI")
    is_selected: bool = False


class ItemLinkCreate(LinkCreate):
    item_id: EntityId


class LinkUpdate(CamelModel):
    url: str | None = None
    title: str | None = None
    price: float | None = None
    is_selected: bool | None = None


class LinkRead(CamelModel):
    id: int
    item_id: int
    url: str
    title: str | None = None
    price: float | None = None
    is_from_ai: bool = Field(alias="isFromAI")
    is_selected: bool
    created_at: datetime | None = None


class LinkSuggestion(CamelModel):
    url: str
    title: str
    price: float | None = None
    is_from_ai: bool = Field(default=True, alias="isFromAI")
