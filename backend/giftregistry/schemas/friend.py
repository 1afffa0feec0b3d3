from datetime import datetime

from giftregistry.schemas.base import CamelModel
from giftregistry.schemas.wishlist import WishlistSummary


class FriendWishlistCreate(CamelModel):
    share_token: str = ""
    friend_name: str = ""


class FriendWishlistFromUrl(CamelModel):
    url: str = ""
    friend_name: str | None = None


class FriendWishlistRead(CamelModel):
    id: int
    wishlist_id: int
    friend_name: str
    created_at: datetime | None = None
    wishlist: WishlistSummary | None = None
