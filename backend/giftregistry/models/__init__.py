from giftregistry.models.theme import Theme
from giftregistry.models.user import User, UserSession
from giftregistry.models.wishlist import ItemLink, Wishlist, WishlistItem
from giftregistry.models.friend import FriendWishlist

__all__ = ["Theme", "User", "UserSession", "Wishlist", "WishlistItem", "ItemLink", "FriendWishlist"]
