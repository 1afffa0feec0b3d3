from starlette.responses import Response

from giftregistry.api.base import HandlerContext, ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.schemas.friend import FriendWishlistCreate, FriendWishlistFromUrl
from giftregistry.services.friends import FriendWishlistService


class FriendWishlistHandler(ResourceHandler):
    prefixes = ("/api/friend-wishlists",)
    routes = (
        ("GET", r"/api/friend-wishlists", "list_friend_wishlists"),
        ("POST", r"/api/friend-wishlists", "add_friend_wishlist"),
        ("POST", r"/api/friend-wishlists/save-from-url", "save_from_url"),
        ("GET", r"/api/friend-wishlists/(?P<bookmark_id>\d+)", "get_friend_wishlist"),
        ("DELETE", r"/api/friend-wishlists/(?P<bookmark_id>\d+)", "delete_friend_wishlist"),
    )

    def __init__(self, auth: AuthorizationHelper, friends: FriendWishlistService) -> None:
        super().__init__(auth)
        self._friends = friends

    def list_friend_wishlists(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        bookmarks = self._friends.list_for_user(user_id)
        return self.ok(friendWishlists=[bookmark.to_json() for bookmark in bookmarks])

    def add_friend_wishlist(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, FriendWishlistCreate)
        bookmark = self._friends.add(user_id, payload.share_token, payload.friend_name)
        return self.ok(message="Friend wishlist added", friendWishlist=bookmark.to_json())

    def save_from_url(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, FriendWishlistFromUrl)
        bookmark = self._friends.save_from_url(user_id, payload.url, payload.friend_name)
        return self.ok(message="Friend wishlist saved", friendWishlist=bookmark.to_json())

    def get_friend_wishlist(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        bookmark, wishlist = self._friends.get_for_display(context.int_param("bookmark_id"), user_id)
        return self.ok(friendWishlist=bookmark.to_json(), wishlist=wishlist.to_json())

    def delete_friend_wishlist(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        self._friends.delete(context.int_param("bookmark_id"), user_id)
        return self.ok(message="Friend wishlist removed")
