from starlette.responses import Response

from giftregistry.api.base import HandlerContext, ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.schemas.wishlist import WishlistCreate, WishlistUpdate
from giftregistry.services.wishlists import WishlistService


class WishlistHandler(ResourceHandler):
    prefixes = ("/api/wishlists", "/api/public/wishlists")
    routes = (
        ("GET", r"/api/wishlists", "list_wishlists"),
        ("POST", r"/api/wishlists", "create_wishlist"),
        ("GET", r"/api/wishlists/(?P<wishlist_id>\d+)", "get_wishlist"),
        ("PUT", r"/api/wishlists/(?P<wishlist_id>\d+)", "update_wishlist"),
        ("DELETE", r"/api/wishlists/(?P<wishlist_id>\d+)", "delete_wishlist"),
        ("GET", r"/api/public/wishlists/(?P<share_token>[^/]+)", "get_public_wishlist"),
    )

    def __init__(self, auth: AuthorizationHelper, wishlists: WishlistService) -> None:
        super().__init__(auth)
        self._wishlists = wishlists

    def list_wishlists(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        wishlists = self._wishlists.list_for_user(user_id)
        return self.ok(wishlists=[wishlist.to_json() for wishlist in wishlists])

    def create_wishlist(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, WishlistCreate)
        wishlist = self._wishlists.create(user_id, payload)
        return self.ok(message="Wishlist created", wishlist=wishlist.to_json())

    def get_wishlist(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        wishlist = self._wishlists.get_for_viewer(context.int_param("wishlist_id"), user_id)
        return self.ok(wishlist=wishlist.to_json())

    def update_wishlist(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, WishlistUpdate)
        wishlist = self._wishlists.update(context.int_param("wishlist_id"), user_id, payload)
        return self.ok(message="Wishlist updated", wishlist=wishlist.to_json())

    def delete_wishlist(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        self._wishlists.delete(context.int_param("wishlist_id"), user_id)
        return self.ok(message="Wishlist deleted")

    def get_public_wishlist(self, context: HandlerContext) -> Response:
        viewer_id = self.current_user_id(context)
        wishlist = self._wishlists.get_by_share_token(context.params["share_token"], viewer_id)
        return self.ok(wishlist=wishlist.to_json())
