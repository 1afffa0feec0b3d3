from starlette.responses import Response

from giftregistry.api.base import HandlerContext, ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.core.errors import NotFound, ValidationError
from giftregistry.schemas.item import ItemCreate, ItemUpdate
from giftregistry.services.images import ImageStorage
from giftregistry.services.items import ItemService


class ItemHandler(ResourceHandler):
    prefixes = ("/api/items", "/api/upload-image")
    routes = (
        ("POST", r"/api/items", "create_item"),
        ("GET", r"/api/items/(?P<item_id>\d+)", "get_item"),
        ("PUT", r"/api/items/(?P<item_id>\d+)", "update_item"),
        ("DELETE", r"/api/items/(?P<item_id>\d+)", "delete_item"),
        ("POST", r"/api/items/(?P<item_id>\d+)/reserve", "reserve_item"),
        ("POST", r"/api/items/(?P<item_id>\d+)/unreserve", "unreserve_item"),
        ("POST", r"/api/upload-image", "upload_image"),
    )

    def __init__(self, auth: AuthorizationHelper, items: ItemService, images: ImageStorage) -> None:
        super().__init__(auth)
        self._items = items
        self._images = images

    def create_item(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, ItemCreate)
        item = self._items.create_item(user_id, payload)
        return self.ok(message="Item created", item=item.to_json())

    def get_item(self, context: HandlerContext) -> Response:
        # GET is public for most resources, but items are owner-only reads.
        user_id = self.require_user(context)
        item = self._items.get_item(context.int_param("item_id"), user_id)
        if item is None:
            raise NotFound("Item not found")
        return self.ok(item=item.to_json())

    def update_item(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, ItemUpdate)
        item = self._items.update_item(user_id, context.int_param("item_id"), payload)
        return self.ok(message="Item updated", item=item.to_json())

    def delete_item(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        self._items.delete_item(user_id, context.int_param("item_id"))
        return self.ok(message="Item deleted")

    def reserve_item(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        self._items.reserve_item(context.int_param("item_id"), user_id)
        return self.ok(message="Item reserved")

    def unreserve_item(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        self._items.unreserve_item(context.int_param("item_id"), user_id)
        return self.ok(message="Reservation cancelled")

    def upload_image(self, context: HandlerContext) -> Response:
        self.require_user(context)
        if not context.body:
            raise ValidationError("No file uploaded")
        image_url = self._images.save(context.body, context.content_type)
        return self.ok(imageUrl=image_url)
