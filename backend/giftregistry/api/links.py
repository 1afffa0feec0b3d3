from starlette.responses import Response

from giftregistry.api.base import HandlerContext, ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.schemas.link import ItemLinkCreate, LinkUpdate
from giftregistry.services.links import LinkService


class LinkHandler(ResourceHandler):
    prefixes = ("/api/links",)
    routes = (
        ("GET", r"/api/links/ai/(?P<title>.+)", "suggest_links"),
        ("POST", r"/api/links", "add_link"),
        ("PUT", r"/api/links/(?P<link_id>\d+)", "update_link"),
        ("DELETE", r"/api/links/(?P<link_id>\d+)", "delete_link"),
    )

    def __init__(self, auth: AuthorizationHelper, links: LinkService) -> None:
        super().__init__(auth)
        self._links = links

    def suggest_links(self, context: HandlerContext) -> Response:
        suggestions = self._links.suggest(context.params["title"])
        return self.ok(links=[suggestion.to_json() for suggestion in suggestions])

    def add_link(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, ItemLinkCreate)
        link = self._links.add_link(user_id, payload)
        return self.ok(message="Link added", link=link.to_json())

    def update_link(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, LinkUpdate)
        link = self._links.update_link(user_id, context.int_param("link_id"), payload)
        return self.ok(message="Link updated", link=link.to_json())

    def delete_link(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        self._links.delete_link(user_id, context.int_param("link_id"))
        return self.ok(message="Link deleted")
