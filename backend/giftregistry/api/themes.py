from starlette.responses import Response

from giftregistry.api.base import HandlerContext, ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.core.errors import NotFound
from giftregistry.services.themes import ThemeService


class ThemeHandler(ResourceHandler):
    prefixes = ("/api/themes",)
    routes = (
        ("GET", r"/api/themes", "list_themes"),
        ("GET", r"/api/themes/(?P<theme_id>\d+)", "get_theme"),
    )

    def __init__(self, auth: AuthorizationHelper, themes: ThemeService) -> None:
        super().__init__(auth)
        self._themes = themes

    def list_themes(self, context: HandlerContext) -> Response:
        return self.ok(themes=[theme.to_json() for theme in self._themes.list_themes()])

    def get_theme(self, context: HandlerContext) -> Response:
        theme = self._themes.get_theme(context.int_param("theme_id"))
        if theme is None:
            raise NotFound("Theme not found")
        return self.ok(theme=theme.to_json())
