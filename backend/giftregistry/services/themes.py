from sqlalchemy.orm import Session, sessionmaker

from giftregistry.core.cache import TTLCache
from giftregistry.models import Theme
from giftregistry.schemas.theme import ThemeRead


ALL_THEMES_KEY = "themes:all"


class ThemeService:
    def __init__(self, session_factory: sessionmaker[Session], cache: TTLCache, ttl_seconds: float = 3600) -> None:
        self._session_factory = session_factory
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def list_themes(self) -> list[ThemeRead]:
        cached = self._cache.get(ALL_THEMES_KEY)
        if cached is not None:
            return cached

        with self._session_factory() as db:
            themes = [ThemeRead.model_validate(theme) for theme in db.query(Theme).order_by(Theme.id).all()]
        self._cache.set(ALL_THEMES_KEY, themes, self._ttl_seconds)
        return themes

    def get_theme(self, theme_id: int) -> ThemeRead | None:
        for theme in self.list_themes():
            if theme.id == theme_id:
                return theme
        return None

    def default_theme_id(self) -> int | None:
        themes = self.list_themes()
        return themes[0].id if themes else None
