from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from giftregistry.api.auth import AuthHandler, SessionCookie
from giftregistry.api.base import ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.api.friends import FriendWishlistHandler
from giftregistry.api.items import ItemHandler
from giftregistry.api.links import LinkHandler
from giftregistry.api.themes import ThemeHandler
from giftregistry.api.users import UserHandler
from giftregistry.api.wishlists import WishlistHandler
from giftregistry.core.cache import TTLCache
from giftregistry.core.config import Settings
from giftregistry.pipeline.base import Pipeline
from giftregistry.pipeline.stages import (
    AuthCheckStage,
    ErrorHandlingStage,
    LoggingStage,
    RoutingStage,
    StaticFilesStage,
    dispatch_endpoint,
)
from giftregistry.services.auth import AuthService
from giftregistry.services.credentials import CredentialService
from giftregistry.services.friends import FriendWishlistService
from giftregistry.services.images import ImageStorage
from giftregistry.services.items import ItemService
from giftregistry.services.links import LinkService
from giftregistry.services.product_search import ProductSearchService
from giftregistry.services.session_store import SessionStore
from giftregistry.services.sessions import SessionManager
from giftregistry.services.themes import ThemeService
from giftregistry.services.users import UserService
from giftregistry.services.wishlists import WishlistService


@dataclass
class Container:
    settings: Settings
    session_factory: sessionmaker[Session]
    cache: TTLCache
    credentials: CredentialService
    session_store: SessionStore
    users: UserService
    sessions: SessionManager
    auth: AuthorizationHelper
    auth_service: AuthService
    themes: ThemeService
    images: ImageStorage
    wishlists: WishlistService
    items: ItemService
    links: LinkService
    friends: FriendWishlistService
    handlers: list[ResourceHandler]
    pipeline: Pipeline


def build_container(settings: Settings, session_factory: sessionmaker[Session]) -> Container:
    """Wire every service and handler once, in dependency order."""
    cache = TTLCache()
    credentials = CredentialService()
    session_store = SessionStore(session_factory)
    users = UserService(session_factory, credentials)
    sessions = SessionManager(
        session_store,
        users,
        lifetime=timedelta(days=settings.session_lifetime_days),
        renew_threshold=timedelta(minutes=settings.session_renew_threshold_minutes),
    )
    auth = AuthorizationHelper(sessions, cookie_name=settings.session_cookie_name)
    auth_service = AuthService(users, sessions, credentials)
    themes = ThemeService(session_factory, cache, ttl_seconds=settings.theme_cache_ttl_seconds)
    images = ImageStorage(
        settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        max_size_bytes=settings.max_image_size_bytes,
    )
    wishlists = WishlistService(session_factory, themes, images, max_per_user=settings.max_wishlists_per_user)
    items = ItemService(
        session_factory,
        images,
        max_per_wishlist=settings.max_items_per_wishlist,
        max_links_per_item=settings.max_links_per_item,
    )
    links = LinkService(session_factory, ProductSearchService(), max_per_item=settings.max_links_per_item)
    friends = FriendWishlistService(session_factory)

    cookie = SessionCookie(
        settings.session_cookie_name,
        lifetime=timedelta(days=settings.session_lifetime_days),
        secure=settings.session_cookie_secure,
    )
    handlers: list[ResourceHandler] = [
        AuthHandler(auth, auth_service, cookie),
        UserHandler(auth, users, cookie),
        WishlistHandler(auth, wishlists),
        ThemeHandler(auth, themes),
        ItemHandler(auth, items, images),
        LinkHandler(auth, links),
        FriendWishlistHandler(auth, friends),
    ]

    pipeline = Pipeline(
        [
            LoggingStage(),
            AuthCheckStage(auth, users),
            RoutingStage(handlers),
            StaticFilesStage(
                settings.static_root,
                extra_roots={settings.upload_url_prefix: Path(settings.upload_dir)},
            ),
            ErrorHandlingStage(),
        ],
        terminal=dispatch_endpoint,
    )

    return Container(
        settings=settings,
        session_factory=session_factory,
        cache=cache,
        credentials=credentials,
        session_store=session_store,
        users=users,
        sessions=sessions,
        auth=auth,
        auth_service=auth_service,
        themes=themes,
        images=images,
        wishlists=wishlists,
        items=items,
        links=links,
        friends=friends,
        handlers=handlers,
        pipeline=pipeline,
    )
