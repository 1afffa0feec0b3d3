import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, sessionmaker

from giftregistry.core.errors import AuthorizationDenied, NotFound, ValidationError
from giftregistry.core.security import generate_share_token
from giftregistry.models import Wishlist, WishlistItem
from giftregistry.schemas.wishlist import WishlistCreate, WishlistDetail, WishlistSummary, WishlistUpdate
from giftregistry.services.images import ImageStorage
from giftregistry.services.serializers import wishlist_detail, wishlist_summary
from giftregistry.services.themes import ThemeService


logger = logging.getLogger(__name__)

TITLE_MIN_LENGTH = 2
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


def validate_wishlist(title: str, description: str | None) -> None:
    if not title or not title.strip() or len(title) < TITLE_MIN_LENGTH:
        raise ValidationError(f"Wishlist title must be at least {TITLE_MIN_LENGTH} characters")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Wishlist title must not exceed {TITLE_MAX_LENGTH} characters")
    if description and len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description must not exceed {DESCRIPTION_MAX_LENGTH} characters")


class WishlistService:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        themes: ThemeService,
        images: ImageStorage,
        max_per_user: int = 50,
    ) -> None:
        self._session_factory = session_factory
        self._themes = themes
        self._images = images
        self._max_per_user = max_per_user

    def user_owns_wishlist(self, wishlist_id: int, user_id: int) -> bool:
        with self._session_factory() as db:
            return (
                db.query(Wishlist.id)
                .filter(Wishlist.id == wishlist_id, Wishlist.user_id == user_id)
                .first()
                is not None
            )

    def list_for_user(self, user_id: int) -> list[WishlistSummary]:
        with self._session_factory() as db:
            counts = (
                db.query(WishlistItem.wishlist_id, func.count(WishlistItem.id).label("item_count"))
                .group_by(WishlistItem.wishlist_id)
                .subquery()
            )
            rows = (
                db.query(Wishlist, func.coalesce(counts.c.item_count, 0))
                .outerjoin(counts, counts.c.wishlist_id == Wishlist.id)
                .filter(Wishlist.user_id == user_id)
                .order_by(Wishlist.created_at.desc(), Wishlist.id.desc())
                .all()
            )
            return [wishlist_summary(wishlist, item_count) for wishlist, item_count in rows]

    def create(self, user_id: int, payload: WishlistCreate) -> WishlistSummary:
        validate_wishlist(payload.title, payload.description)
        theme_id = self._resolve_theme(payload.theme_id)

        with self._session_factory() as db:
            owned = db.query(func.count(Wishlist.id)).filter(Wishlist.user_id == user_id).scalar()
            if owned >= self._max_per_user:
                raise ValidationError(f"You cannot have more than {self._max_per_user} wishlists")

            wishlist = Wishlist(
                user_id=user_id,
                title=payload.title.strip(),
                description=payload.description,
                event_date=payload.event_date,
                theme_id=theme_id,
                share_token=_generate_share_token(db),
            )
            db.add(wishlist)
            db.commit()
            db.refresh(wishlist)
            logger.info("Wishlist created", extra={"user_id": user_id, "wishlist_id": wishlist.id})
            return wishlist_summary(wishlist, 0)

    def get_for_viewer(self, wishlist_id: int, viewer_id: int) -> WishlistDetail:
        """Read a wishlist by id for any logged-in viewer.

        The owner gets ``isOwner`` and never the reserving user; everyone
        else sees who reserved each item.
        """
        with self._session_factory() as db:
            wishlist = db.get(Wishlist, wishlist_id)
            if not wishlist:
                raise NotFound("Wishlist not found")
            is_owner = wishlist.user_id == viewer_id
            return wishlist_detail(wishlist, reveal_reserver=not is_owner, is_owner=is_owner)

    def update(self, wishlist_id: int, user_id: int, payload: WishlistUpdate) -> WishlistSummary:
        validate_wishlist(payload.title, payload.description)

        with self._session_factory() as db:
            wishlist = self._get_owned(db, wishlist_id, user_id)
            wishlist.title = payload.title.strip()
            wishlist.description = payload.description
            wishlist.event_date = payload.event_date
            if payload.theme_id is not None:
                wishlist.theme_id = self._resolve_theme(payload.theme_id)
            db.commit()
            db.refresh(wishlist)
            return wishlist_summary(wishlist)

    def delete(self, wishlist_id: int, user_id: int) -> None:
        with self._session_factory() as db:
            wishlist = self._get_owned(db, wishlist_id, user_id)
            image_urls = [item.image_url for item in wishlist.items if item.image_url]
            db.delete(wishlist)
            db.commit()
        for url in image_urls:
            self._images.delete(url)
        logger.info("Wishlist deleted", extra={"user_id": user_id, "wishlist_id": wishlist_id})

    def get_by_share_token(self, share_token: str, viewer_id: int | None) -> WishlistDetail:
        """Read a wishlist through its share token.

        Nobody needs to be logged in. The reserving user's id is shown only
        to a logged-in viewer who is not the owner.
        """
        with self._session_factory() as db:
            wishlist = db.query(Wishlist).filter(Wishlist.share_token == share_token).first()
            if not wishlist:
                raise NotFound("Wishlist not found")
            is_owner = viewer_id is not None and wishlist.user_id == viewer_id
            reveal = viewer_id is not None and not is_owner
            return wishlist_detail(wishlist, reveal_reserver=reveal, is_owner=is_owner)

    def _get_owned(self, db: Session, wishlist_id: int, user_id: int) -> Wishlist:
        wishlist = db.get(Wishlist, wishlist_id)
        if not wishlist:
            raise NotFound("Wishlist not found")
        if wishlist.user_id != user_id:
            raise AuthorizationDenied("You do not have access to this wishlist")
        return wishlist

    def _resolve_theme(self, theme_id: int | None) -> int:
        if theme_id is None:
            default_id = self._themes.default_theme_id()
            if default_id is None:
                raise ValidationError("No themes are configured")
            return default_id
        if self._themes.get_theme(theme_id) is None:
            raise ValidationError("Theme not found")
        return theme_id


def _generate_share_token(db: Session) -> str:
    while True:
        token = generate_share_token()
        exists = db.query(Wishlist.id).filter(Wishlist.share_token == token).first()
        if not exists:
            return token
