import logging
from urllib.parse import urlparse

from sqlalchemy.orm import Session, sessionmaker

from giftregistry.core.errors import AuthorizationDenied, NotFound, ValidationError
from giftregistry.models import FriendWishlist, Wishlist
from giftregistry.schemas.friend import FriendWishlistRead
from giftregistry.schemas.wishlist import WishlistDetail
from giftregistry.services.serializers import wishlist_detail, wishlist_summary


logger = logging.getLogger(__name__)

DEFAULT_FRIEND_NAME = "Friend"
FRIEND_NAME_MAX_LENGTH = 100


def share_token_from_url(value: str) -> str:
    """Accept a bare share token or any URL whose last path segment is one."""
    value = value.strip()
    if "/" not in value:
        return value
    path = urlparse(value).path if "://" in value else value
    return path.rstrip("/").rsplit("/", 1)[-1]


class FriendWishlistService:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def list_for_user(self, user_id: int) -> list[FriendWishlistRead]:
        with self._session_factory() as db:
            bookmarks = (
                db.query(FriendWishlist)
                .filter(FriendWishlist.user_id == user_id)
                .order_by(FriendWishlist.created_at.desc(), FriendWishlist.id.desc())
                .all()
            )
            return [_read(bookmark) for bookmark in bookmarks]

    def add(self, user_id: int, share_token: str, friend_name: str) -> FriendWishlistRead:
        if not share_token or not share_token.strip():
            raise ValidationError("Share token is required")
        if not friend_name or not friend_name.strip():
            raise ValidationError("Friend name is required")
        return self._save(user_id, share_token.strip(), friend_name.strip())

    def save_from_url(self, user_id: int, url: str, friend_name: str | None) -> FriendWishlistRead:
        share_token = share_token_from_url(url or "")
        if not share_token:
            raise ValidationError("Share token is required")
        name = friend_name.strip() if friend_name and friend_name.strip() else DEFAULT_FRIEND_NAME
        return self._save(user_id, share_token, name)

    def get_for_display(self, bookmark_id: int, user_id: int) -> tuple[FriendWishlistRead, WishlistDetail]:
        with self._session_factory() as db:
            bookmark = db.get(FriendWishlist, bookmark_id)
            if not bookmark or bookmark.user_id != user_id:
                raise NotFound("Friend wishlist not found")
            detail = wishlist_detail(bookmark.wishlist, reveal_reserver=True, is_owner=False)
            return _read(bookmark), detail

    def delete(self, bookmark_id: int, user_id: int) -> None:
        with self._session_factory() as db:
            bookmark = db.get(FriendWishlist, bookmark_id)
            if not bookmark:
                raise NotFound("Friend wishlist not found")
            if bookmark.user_id != user_id:
                raise AuthorizationDenied("You cannot delete this friend wishlist")
            db.delete(bookmark)
            db.commit()
        logger.info("Friend wishlist removed", extra={"user_id": user_id, "friend_wishlist_id": bookmark_id})

    def _save(self, user_id: int, share_token: str, friend_name: str) -> FriendWishlistRead:
        if len(friend_name) > FRIEND_NAME_MAX_LENGTH:
            raise ValidationError(f"Friend name must not exceed {FRIEND_NAME_MAX_LENGTH} characters")

        with self._session_factory() as db:
            wishlist = db.query(Wishlist).filter(Wishlist.share_token == share_token).first()
            if not wishlist:
                raise NotFound("Wishlist not found")
            if wishlist.user_id == user_id:
                raise ValidationError("You cannot save your own wishlist")
            existing = (
                db.query(FriendWishlist.id)
                .filter(FriendWishlist.user_id == user_id, FriendWishlist.wishlist_id == wishlist.id)
                .first()
            )
            if existing:
                raise ValidationError("This wishlist is already saved")

            bookmark = FriendWishlist(user_id=user_id, wishlist_id=wishlist.id, friend_name=friend_name)
            db.add(bookmark)
            db.commit()
            db.refresh(bookmark)
            logger.info("Friend wishlist saved", extra={"user_id": user_id, "friend_wishlist_id": bookmark.id})
            return _read(bookmark)


def _read(bookmark: FriendWishlist) -> FriendWishlistRead:
    return FriendWishlistRead(
        id=bookmark.id,
        wishlist_id=bookmark.wishlist_id,
        friend_name=bookmark.friend_name,
        created_at=bookmark.created_at,
        wishlist=wishlist_summary(bookmark.wishlist),
    )
