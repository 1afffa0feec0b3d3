import logging

from sqlalchemy import func, update
from sqlalchemy.orm import Session, sessionmaker

from giftregistry.core.errors import AuthorizationDenied, NotFound, ValidationError
from giftregistry.models import Wishlist, WishlistItem
from giftregistry.schemas.item import ItemCreate, ItemRead, ItemUpdate
from giftregistry.schemas.link import LinkCreate
from giftregistry.services.images import ImageStorage
from giftregistry.services.links import MAX_PRICE, build_links, validate_link
from giftregistry.services.serializers import item_read


logger = logging.getLogger(__name__)

TITLE_MIN_LENGTH = 2
TITLE_MAX_LENGTH = 100


def validate_item(title: str, price: float | None, desire_level: int) -> None:
    if not title or not title.strip() or len(title) < TITLE_MIN_LENGTH:
        raise ValidationError(f"Item title must be at least {TITLE_MIN_LENGTH} characters")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"Item title must not exceed {TITLE_MAX_LENGTH} characters")
    if price is not None and not 0 <= price <= MAX_PRICE:
        raise ValidationError("Price must be between 0 and 9,999,999.99")
    if desire_level not in (1, 2, 3):
        raise ValidationError("Desire level must be between 1 and 3")


class ItemService:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        images: ImageStorage,
        max_per_wishlist: int = 100,
        max_links_per_item: int = 10,
    ) -> None:
        self._session_factory = session_factory
        self._images = images
        self._max_per_wishlist = max_per_wishlist
        self._max_links_per_item = max_links_per_item

    def can_user_edit_item(self, item_id: int, user_id: int) -> bool:
        with self._session_factory() as db:
            return (
                db.query(WishlistItem.id)
                .join(Wishlist, Wishlist.id == WishlistItem.wishlist_id)
                .filter(WishlistItem.id == item_id, Wishlist.user_id == user_id)
                .first()
                is not None
            )

    def get_item(self, item_id: int, user_id: int) -> ItemRead | None:
        """Owner-only read; anyone else gets ``None`` just like a missing item."""
        with self._session_factory() as db:
            item = db.get(WishlistItem, item_id)
            if not item or item.wishlist.user_id != user_id:
                return None
            return item_read(item, reveal_reserver=False)

    def create_item(self, user_id: int, payload: ItemCreate) -> ItemRead:
        validate_item(payload.title, payload.price, payload.desire_level)
        self._validate_links(payload.links)

        with self._session_factory() as db:
            wishlist = db.get(Wishlist, payload.wishlist_id)
            if not wishlist:
                raise NotFound("Wishlist not found")
            if wishlist.user_id != user_id:
                raise AuthorizationDenied("You do not have access to this wishlist")
            count = db.query(func.count(WishlistItem.id)).filter(WishlistItem.wishlist_id == wishlist.id).scalar()
            if count >= self._max_per_wishlist:
                raise ValidationError(f"A wishlist cannot have more than {self._max_per_wishlist} items")

        uploaded_url = self._images.save(payload.image_data) if payload.image_data else None

        try:
            with self._session_factory() as db:
                item = WishlistItem(
                    wishlist_id=payload.wishlist_id,
                    title=payload.title.strip(),
                    description=payload.description,
                    price=payload.price,
                    image_url=uploaded_url or payload.image_url,
                    desire_level=payload.desire_level,
                    comment=payload.comment,
                    is_reserved=False,
                )
                if payload.links:
                    build_links(item, payload.links)
                db.add(item)
                db.commit()
                db.refresh(item)
                logger.info("Item created", extra={"user_id": user_id, "item_id": item.id})
                return item_read(item, reveal_reserver=False)
        except Exception:
            if uploaded_url:
                self._images.delete(uploaded_url)
            raise

    def update_item(self, user_id: int, item_id: int, payload: ItemUpdate) -> ItemRead:
        validate_item(payload.title, payload.price, payload.desire_level)
        self._validate_links(payload.links)

        with self._session_factory() as db:
            self._get_editable(db, item_id, user_id)

        uploaded_url = self._images.save(payload.image_data) if payload.image_data else None

        try:
            with self._session_factory() as db:
                item = self._get_editable(db, item_id, user_id)
                previous_url = item.image_url
                item.title = payload.title.strip()
                item.description = payload.description
                item.price = payload.price
                item.desire_level = payload.desire_level
                item.comment = payload.comment
                if uploaded_url:
                    item.image_url = uploaded_url
                elif "image_url" in payload.model_fields_set:
                    item.image_url = payload.image_url
                if payload.links is not None:
                    item.links.clear()
                    db.flush()
                    build_links(item, payload.links)
                db.commit()
                db.refresh(item)
                result = item_read(item, reveal_reserver=False)
        except Exception:
            if uploaded_url:
                self._images.delete(uploaded_url)
            raise

        if previous_url and previous_url != result.image_url:
            self._images.delete(previous_url)
        return result

    def delete_item(self, user_id: int, item_id: int) -> None:
        with self._session_factory() as db:
            item = self._get_editable(db, item_id, user_id)
            image_url = item.image_url
            db.delete(item)
            db.commit()
        if image_url:
            self._images.delete(image_url)
        logger.info("Item deleted", extra={"user_id": user_id, "item_id": item_id})

    def reserve_item(self, item_id: int, user_id: int) -> None:
        """Mark an unreserved item as reserved by ``user_id``.

        The state check and the write happen in one conditional UPDATE, so of
        several concurrent callers exactly one sees an affected row.
        """
        with self._session_factory() as db:
            result = db.execute(
                update(WishlistItem)
                .where(WishlistItem.id == item_id, WishlistItem.is_reserved.is_(False))
                .values(is_reserved=True, reserved_by_user_id=user_id)
                .execution_options(synchronize_session=False)
            )
            db.commit()
            if result.rowcount > 0:
                logger.info("Item reserved", extra={"item_id": item_id, "user_id": user_id})
                return

            if db.get(WishlistItem, item_id) is None:
                raise NotFound("Item not found")
        raise ValidationError("Item is already reserved")

    def unreserve_item(self, item_id: int, user_id: int) -> None:
        with self._session_factory() as db:
            result = db.execute(
                update(WishlistItem)
                .where(
                    WishlistItem.id == item_id,
                    WishlistItem.is_reserved.is_(True),
                    WishlistItem.reserved_by_user_id == user_id,
                )
                .values(is_reserved=False, reserved_by_user_id=None)
                .execution_options(synchronize_session=False)
            )
            db.commit()
            if result.rowcount > 0:
                logger.info("Item unreserved", extra={"item_id": item_id, "user_id": user_id})
                return

            if db.get(WishlistItem, item_id) is None:
                raise NotFound("Item not found")
        raise AuthorizationDenied("You cannot release this reservation")

    def _get_editable(self, db: Session, item_id: int, user_id: int) -> WishlistItem:
        item = db.get(WishlistItem, item_id)
        if not item:
            raise NotFound("Item not found")
        if item.wishlist.user_id != user_id:
            raise AuthorizationDenied("You do not have access to this item")
        return item

    def _validate_links(self, links: list[LinkCreate] | None) -> None:
        if not links:
            return
        if len(links) > self._max_links_per_item:
            raise ValidationError(f"An item cannot have more than {self._max_links_per_item} links")
        for link in links:
            validate_link(link.url, link.price)
