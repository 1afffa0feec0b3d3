import logging
from urllib.parse import urlparse

from sqlalchemy import func, update
from sqlalchemy.orm import Session, sessionmaker

from giftregistry.core.errors import AuthorizationDenied, NotFound, ValidationError
from giftregistry.models import ItemLink, WishlistItem
from giftregistry.schemas.link import ItemLinkCreate, LinkCreate, LinkRead, LinkSuggestion, LinkUpdate
from giftregistry.services.product_search import ProductSearchService
from giftregistry.services.serializers import link_read


logger = logging.getLogger(__name__)

MAX_PRICE = 9_999_999.99


def validate_link(url: str, price: float | None = None) -> None:
    parsed = urlparse(url.strip()) if url else None
    if not parsed or parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError("Link must be an absolute http(s) URL")
    if price is not None and not 0 <= price <= MAX_PRICE:
        raise ValidationError("Price must be between 0 and 9,999,999.99")


def pick_selected(links: list[ItemLink]) -> ItemLink | None:
    """Primary link for a freshly created set: AI+selected, AI, manual+selected, manual."""
    candidates = (
        [link for link in links if link.is_from_ai and link.is_selected]
        or [link for link in links if link.is_from_ai]
        or [link for link in links if not link.is_from_ai and link.is_selected]
        or links
    )
    return candidates[0] if candidates else None


def build_links(item: WishlistItem, payloads: list[LinkCreate]) -> list[ItemLink]:
    links = [
        ItemLink(
            url=payload.url.strip(),
            title=payload.title,
            price=payload.price,
            is_from_ai=payload.is_from_ai,
            is_selected=payload.is_selected,
        )
        for payload in payloads
    ]
    selected = pick_selected(links)
    for link in links:
        link.is_selected = link is selected
    item.links.extend(links)
    return links


class LinkService:
    def __init__(
        self,
        session_factory: sessionmaker[Session],
        search: ProductSearchService,
        max_per_item: int = 10,
    ) -> None:
        self._session_factory = session_factory
        self._search = search
        self._max_per_item = max_per_item

    def suggest(self, item_title: str) -> list[LinkSuggestion]:
        return self._search.suggest_links(item_title)

    def add_link(self, user_id: int, payload: ItemLinkCreate) -> LinkRead:
        validate_link(payload.url, payload.price)

        with self._session_factory() as db:
            item = self._get_editable_item(db, payload.item_id, user_id)
            count = db.query(func.count(ItemLink.id)).filter(ItemLink.item_id == item.id).scalar()
            if count >= self._max_per_item:
                raise ValidationError(f"An item cannot have more than {self._max_per_item} links")

            if payload.is_selected or count == 0:
                self._clear_selection(db, item.id)
            link = ItemLink(
                item_id=item.id,
                url=payload.url.strip(),
                title=payload.title,
                price=payload.price,
                is_from_ai=payload.is_from_ai,
                is_selected=payload.is_selected or count == 0,
            )
            db.add(link)
            db.commit()
            db.refresh(link)
            logger.info("Link added", extra={"item_id": item.id, "link_id": link.id})
            return link_read(link)

    def update_link(self, user_id: int, link_id: int, payload: LinkUpdate) -> LinkRead:
        with self._session_factory() as db:
            link = self._get_editable_link(db, link_id, user_id)
            url = payload.url if payload.url is not None else link.url
            price = payload.price if "price" in payload.model_fields_set else link.price
            validate_link(url, float(price) if price is not None else None)

            link.url = url.strip()
            link.price = price
            if "title" in payload.model_fields_set:
                link.title = payload.title
            if payload.is_selected:
                self._clear_selection(db, link.item_id)
                link.is_selected = True
            elif payload.is_selected is False:
                link.is_selected = False
            db.commit()
            db.refresh(link)
            return link_read(link)

    def delete_link(self, user_id: int, link_id: int) -> None:
        with self._session_factory() as db:
            link = self._get_editable_link(db, link_id, user_id)
            item_id = link.item_id
            was_selected = link.is_selected
            db.delete(link)
            db.flush()

            if was_selected:
                remaining = db.query(ItemLink).filter(ItemLink.item_id == item_id).order_by(ItemLink.id).all()
                replacement = pick_selected(remaining)
                if replacement is not None:
                    replacement.is_selected = True
            db.commit()
            logger.info("Link deleted", extra={"item_id": item_id, "link_id": link_id})

    def _clear_selection(self, db: Session, item_id: int) -> None:
        db.execute(
            update(ItemLink)
            .where(ItemLink.item_id == item_id, ItemLink.is_selected.is_(True))
            .values(is_selected=False)
            .execution_options(synchronize_session="fetch")
        )

    def _get_editable_item(self, db: Session, item_id: int, user_id: int) -> WishlistItem:
        item = db.get(WishlistItem, item_id)
        if not item:
            raise NotFound("Item not found")
        if item.wishlist.user_id != user_id:
            raise AuthorizationDenied("You do not have access to this item")
        return item

    def _get_editable_link(self, db: Session, link_id: int, user_id: int) -> ItemLink:
        link = db.get(ItemLink, link_id)
        if not link:
            raise NotFound("Link not found")
        if link.item.wishlist.user_id != user_id:
            raise AuthorizationDenied("You do not have access to this link")
        return link
