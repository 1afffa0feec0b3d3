from giftregistry.models import ItemLink, Wishlist, WishlistItem
from giftregistry.schemas.item import ItemRead
from giftregistry.schemas.link import LinkRead
from giftregistry.schemas.theme import ThemeRead
from giftregistry.schemas.wishlist import WishlistDetail, WishlistSummary


def link_read(link: ItemLink) -> LinkRead:
    return LinkRead.model_validate(link)


def item_read(item: WishlistItem, reveal_reserver: bool) -> ItemRead:
    """Serialize an item; the reserving user's id is only included when ``reveal_reserver``."""
    data = ItemRead.model_validate(item)
    if not reveal_reserver:
        data.reserved_by_user_id = None
    return data


def wishlist_summary(wishlist: Wishlist, item_count: int | None = None) -> WishlistSummary:
    return WishlistSummary(
        id=wishlist.id,
        user_id=wishlist.user_id,
        title=wishlist.title,
        description=wishlist.description,
        event_date=wishlist.event_date,
        theme_id=wishlist.theme_id,
        theme=ThemeRead.model_validate(wishlist.theme) if wishlist.theme else None,
        share_token=wishlist.share_token,
        item_count=len(wishlist.items) if item_count is None else item_count,
        created_at=wishlist.created_at,
        updated_at=wishlist.updated_at,
    )


def wishlist_detail(wishlist: Wishlist, reveal_reserver: bool, is_owner: bool) -> WishlistDetail:
    summary = wishlist_summary(wishlist)
    return WishlistDetail(
        **summary.model_dump(),
        items=[item_read(item, reveal_reserver) for item in wishlist.items],
        owner_name=wishlist.owner.username if wishlist.owner else None,
        is_owner=is_owner,
    )
