from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from giftregistry.db.base import Base


class FriendWishlist(Base):
    __tablename__ = "friend_wishlists"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    wishlist_id: Mapped[int] = mapped_column(ForeignKey("wishlists.id", ondelete="CASCADE"), index=True)
    friend_name: Mapped[str] = mapped_column(String(100))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="friend_wishlists")
    wishlist: Mapped["Wishlist"] = relationship(back_populates="bookmarks")

    __table_args__ = (UniqueConstraint("user_id", "wishlist_id", name="uq_friend_wishlist_per_user"),)
