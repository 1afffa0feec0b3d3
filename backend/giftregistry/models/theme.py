from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from giftregistry.db.base import Base


class Theme(Base):
    __tablename__ = "themes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50))
    color: Mapped[str] = mapped_column(String(16))
    background: Mapped[str] = mapped_column(String(16))
    button_color: Mapped[str] = mapped_column(String(16))
