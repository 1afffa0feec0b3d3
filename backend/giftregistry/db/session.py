import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from giftregistry.db.base import Base
from giftregistry.models import Theme


logger = logging.getLogger(__name__)

DEFAULT_THEMES = [
    {"name": "Pink", "color": "#ff69b4", "background": "#fff0f5", "button_color": "#ff1493"},
    {"name": "Blue", "color": "#1e90ff", "background": "#f0f8ff", "button_color": "#0000ff"},
    {"name": "Green", "color": "#32cd32", "background": "#f0fff0", "button_color": "#008000"},
    {"name": "Purple", "color": "#8a2be2", "background": "#f8f0ff", "button_color": "#9400d3"},
]


def create_db_engine(database_url: str, **kwargs) -> Engine:
    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    with Session(engine) as db:
        if db.query(Theme).first() is None:
            db.add_all(Theme(**theme) for theme in DEFAULT_THEMES)
            db.commit()
            logger.info("Seeded default themes", extra={"count": len(DEFAULT_THEMES)})
