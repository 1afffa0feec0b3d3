from datetime import datetime

from sqlalchemy import delete, update
from sqlalchemy.orm import Session, sessionmaker

from giftregistry.core.clock import utcnow
from giftregistry.models import UserSession


class SessionStore:
    """Persistence for login sessions; every call is its own unit of work."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create(self, user_session: UserSession) -> UserSession:
        with self._session_factory() as db:
            db.add(user_session)
            db.commit()
            db.refresh(user_session)
            return user_session

    def get(self, token: str) -> UserSession | None:
        with self._session_factory() as db:
            return (
                db.query(UserSession)
                .filter(UserSession.id == token, UserSession.expires_at > utcnow())
                .first()
            )

    def extend(self, token: str, expires_at: datetime) -> bool:
        with self._session_factory() as db:
            result = db.execute(
                update(UserSession).where(UserSession.id == token).values(expires_at=expires_at)
            )
            db.commit()
            return result.rowcount > 0

    def delete(self, token: str) -> bool:
        with self._session_factory() as db:
            result = db.execute(delete(UserSession).where(UserSession.id == token))
            db.commit()
            return result.rowcount > 0

    def cleanup_expired(self) -> int:
        with self._session_factory() as db:
            result = db.execute(delete(UserSession).where(UserSession.expires_at <= utcnow()))
            db.commit()
            return result.rowcount
