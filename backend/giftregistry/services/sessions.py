import logging
from datetime import timedelta

from giftregistry.core.clock import utcnow
from giftregistry.core.errors import UserNotFound
from giftregistry.core.security import generate_session_token
from giftregistry.models import UserSession
from giftregistry.services.session_store import SessionStore
from giftregistry.services.users import UserService


logger = logging.getLogger(__name__)


class SessionManager:
    """Issues, validates and revokes login sessions.

    Validation renews a session back to a full lifetime only while more than
    ``renew_threshold`` of it remains. A session inside its final window is
    left alone and expires on schedule even if the user keeps making
    requests.
    """

    def __init__(
        self,
        store: SessionStore,
        users: UserService,
        lifetime: timedelta = timedelta(days=7),
        renew_threshold: timedelta = timedelta(hours=1),
    ) -> None:
        self._store = store
        self._users = users
        self.lifetime = lifetime
        self.renew_threshold = renew_threshold

    def create_session(self, user_id: int) -> UserSession:
        if not self._users.exists(user_id):
            raise UserNotFound()

        now = utcnow()
        user_session = UserSession(
            id=generate_session_token(),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.lifetime,
        )
        created = self._store.create(user_session)
        logger.info("Session created", extra={"user_id": user_id})
        return created

    def validate_session(self, token: str | None) -> UserSession | None:
        if not token:
            return None

        user_session = self._store.get(token)
        if user_session is None:
            return None

        now = utcnow()
        if user_session.expires_at - now > self.renew_threshold:
            user_session.expires_at = now + self.lifetime
            self._store.extend(user_session.id, user_session.expires_at)
        return user_session

    def logout(self, token: str | None) -> bool:
        if not token:
            return False
        deleted = self._store.delete(token)
        if deleted:
            logger.info("Session revoked")
        return deleted

    def cleanup_expired(self) -> int:
        removed = self._store.cleanup_expired()
        if removed:
            logger.info("Expired sessions removed", extra={"count": removed})
        return removed
