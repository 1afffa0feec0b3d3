import logging

from giftregistry.core.errors import AuthenticationRequired
from giftregistry.models import UserSession
from giftregistry.schemas.user import LoginRequest, RegisterRequest, UserRead
from giftregistry.services.credentials import CredentialService
from giftregistry.services.sessions import SessionManager
from giftregistry.services.users import UserService


logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, users: UserService, sessions: SessionManager, credentials: CredentialService) -> None:
        self._users = users
        self._sessions = sessions
        self._credentials = credentials

    def register(self, payload: RegisterRequest) -> tuple[UserRead, UserSession]:
        self._credentials.validate_registration(payload)
        user = self._users.create_user(
            login=payload.login.strip(),
            email=payload.email.strip().lower(),
            username=payload.username.strip(),
            password=payload.password,
        )
        return user, self._sessions.create_session(user.id)

    def login(self, payload: LoginRequest) -> tuple[UserRead, UserSession]:
        self._credentials.validate_login(payload.login, payload.password)
        user = self._users.authenticate(payload.login.strip(), payload.password)
        if user is None:
            logger.info("Failed login attempt")
            raise AuthenticationRequired("Invalid login or password")
        return user, self._sessions.create_session(user.id)

    def logout(self, token: str | None) -> bool:
        return self._sessions.logout(token)
