from starlette.requests import Request

from giftregistry.models import UserSession
from giftregistry.services.sessions import SessionManager


BEARER_SCHEME = "bearer"
SESSION_COOKIE = "session_id"
SESSION_QUERY_PARAM = "session"


def parse_cookie_header(header: str | None, name: str) -> str | None:
    if not header:
        return None
    for part in header.split(";"):
        key, sep, value = part.partition("=")
        if sep and key.strip() == name:
            return value.strip()
    return None


def extract_session_token(request: Request, cookie_name: str = SESSION_COOKIE) -> str | None:
    """Find the session token on a request.

    Checked in order, first hit wins: ``Authorization: Bearer <token>``, the
    session cookie, then the ``session`` query parameter.
    """
    authorization = request.headers.get("authorization")
    if authorization:
        scheme, _, credentials = authorization.strip().partition(" ")
        if scheme.lower() == BEARER_SCHEME:
            # A Bearer header settles it, even an empty one.
            return credentials.strip() or None

    token = parse_cookie_header(request.headers.get("cookie"), cookie_name)
    if token:
        return token

    return request.query_params.get(SESSION_QUERY_PARAM) or None


class AuthorizationHelper:
    """Resolves the caller of a request; ``None`` always means anonymous."""

    def __init__(self, sessions: SessionManager, cookie_name: str = SESSION_COOKIE) -> None:
        self._sessions = sessions
        self.cookie_name = cookie_name

    def token(self, request: Request) -> str | None:
        return extract_session_token(request, self.cookie_name)

    def resolve_session(self, request: Request) -> UserSession | None:
        return self._sessions.validate_session(self.token(request))

    def resolve_user_id(self, request: Request) -> int | None:
        user_session = self.resolve_session(request)
        return user_session.user_id if user_session else None
