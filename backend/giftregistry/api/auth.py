from datetime import timedelta

from starlette.responses import Response

from giftregistry.api.base import HandlerContext, ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.models import UserSession
from giftregistry.schemas.user import LoginRequest, RegisterRequest, UserSummary
from giftregistry.services.auth import AuthService


EXPIRED_COOKIE_DATE = "Thu, 01 Jan 1970 00:00:00 GMT"


class SessionCookie:
    def __init__(self, name: str, lifetime: timedelta, secure: bool = False) -> None:
        self.name = name
        self.lifetime = lifetime
        self.secure = secure

    def set(self, response: Response, user_session: UserSession) -> None:
        response.set_cookie(
            self.name,
            user_session.id,
            max_age=int(self.lifetime.total_seconds()),
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )

    def clear(self, response: Response) -> None:
        response.set_cookie(
            self.name,
            "",
            max_age=0,
            expires=EXPIRED_COOKIE_DATE,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )


class AuthHandler(ResourceHandler):
    prefixes = ("/api/auth",)
    routes = (
        ("POST", r"/api/auth/register", "register"),
        ("POST", r"/api/auth/login", "login"),
        ("POST", r"/api/auth/logout", "logout"),
        ("DELETE", r"/api/auth/session", "logout"),
    )

    def __init__(self, auth: AuthorizationHelper, auth_service: AuthService, cookie: SessionCookie) -> None:
        super().__init__(auth)
        self._auth_service = auth_service
        self._cookie = cookie

    def register(self, context: HandlerContext) -> Response:
        payload = self.parse(context, RegisterRequest)
        user, user_session = self._auth_service.register(payload)
        return self._signed_in(user_session, UserSummary(id=user.id, username=user.username), "Registration successful")

    def login(self, context: HandlerContext) -> Response:
        payload = self.parse(context, LoginRequest)
        user, user_session = self._auth_service.login(payload)
        return self._signed_in(user_session, UserSummary(id=user.id, username=user.username), "Login successful")

    def logout(self, context: HandlerContext) -> Response:
        token = self.auth.token(context.request)
        if token:
            self._auth_service.logout(token)
        response = self.ok(message="Logged out")
        self._cookie.clear(response)
        return response

    def _signed_in(self, user_session: UserSession, user: UserSummary, message: str) -> Response:
        response = self.ok(message=message, user=user.to_json(), sessionId=user_session.id)
        self._cookie.set(response, user_session)
        return response
