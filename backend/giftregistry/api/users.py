from starlette.responses import Response

from giftregistry.api.auth import SessionCookie
from giftregistry.api.base import HandlerContext, ResourceHandler
from giftregistry.api.deps import AuthorizationHelper
from giftregistry.core.errors import UserNotFound
from giftregistry.schemas.user import DeleteAccountRequest, ProfileUpdate
from giftregistry.services.users import UserService


class UserHandler(ResourceHandler):
    prefixes = ("/api/user",)
    routes = (
        ("GET", r"/api/user/profile", "get_profile"),
        ("PUT", r"/api/user/profile", "update_profile"),
        ("DELETE", r"/api/user/profile", "delete_profile"),
        ("GET", r"/api/user/stats", "get_stats"),
    )

    def __init__(self, auth: AuthorizationHelper, users: UserService, cookie: SessionCookie) -> None:
        super().__init__(auth)
        self._users = users
        self._cookie = cookie

    def get_profile(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        profile = self._users.get_profile(user_id)
        if profile is None:
            raise UserNotFound()
        return self.ok(user=profile.to_json())

    def update_profile(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, ProfileUpdate)
        profile = self._users.update_profile(user_id, payload)
        return self.ok(message="Profile updated", user=profile.to_json())

    def delete_profile(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        payload = self.parse(context, DeleteAccountRequest)
        self._users.delete_account(user_id, payload.confirm_password)
        response = self.ok(message="Account deleted")
        self._cookie.clear(response)
        return response

    def get_stats(self, context: HandlerContext) -> Response:
        user_id = self.require_user(context)
        return self.ok(stats=self._users.get_stats(user_id).to_json())
