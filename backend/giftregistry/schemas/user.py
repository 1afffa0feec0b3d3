from datetime import datetime

from pydantic import EmailStr

from giftregistry.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    login: str = ""
    password: str = ""
    confirm_password: str = ""
    username: str = ""
    email: EmailStr


class LoginRequest(CamelModel):
    login: str = ""
    password: str = ""


class UserSummary(CamelModel):
    id: int
    username: str


class UserRead(CamelModel):
    id: int
    username: str
    email: str
    login: str
    avatar_url: str | None = None
    phone: str | None = None
    created_at: datetime | None = None


class ProfileUpdate(CamelModel):
    username: str
    email: EmailStr
    avatar_url: str | None = None
    phone: str | None = None


class DeleteAccountRequest(CamelModel):
    confirm_password: str = ""


class UserStats(CamelModel):
    wishlists_count: int
    items_count: int
    reserved_items_count: int
