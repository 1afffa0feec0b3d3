import re

from giftregistry.core.errors import ValidationError
from giftregistry.core.security import hash_password, verify_password
from giftregistry.schemas.user import RegisterRequest


USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]{3,20}$")
LOGIN_RE = re.compile(r"^[a-zA-Z0-9_.\-]{3,50}$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")
MIN_PASSWORD_LENGTH = 6


def is_valid_username(username: str) -> bool:
    return bool(username) and USERNAME_RE.match(username) is not None


def is_valid_password(password: str) -> bool:
    if not password or not password.strip() or len(password) < MIN_PASSWORD_LENGTH:
        return False
    has_letter = any(ch.isalpha() for ch in password)
    has_digit = any(ch.isdigit() for ch in password)
    return has_letter and has_digit


def is_valid_phone(phone: str) -> bool:
    return PHONE_RE.match(phone) is not None


class CredentialService:
    """Password hashing plus input checks for registration and login."""

    def hash(self, password: str) -> str:
        return hash_password(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password:
            return False
        return verify_password(password, password_hash)

    def validate_registration(self, payload: RegisterRequest) -> None:
        if not LOGIN_RE.match(payload.login.strip()):
            raise ValidationError("Login must be 3-50 characters (letters, digits, '_', '.', '-')")
        if not is_valid_username(payload.username.strip()):
            raise ValidationError("Username must be 3-20 characters (latin letters, digits, underscores)")
        if not is_valid_password(payload.password):
            raise ValidationError("Password must be at least 6 characters and contain letters and digits")
        if payload.password != payload.confirm_password:
            raise ValidationError("Passwords do not match")

    def validate_login(self, login: str, password: str) -> None:
        if not login.strip() or not password.strip():
            raise ValidationError("Login and password are required")
