import secrets

from passlib.context import CryptContext


# Salted PBKDF2-SHA256 with a 32-byte salt, stored in passlib's modular crypt format.
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
    pbkdf2_sha256__default_rounds=10000,
    pbkdf2_sha256__salt_size=32,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Unrecognised or corrupted hash string
        return False


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


def generate_share_token() -> str:
    return secrets.token_urlsafe(16)
