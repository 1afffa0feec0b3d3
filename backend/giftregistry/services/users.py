import logging

from sqlalchemy import func, update
from sqlalchemy.orm import Session, sessionmaker

from giftregistry.core.errors import AuthenticationRequired, UserNotFound, ValidationError
from giftregistry.models import User, Wishlist, WishlistItem
from giftregistry.schemas.user import ProfileUpdate, UserRead, UserStats
from giftregistry.services.credentials import CredentialService, is_valid_phone, is_valid_username


logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session_factory: sessionmaker[Session], credentials: CredentialService) -> None:
        self._session_factory = session_factory
        self._credentials = credentials

    def exists(self, user_id: int) -> bool:
        with self._session_factory() as db:
            return db.query(User.id).filter(User.id == user_id).first() is not None

    def get_profile(self, user_id: int) -> UserRead | None:
        with self._session_factory() as db:
            user = db.get(User, user_id)
            return UserRead.model_validate(user) if user else None

    def get_username(self, user_id: int) -> str | None:
        with self._session_factory() as db:
            row = db.query(User.username).filter(User.id == user_id).first()
            return row[0] if row else None

    def create_user(self, login: str, email: str, username: str, password: str) -> UserRead:
        with self._session_factory() as db:
            if db.query(User.id).filter(User.login == login).first():
                raise ValidationError("A user with this login already exists")
            if db.query(User.id).filter(User.email == email).first():
                raise ValidationError("A user with this email already exists")

            user = User(
                login=login,
                email=email,
                username=username,
                password_hash=self._credentials.hash(password),
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            logger.info("User registered", extra={"user_id": user.id})
            return UserRead.model_validate(user)

    def authenticate(self, login: str, password: str) -> UserRead | None:
        with self._session_factory() as db:
            user = db.query(User).filter(User.login == login).first()
            if not user or not self._credentials.verify(password, user.password_hash):
                return None
            return UserRead.model_validate(user)

    def update_profile(self, user_id: int, payload: ProfileUpdate) -> UserRead:
        username = payload.username.strip()
        email = payload.email.strip().lower()
        if not is_valid_username(username):
            raise ValidationError("Invalid username")
        if payload.phone and not is_valid_phone(payload.phone):
            raise ValidationError("Invalid phone number")

        with self._session_factory() as db:
            user = db.get(User, user_id)
            if not user:
                raise UserNotFound()
            if user.email != email:
                taken = db.query(User.id).filter(User.email == email, User.id != user_id).first()
                if taken:
                    raise ValidationError("A user with this email already exists")

            user.username = username
            user.email = email
            user.avatar_url = payload.avatar_url
            if "phone" in payload.model_fields_set:
                user.phone = payload.phone
            db.commit()
            db.refresh(user)
            return UserRead.model_validate(user)

    def delete_account(self, user_id: int, confirm_password: str) -> None:
        with self._session_factory() as db:
            user = db.get(User, user_id)
            if not user:
                raise UserNotFound()
            if not self._credentials.verify(confirm_password, user.password_hash):
                raise AuthenticationRequired("Wrong password confirmation")

            # Release gifts this user reserved on other people's lists.
            db.execute(
                update(WishlistItem)
                .where(WishlistItem.reserved_by_user_id == user_id)
                .values(is_reserved=False, reserved_by_user_id=None)
            )
            db.delete(user)
            db.commit()
            logger.info("User account deleted", extra={"user_id": user_id})

    def get_stats(self, user_id: int) -> UserStats:
        with self._session_factory() as db:
            wishlists_count = db.query(func.count(Wishlist.id)).filter(Wishlist.user_id == user_id).scalar()
            items_count = (
                db.query(func.count(WishlistItem.id))
                .join(Wishlist, Wishlist.id == WishlistItem.wishlist_id)
                .filter(Wishlist.user_id == user_id)
                .scalar()
            )
            reserved_items_count = (
                db.query(func.count(WishlistItem.id))
                .filter(WishlistItem.reserved_by_user_id == user_id)
                .scalar()
            )
            return UserStats(
                wishlists_count=wishlists_count or 0,
                items_count=items_count or 0,
                reserved_items_count=reserved_items_count or 0,
            )
