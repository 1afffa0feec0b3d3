from datetime import timedelta

import pytest

from giftregistry.container import Container
from giftregistry.core.clock import utcnow
from giftregistry.core.errors import UserNotFound
from giftregistry.models import UserSession


def _stored_expiry(container: Container, token: str):
    with container.session_factory() as db:
        return db.get(UserSession, token).expires_at


def _new_user(container: Container, login: str = "alice") -> int:
    user = container.users.create_user(login=login, email=f"{login}@example.com", username="Alice", password="secret1")
    return user.id


def test_create_session_for_unknown_user_fails(client, container: Container) -> None:
    with pytest.raises(UserNotFound):
        container.sessions.create_session(9999)


def test_created_session_validates_and_expires_in_seven_days(client, container: Container) -> None:
    user_id = _new_user(container)

    user_session = container.sessions.create_session(user_id)

    assert len(user_session.id) >= 32
    assert timedelta(days=6, hours=23) < user_session.expires_at - utcnow() <= timedelta(days=7)
    validated = container.sessions.validate_session(user_session.id)
    assert validated is not None
    assert validated.user_id == user_id


def test_session_tokens_are_unique(client, container: Container) -> None:
    user_id = _new_user(container)
    tokens = {container.sessions.create_session(user_id).id for _ in range(20)}
    assert len(tokens) == 20


def test_validate_rejects_missing_and_unknown_tokens(client, container: Container) -> None:
    assert container.sessions.validate_session(None) is None
    assert container.sessions.validate_session("") is None
    assert container.sessions.validate_session("no-such-token") is None


def test_expired_session_is_rejected_before_sweep(client, container: Container) -> None:
    user_id = _new_user(container)
    token = container.sessions.create_session(user_id).id
    container.session_store.extend(token, utcnow() - timedelta(seconds=1))

    assert container.sessions.validate_session(token) is None

    # Row is still stored until the sweep runs.
    with container.session_factory() as db:
        assert db.get(UserSession, token) is not None
    assert container.sessions.cleanup_expired() == 1
    with container.session_factory() as db:
        assert db.get(UserSession, token) is None


def test_session_far_from_expiry_is_renewed(client, container: Container) -> None:
    user_id = _new_user(container)
    token = container.sessions.create_session(user_id).id
    container.session_store.extend(token, utcnow() + timedelta(days=3))

    validated = container.sessions.validate_session(token)

    assert validated is not None
    assert validated.expires_at - utcnow() > timedelta(days=6, hours=23)
    assert _stored_expiry(container, token) == validated.expires_at


def test_session_in_last_hour_is_not_renewed(client, container: Container) -> None:
    # Renewal only happens while more than an hour remains; a session this
    # close to expiry runs out even if it keeps being used.
    user_id = _new_user(container)
    token = container.sessions.create_session(user_id).id
    near_expiry = utcnow() + timedelta(minutes=30)
    container.session_store.extend(token, near_expiry)

    validated = container.sessions.validate_session(token)

    assert validated is not None
    assert validated.expires_at == near_expiry
    assert _stored_expiry(container, token) == near_expiry


def test_logout_reports_whether_a_session_was_deleted(client, container: Container) -> None:
    user_id = _new_user(container)
    token = container.sessions.create_session(user_id).id

    assert container.sessions.logout(token) is True
    assert container.sessions.logout(token) is False
    assert container.sessions.validate_session(token) is None
