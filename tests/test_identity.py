from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlmodel import select

from mergeboard.core.errors import ErrorKind, ServiceError
from mergeboard.models import User
from mergeboard.services import identity
from mergeboard.services.identity import (
    create_anonymous,
    normalize_email,
    resolve_user,
    upsert_by_email,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (" A@B.com ", "a@b.com"),
        ("", None),
        ("   ", None),
        (None, None),
        (42, None),
        # shape is not checked here
        ("Not-An-Email", "not-an-email"),
    ],
)
def test_normalize_email(raw, expected):
    assert normalize_email(raw) == expected


def test_latest_non_null_nickname_wins(session):
    first = resolve_user(session, "Al", "x@y.com")
    session.commit()
    second = resolve_user(session, "Bo", "x@y.com")
    session.commit()

    assert first.id == second.id
    users = session.exec(select(User)).all()
    assert len(users) == 1
    assert users[0].display_name == "Bo"
    assert users[0].email == "x@y.com"


def test_null_nickname_keeps_previous_name(session):
    upsert_by_email(session, "x@y.com", "Al")
    session.commit()
    user = upsert_by_email(session, "x@y.com", None)
    session.commit()
    session.refresh(user)
    assert user.display_name == "Al"


def test_conflict_advances_updated_at(session, monkeypatch):
    start = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    ticks = iter([start, start + timedelta(minutes=5)])
    monkeypatch.setattr(identity, "utcnow", lambda: next(ticks))

    user = upsert_by_email(session, "x@y.com", "Al")
    session.commit()
    session.refresh(user)
    created, first_update = user.created_at, user.updated_at

    upsert_by_email(session, "x@y.com", "Al")
    session.commit()
    session.refresh(user)

    assert user.created_at == created
    assert user.updated_at > first_update


def test_anonymous_users_are_never_merged(session):
    first = resolve_user(session, "Guest", None)
    second = resolve_user(session, "Guest", None)
    session.commit()

    assert first.id != second.id
    assert first.email is None and second.email is None
    assert first.is_anonymous
    assert first.anon_key and second.anon_key
    assert first.anon_key != second.anon_key


def test_anonymous_user_does_not_collide_with_email_lookup(session):
    create_anonymous(session, "Guest")
    upsert_by_email(session, "guest@example.com", "Guest")
    session.commit()
    users = session.exec(select(User)).all()
    assert len(users) == 2
    assert sum(1 for user in users if user.email is None) == 1


def test_unsupported_dialect_is_a_configuration_error():
    bind = SimpleNamespace(dialect=SimpleNamespace(name="mysql"))
    fake_session = SimpleNamespace(get_bind=lambda: bind)
    with pytest.raises(ServiceError) as excinfo:
        upsert_by_email(fake_session, "a@b.co", "Al")
    assert excinfo.value.kind is ErrorKind.CONFIGURATION
    assert excinfo.value.status_code == 503
    assert "mysql" in excinfo.value.message
