from datetime import datetime, timedelta, timezone

import pytest

from models.refresh_token import RefreshToken
from utils.exceptions import NotFoundError

EXPIRES = datetime(2030, 1, 2, tzinfo=timezone.utc)


@pytest.fixture
def user(services):
    return services.users.create(name="Alice", email="alice@example.com", password_hash="x")


def test_record_then_find_active(services, user):
    services.refresh_tokens.record(user.id, "jti-1", "token-1", EXPIRES)

    row = services.refresh_tokens.find_active_by_jti("jti-1")
    assert row.user_id == user.id
    assert row.token == "token-1"
    assert row.is_revoked is False


def test_unknown_jti_is_not_found(services):
    with pytest.raises(NotFoundError):
        services.refresh_tokens.find_active_by_jti("nope")


def test_revoke_is_conditional(services, user):
    ledger = services.refresh_tokens
    ledger.record(user.id, "jti-1", "token-1", EXPIRES)
    ledger.find_active_by_jti("jti-1")

    assert ledger.revoke_by_jti("jti-1") == 1
    assert ledger.revoke_by_jti("jti-1") == 0
    assert ledger.revoke_by_jti("unknown") == 0

    with pytest.raises(NotFoundError):
        ledger.find_active_by_jti("jti-1")


def test_revoked_rows_are_kept(services, user):
    ledger = services.refresh_tokens
    ledger.record(user.id, "jti-1", "token-1", EXPIRES)
    ledger.revoke_by_jti("jti-1")

    row = services.storage.session.query(RefreshToken).filter_by(jti="jti-1").one()
    assert row.is_revoked is True


def test_revoke_all_for_user_leaves_other_users_alone(services, user):
    other = services.users.create(name="Bob", email="bob@example.com", password_hash="x")
    ledger = services.refresh_tokens
    ledger.record(user.id, "a1", "t-a1", EXPIRES)
    ledger.record(user.id, "a2", "t-a2", EXPIRES)
    ledger.record(other.id, "b1", "t-b1", EXPIRES)
    ledger.revoke_by_jti("a2")

    assert ledger.revoke_all_for_user(user.id) == 1
    assert ledger.find_active_by_jti("b1").user_id == other.id
    with pytest.raises(NotFoundError):
        ledger.find_active_by_jti("a1")


def test_expiry_is_stored(services, user):
    services.refresh_tokens.record(user.id, "jti-1", "token-1", EXPIRES)
    services.storage.close()

    row = services.refresh_tokens.find_active_by_jti("jti-1")
    stored = row.expires_at if row.expires_at.tzinfo else row.expires_at.replace(tzinfo=timezone.utc)
    assert stored == EXPIRES
    assert stored - timedelta(days=1) == datetime(2030, 1, 1, tzinfo=timezone.utc)
