"""Tests for SessionTable TTL semantics"""

from datetime import datetime, timedelta, timezone

from vidforge.stores.session_table import SessionState, SessionTable

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_create_sets_24h_expiry():
    table = SessionTable()
    token = table.create("user-1", now=T0)
    session = table.get(token)
    assert token.startswith("sess_")
    assert session.owner_id == "user-1"
    assert session.created_at == T0
    assert session.expires_at == T0 + timedelta(hours=24)


def test_tokens_are_unique():
    table = SessionTable()
    tokens = {table.create("user-1") for _ in range(50)}
    assert len(tokens) == 50


def test_validate_valid_until_expiry_instant():
    table = SessionTable()
    token = table.create("user-1", now=T0)
    lookup = table.validate(token, now=T0 + timedelta(hours=24))
    assert lookup.state == SessionState.VALID
    assert lookup.owner_id == "user-1"


def test_validate_expired_deletes_entry():
    table = SessionTable()
    token = table.create("user-1", now=T0)
    lookup = table.validate(token, now=T0 + timedelta(hours=24, seconds=1))
    assert lookup.state == SessionState.EXPIRED
    assert token not in table
    assert table.validate(token, now=T0).state == SessionState.NOT_FOUND


def test_validate_unknown_token():
    assert SessionTable().validate("nope").state == SessionState.NOT_FOUND


def test_revoke_is_idempotent():
    table = SessionTable()
    token = table.create("user-1")
    assert table.revoke(token) is True
    assert table.revoke(token) is False
    assert table.revoke("never-existed") is False


def test_sweep_removes_expired_inclusive():
    table = SessionTable(ttl=timedelta(hours=1))
    old = table.create("a", now=T0)
    boundary = table.create("b", now=T0 + timedelta(minutes=30))
    fresh = table.create("c", now=T0 + timedelta(hours=2))

    removed = table.sweep(now=T0 + timedelta(hours=1, minutes=30))

    assert removed == 2
    assert old not in table
    assert boundary not in table
    assert fresh in table
    assert len(table) == 1
