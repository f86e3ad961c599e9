"""Tests for the in-memory RecordStore"""

import pytest

from vidforge.models.user import User
from vidforge.stores.record_store import RecordStore
from vidforge.utils.exceptions import NotFoundError


def _user(n: int) -> User:
    return User(id=f"u{n}", email=f"user{n}@example.com", display_name=f"User {n}")


@pytest.fixture
def store():
    return RecordStore("users")


def test_insert_back_and_front(store):
    store.insert(_user(1))
    store.insert(_user(2))
    store.insert(_user(3), front=True)
    assert [u.id for u in store.all()] == ["u3", "u1", "u2"]
    assert len(store) == 3


def test_find_by_id_and_find_one(store):
    for n in range(3):
        store.insert(_user(n))
    assert store.find_by_id("u1").email == "user1@example.com"
    assert store.find_by_id("missing") is None
    assert store.find_one(lambda u: u.email.startswith("user2")).id == "u2"
    assert store.find_one(lambda u: False) is None


def test_update_merges_only_given_fields(store):
    store.insert(_user(1))
    updated = store.update("u1", {"display_name": "Renamed"})
    assert updated.display_name == "Renamed"
    assert updated.email == "user1@example.com"
    assert store.find_by_id("u1").display_name == "Renamed"


def test_update_cannot_change_key(store):
    store.insert(_user(1))
    updated = store.update("u1", {"id": "other"})
    assert updated.id == "u1"


def test_update_and_remove_missing_raise(store):
    with pytest.raises(NotFoundError):
        store.update("nope", {"display_name": "x"})
    with pytest.raises(NotFoundError):
        store.remove("nope")


def test_remove_returns_record(store):
    store.insert(_user(1))
    store.insert(_user(2))
    removed = store.remove("u1")
    assert removed.id == "u1"
    assert "u1" not in store
    assert len(store) == 1


def test_truncate_keeps_first_entries(store):
    for n in range(5):
        store.insert(_user(n))
    evicted = store.truncate(3)
    assert [u.id for u in evicted] == ["u3", "u4"]
    assert [u.id for u in store] == ["u0", "u1", "u2"]
    assert store.truncate(10) == []
