import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from guidauth.db import (
    Database,
    RefreshTokenNotFound,
    SqliteDatabase,
    open_database,
)

HASH_A = b"$2b$10$" + b"a" * 53
HASH_B = b"$2b$10$" + b"b" * 53


@pytest.fixture
def db(tmp_path):
    with SqliteDatabase(tmp_path / "tokens.db") as database:
        yield database


def test_round_trip(db):
    expiration = datetime.now(timezone.utc) + timedelta(hours=48)
    db.set_refresh_token("123123", HASH_A, expiration)
    stored_hash, stored_expiration = db.get_refresh_token("123123")
    assert stored_hash == HASH_A
    assert stored_expiration == expiration


def test_missing_guid_raises(db):
    with pytest.raises(RefreshTokenNotFound):
        db.get_refresh_token("nobody")


def test_first_stored_token_is_returned(db):
    expiration = datetime.now(timezone.utc)
    db.set_refresh_token("123123", HASH_A, expiration)
    db.set_refresh_token("123123", HASH_B, expiration)
    assert db.get_refresh_token("123123")[0] == HASH_A


def test_tokens_are_kept_per_guid(db):
    expiration = datetime.now(timezone.utc)
    db.set_refresh_token("first", HASH_A, expiration)
    db.set_refresh_token("second", HASH_B, expiration)
    assert db.get_refresh_token("second")[0] == HASH_B
    assert db.get_refresh_token("first")[0] == HASH_A


def test_naive_expiration_is_read_back_as_same_moment(db):
    naive = datetime(2030, 1, 1, 12, 0, 0)
    db.set_refresh_token("123123", HASH_A, naive)
    _, stored = db.get_refresh_token("123123")
    assert stored == naive.astimezone(timezone.utc)
    assert stored.tzinfo is not None


def test_data_survives_reopen(tmp_path):
    path = tmp_path / "tokens.db"
    expiration = datetime.now(timezone.utc)
    with SqliteDatabase(path) as first:
        first.set_refresh_token("123123", HASH_A, expiration)
    with SqliteDatabase(path) as second:
        assert second.get_refresh_token("123123") == (HASH_A, expiration)


def test_closed_database_refuses_queries(tmp_path):
    database = SqliteDatabase(tmp_path / "tokens.db")
    database.close()
    with pytest.raises(sqlite3.ProgrammingError):
        database.get_refresh_token("123123")


def test_open_database_requires_path():
    with pytest.raises(RuntimeError, match="not set"):
        open_database({})


def test_open_database_uses_environment(tmp_path):
    path = tmp_path / "env.db"
    database = open_database({"GUIDAUTH_DATABASE": str(path)})
    try:
        assert isinstance(database, Database)
        database.set_refresh_token("123123", HASH_A, datetime.now(timezone.utc))
        assert database.get_refresh_token("123123")[0] == HASH_A
    finally:
        database.close()
    assert path.exists()