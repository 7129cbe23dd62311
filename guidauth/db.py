"""Storage of hashed refresh tokens."""

from __future__ import annotations

import abc
import os
import sqlite3
import threading
from collections.abc import Mapping
from datetime import datetime, timezone

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS refresh_tokens (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        guid TEXT NOT NULL,
        token TEXT NOT NULL,
        expires TEXT NOT NULL
    )
"""

DATABASE_ENV = "GUIDAUTH_DATABASE"


class RefreshTokenNotFound(LookupError):
    """Raised when no refresh token is stored for a GUID."""


class Database(abc.ABC):
    """Where refresh token hashes are kept."""

    @abc.abstractmethod
    def set_refresh_token(
        self, guid: str, refresh_hash: bytes, expiration: datetime
    ) -> None:
        """Store a refresh token hash for ``guid``."""

    @abc.abstractmethod
    def get_refresh_token(self, guid: str) -> tuple[bytes, datetime]:
        """Return the stored hash and expiration for ``guid``."""


def _to_utc(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc)


class SqliteDatabase(Database):
    """Refresh token storage in an SQLite file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(os.fspath(path), check_same_thread=False)
        with self._conn:
            self._conn.execute(_SCHEMA)

    def set_refresh_token(
        self, guid: str, refresh_hash: bytes, expiration: datetime
    ) -> None:
        with self._lock, self._conn:
            self._conn.execute(
                "INSERT INTO refresh_tokens (guid, token, expires) VALUES (?, ?, ?)",
                (guid, refresh_hash.decode("ascii"), _to_utc(expiration).isoformat()),
            )

    def get_refresh_token(self, guid: str) -> tuple[bytes, datetime]:
        with self._lock:
            row = self._conn.execute(
                "SELECT token, expires FROM refresh_tokens WHERE guid = ? ORDER BY id",
                (guid,),
            ).fetchone()
        if row is None:
            raise RefreshTokenNotFound(guid)
        token, expires = row
        return token.encode("ascii"), datetime.fromisoformat(expires)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> SqliteDatabase:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_database(environ: Mapping[str, str] | None = None) -> SqliteDatabase:
    """Open the database whose path is given by the environment."""
    env = os.environ if environ is None else environ
    path = env.get(DATABASE_ENV, "")
    if not path:
        raise RuntimeError(f"${DATABASE_ENV} not set")
    return SqliteDatabase(path)