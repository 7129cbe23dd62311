"""GUID-based authentication service with JWT access tokens and SQLite-stored refresh tokens."""

__version__ = "0.1.0"
__all__ = ["api", "db", "tokens"]