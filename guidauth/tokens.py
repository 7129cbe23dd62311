"""Issuing and checking short-lived signed access tokens."""

from __future__ import annotations

import time

import jwt

ISSUER = "medods-auth-service"
ACCESS_TOKEN_LIFETIME = 30  # seconds
SIGNING_ALGORITHM = "HS512"
SIGNING_KEY = b"placeholder"

_ACCEPTED_ALGORITHMS = ["HS256", "HS384", "HS512"]


class InvalidTokenError(ValueError):
    """Raised when an access token cannot be trusted."""


def issue_access_token(guid: str, now: int | float | None = None) -> str:
    """Return a signed access token whose subject is ``guid``.

    ``now`` is the issue time in Unix seconds; the current time by default.
    """
    issued = int(time.time()) if now is None else int(now)
    claims = {
        "iss": ISSUER,
        "sub": guid,
        "iat": issued,
        "exp": issued + ACCESS_TOKEN_LIFETIME,
    }
    return jwt.encode(claims, SIGNING_KEY, algorithm=SIGNING_ALGORITHM)


def _decode_subject(token: str, *, verify_exp: bool) -> str:
    try:
        claims = jwt.decode(
            token,
            SIGNING_KEY,
            algorithms=_ACCEPTED_ALGORITHMS,
            options={"verify_exp": verify_exp, "verify_iat": False},
        )
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc) or "Invalid token") from exc

    subject = claims.get("sub")
    if not isinstance(subject, str):
        raise InvalidTokenError("Invalid token")
    return subject


def validate_access_token(token: str) -> str:
    """Return the GUID of a valid, unexpired access token.

    Raises InvalidTokenError for a bad signature, a malformed or expired
    token, or a token without a subject.
    """
    return _decode_subject(token, verify_exp=True)


def token_subject(token: str) -> str:
    """Return the GUID of a correctly signed access token, even if expired."""
    return _decode_subject(token, verify_exp=False)