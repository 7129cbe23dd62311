"""HTTP service issuing access and refresh tokens for a GUID."""

from __future__ import annotations

import argparse
import functools
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

import bcrypt
from flask import Flask, g, jsonify, request

from guidauth.db import Database, open_database
from guidauth.tokens import (
    InvalidTokenError,
    issue_access_token,
    token_subject,
    validate_access_token,
)

REFRESH_TOKEN_LIFETIME = timedelta(hours=48)
BCRYPT_COST = 10


def _error(status: int, message: str):
    return jsonify({"error": message}), status


def _require_access_token(view: Callable) -> Callable:
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        if not header:
            return _error(401, "Authorization header missing")
        if not header.startswith("Bearer "):
            return _error(401, "'Bearer ' prefix missing")
        try:
            g.guid = validate_access_token(header[len("Bearer "):])
        except InvalidTokenError as exc:
            return _error(401, str(exc))
        return view(*args, **kwargs)

    return wrapper


def _now_like(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return datetime.now()
    return datetime.now(timezone.utc)


def create_app(db: Database) -> Flask:
    """Build the web application backed by ``db``."""
    app = Flask(__name__)

    @app.post("/login")
    def login():
        guid = request.args.get("guid", "")
        if not guid:
            return _error(400, "missing `guid` query parameter")

        access = issue_access_token(guid)
        refresh = str(uuid.uuid4())
        refresh_hash = bcrypt.hashpw(refresh.encode(), bcrypt.gensalt(BCRYPT_COST))
        try:
            db.set_refresh_token(
                guid, refresh_hash, datetime.now(timezone.utc) + REFRESH_TOKEN_LIFETIME
            )
        except Exception as exc:  # storage failure of any kind
            return _error(500, str(exc))

        return jsonify({"access": access, "refresh": refresh})

    @app.post("/refresh")
    def refresh_access():
        body = request.get_json(force=True, silent=True)
        if not isinstance(body, dict):
            return _error(400, "request body must be a JSON object")
        access = body.get("access") or ""
        refresh = body.get("refresh") or ""
        if not isinstance(access, str) or not isinstance(refresh, str):
            return _error(400, "`access` and `refresh` must be strings")

        try:
            guid = token_subject(access)
        except InvalidTokenError:
            guid = ""
        if not guid:
            return _error(401, "Invalid access token")

        try:
            refresh_hash, expires = db.get_refresh_token(guid)
        except Exception:  # missing row or storage failure
            return _error(401, "No refresh tokens for this GUID")

        if _now_like(expires) > expires:
            return _error(401, "Refresh token expired")

        try:
            matches = bcrypt.checkpw(refresh.encode(), bytes(refresh_hash))
        except ValueError:
            matches = False
        if not matches:
            return _error(401, "Refresh token doesn't match")

        return jsonify({"access": issue_access_token(guid)})

    @app.get("/guid")
    @_require_access_token
    def current_guid():
        return jsonify({"guid": g.guid})

    return app


def main(argv: list[str] | None = None) -> int:
    """Serve the application using the database named by the environment."""
    parser = argparse.ArgumentParser(
        prog="guidauth", description="Serve GUID access and refresh tokens."
    )
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8080")))
    args = parser.parse_args(argv)

    db = open_database()
    try:
        create_app(db).run(host=args.host, port=args.port)
    finally:
        db.close()
    return 0