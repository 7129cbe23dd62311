# guidauth

A small HTTP authentication service. A client identified by a GUID logs in and
receives a pair of tokens:

- an **access token**: a JWT signed with HS512, with issuer
  `medods-auth-service` and the GUID as its subject, which expires 30 seconds
  after issue;
- a **refresh token**: a random UUID string. Only its bcrypt hash (cost 10) is
  stored, together with an expiry time 48 hours ahead.

An access token together with a matching, unexpired refresh token can be
exchanged for a new access token, even after the access token itself has
expired.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Running the server

Refresh token hashes are kept in an SQLite file. Its path is taken from the
`GUIDAUTH_DATABASE` environment variable; the command stops with an error if
that variable is not set.

```
GUIDAUTH_DATABASE=tokens.sqlite3 guidauth
```

Options:

- `--host` — address to listen on (default `0.0.0.0`)
- `--port` — port to listen on (default: the `PORT` environment variable, or
  `8080`)

The server is Flask's built-in development server.

## Endpoints

### `POST /login?guid=<guid>`

Issues a token pair for the GUID and stores the hash of the refresh token.

- `200` with `{"access": "...", "refresh": "..."}`
- `400` if the `guid` query parameter is missing or empty
- `500` if the refresh token cannot be stored

### `POST /refresh`

Body: `{"access": "<access token>", "refresh": "<refresh token>"}`.

The access token must carry a valid signature and a GUID, but may have expired.

- `200` with `{"access": "..."}` holding a fresh access token
- `400` if the body is not a JSON object, or `access` or `refresh` is not a
  string
- `401` if the access token is invalid or carries no GUID, no refresh token is
  stored for the GUID, the stored refresh token has expired, or the refresh
  token does not match the stored hash

When several refresh tokens have been stored for a GUID, the first one stored
is the one checked.

### `GET /guid`

Requires an `Authorization: Bearer <access token>` header, for example
`Authorization: Bearer token`.

- `200` with `{"guid": "..."}`
- `401` if the header is missing, lacks the `Bearer ` prefix, or the token is
  invalid or expired

Every error response has the form `{"error": "<message>"}`.

## Using it as a library

```python
from guidauth.api import create_app
from guidauth.db import SqliteDatabase

with SqliteDatabase("tokens.sqlite3") as db:
    client = create_app(db).test_client()
    pair = client.post("/login?guid=123123").get_json()
    print(client.get("/guid", headers={"Authorization": "Bearer " + pair["access"]}).get_json())
```

`guidauth.db` provides:

- `Database` — the abstract store: `set_refresh_token(guid, refresh_hash,
  expiration)` and `get_refresh_token(guid)`, which returns
  `(refresh_hash, expiration)` and raises `RefreshTokenNotFound` when nothing
  is stored. Any implementation can be passed to `create_app`.
- `SqliteDatabase(path)` — the SQLite implementation, with `close()` and use
  as a context manager.
- `open_database(environ=None)` — opens a `SqliteDatabase` at the path in
  `GUIDAUTH_DATABASE` (read from `environ`, or `os.environ` by default).

`guidauth.tokens` provides `issue_access_token(guid, now=None)`,
`validate_access_token(token)` (raising `InvalidTokenError` for a bad, expired
or subject-less token) and `token_subject(token)`, which returns the GUID of a
correctly signed token even if it has expired.

## What it does not do

- The signing key is fixed in `guidauth.tokens`; it cannot be set from the
  environment or the command line.
- `/refresh` issues only a new access token. It does not issue a new refresh
  token or invalidate the old one, and stored refresh tokens are never cleaned
  up.
- GUIDs are not checked for form; any non-empty string is accepted.