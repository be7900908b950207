"""Bearer-token sessions.

Tokens look like "<random>.<signature>", where the signature is an
HMAC-SHA256 of the random part under the app secret. A token is accepted
only if the signature matches AND the token is still present in the
session store, so logging out or restarting (with the in-memory store)
invalidates it.

The session store is injected:

    class SessionStore(Protocol):
        def get(self, key: str) -> str | None: ...
        def set(self, key: str, value: str, ttl: float | None = None) -> None: ...
        def delete(self, key: str) -> None: ...

MemorySessionStore keeps sessions in a process-local dict. Any other
backing (file, external cache) only needs those three methods.
"""

import hashlib
import hmac
import secrets
import time
from typing import Protocol

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

DEFAULT_SECRET = "default_secret_key_change_me"


class SessionStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: float | None = None) -> None: ...

    def delete(self, key: str) -> None: ...


class MemorySessionStore:
    """Dict-backed sessions with optional per-key expiry. Lost on restart."""

    def __init__(self) -> None:
        self._items: dict[str, tuple[str, float | None]] = {}

    def get(self, key: str) -> str | None:
        item = self._items.get(key)
        if item is None:
            return None
        value, expires_at = item
        if expires_at is not None and time.monotonic() >= expires_at:
            del self._items[key]
            return None
        return value

    def set(self, key: str, value: str, ttl: float | None = None) -> None:
        expires_at = time.monotonic() + ttl if ttl is not None else None
        self._items[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._items.pop(key, None)


class Authenticator:
    """Issues, resolves and revokes bearer tokens."""

    def __init__(
        self,
        secret: str,
        sessions: SessionStore,
        ttl_seconds: float | None = 24 * 3600,
    ) -> None:
        self._secret = secret.encode("utf-8")
        self._sessions = sessions
        self._ttl = ttl_seconds

    def _sign(self, nonce: str) -> str:
        return hmac.new(self._secret, nonce.encode("utf-8"), hashlib.sha256).hexdigest()

    def issue(self, username: str) -> str:
        nonce = secrets.token_urlsafe(32)
        token = f"{nonce}.{self._sign(nonce)}"
        self._sessions.set(token, username, ttl=self._ttl)
        return token

    def resolve(self, token: str) -> str | None:
        """Username for a valid live token, else None."""
        nonce, _, signature = token.partition(".")
        if not nonce or not hmac.compare_digest(signature, self._sign(nonce)):
            return None
        return self._sessions.get(token)

    def revoke(self, token: str) -> None:
        self._sessions.delete(token)


_bearer = HTTPBearer(auto_error=False)


def bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(401, "Unauthorized")
    return credentials.credentials


def current_user(request: Request, token: str = Depends(bearer_token)) -> str:
    """FastAPI dependency: username behind the request's bearer token."""
    authenticator: Authenticator = request.app.state.authenticator
    username = authenticator.resolve(token)
    if username is None:
        raise HTTPException(403, "Forbidden")
    return username
