"""Registered users, kept as a single JSON list in users.json.

Each record: {"id", "username", "hash", "createdAt"} where hash is
"<salt>:<scrypt key hex>". The file is rewritten whole on every change.
"""

import hashlib
import hmac
import re
import secrets
from typing import Any

from .core import now_ms, read_json, user_projects_dir, users_file, write_json

_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1
_KEY_LEN = 64

_USERNAME = re.compile(r"[A-Za-z0-9_][A-Za-z0-9_.-]{0,63}")


def hash_password(password: str, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    key = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=_SCRYPT_N,
        r=_SCRYPT_R,
        p=_SCRYPT_P,
        dklen=_KEY_LEN,
    )
    return f"{salt}:{key.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, key = stored.partition(":")
    if not salt or not key:
        return False
    candidate = hash_password(password, salt).partition(":")[2]
    return hmac.compare_digest(candidate, key)


def list_users() -> list[dict[str, Any]]:
    path = users_file()
    if not path.is_file():
        return []
    return read_json(path)


def get_user(username: str) -> dict[str, Any] | None:
    for user in list_users():
        if user["username"] == username:
            return user
    return None


def register_user(username: str, password: str) -> dict[str, Any]:
    """Add a user and create their project workspace.

    Raises ValueError for a name unusable as a directory, FileExistsError
    if the username is taken.
    """
    if not _USERNAME.fullmatch(username):
        raise ValueError("Invalid username")
    users = list_users()
    if any(u["username"] == username for u in users):
        raise FileExistsError("User exists")
    created = now_ms()
    user = {
        "id": str(created),
        "username": username,
        "hash": hash_password(password),
        "createdAt": created,
    }
    users.append(user)
    write_json(users_file(), users)
    user_projects_dir(username).mkdir(parents=True, exist_ok=True)
    return user


def authenticate_user(username: str, password: str) -> dict[str, Any] | None:
    """Return the user record if the password matches, else None."""
    user = get_user(username)
    if user is None or not verify_password(password, user["hash"]):
        return None
    return user
