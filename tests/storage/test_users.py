"""Tests for user registration and password checks."""

import json

import pytest

from econarrative import storage
from econarrative.storage import users


def test_register_and_authenticate():
    user = storage.register_user("alice", "secret")
    assert user["username"] == "alice"
    assert storage.authenticate_user("alice", "secret")["username"] == "alice"


def test_register_creates_workspace():
    storage.register_user("alice", "secret")
    assert storage.user_projects_dir("alice").is_dir()


def test_password_not_stored_in_clear():
    storage.register_user("alice", "secret")
    stored = json.loads(storage.users_file().read_text())
    assert "secret" not in stored[0]["hash"]
    salt, key = stored[0]["hash"].split(":")
    assert len(key) == 128


def test_wrong_password():
    storage.register_user("alice", "secret")
    assert storage.authenticate_user("alice", "nope") is None


def test_unknown_user():
    assert storage.authenticate_user("ghost", "x") is None


def test_register_duplicate():
    storage.register_user("alice", "secret")
    with pytest.raises(FileExistsError, match="User exists"):
        storage.register_user("alice", "other")


@pytest.mark.parametrize("name", ["../evil", "a/b", ".hidden", ""])
def test_register_rejects_unsafe_usernames(name):
    with pytest.raises(ValueError):
        storage.register_user(name, "pw")


def test_verify_password_malformed_hash():
    assert users.verify_password("x", "no-colon") is False
