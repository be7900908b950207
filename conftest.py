import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from econarrative import storage

TEST_DATA_DIR = Path("data-tests")


@pytest.fixture(autouse=True)
def clean_test_data():
    """Wipe and re-init data-tests/ before every test."""
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    storage.init_storage(TEST_DATA_DIR)
    yield
    # leave data-tests around after tests for inspection; CI can ignore it


@pytest.fixture
def client():
    from econarrative.app import create_app

    return TestClient(create_app(TEST_DATA_DIR))


@pytest.fixture
def auth_headers(client):
    """Register and log in a user; returns Authorization headers."""
    client.post("/api/auth/register", json={"username": "alice", "password": "pw123"})
    res = client.post("/api/auth/login", json={"username": "alice", "password": "pw123"})
    return {"Authorization": f"Bearer {res.json()['token']}"}
