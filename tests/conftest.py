from __future__ import annotations

import mongomock
import pytest
from fastapi.testclient import TestClient

from potion_api.api.server import create_app
from potion_api.config import Config


TEST_USER = {"username": "alchemist", "password": "s3cret-brew"}


@pytest.fixture
def cfg() -> Config:
    return Config(
        MONGO_DB_NAME="potions_test",
        AUTH_JWT_SECRET="test-secret",
        AUTH_COOKIE_NAME="potion_token",
        AUTH_PASSWORD_ROUNDS=1000,
        CORS_ALLOW_ORIGINS="",
    )


@pytest.fixture
def db():
    return mongomock.MongoClient()["potions_test"]


@pytest.fixture
def client(cfg, db):
    with TestClient(create_app(cfg, db=db)) as c:
        yield c


@pytest.fixture
def auth_client(client):
    assert client.post("/auth/register", json=TEST_USER).status_code == 201
    assert client.post("/auth/login", json=TEST_USER).status_code == 200
    return client


@pytest.fixture
def seed(db):
    """Insert potions directly and return them keyed by name."""

    def _seed(*potions):
        for p in potions:
            db["potions"].insert_one(dict(p))
        return {p.get("name"): p for p in potions}

    return _seed
