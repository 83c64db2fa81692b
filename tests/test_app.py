from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from potion_api.api.server import create_app
from potion_api.auth.security import create_access_token
from potion_api.config import Config
from potion_api.errors import field_errors


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_startup_creates_unique_username_index(client, db):
    indexes = db["users"].index_information()
    assert indexes["username_unique"]["unique"] is True


def test_openapi_lists_routes(client):
    doc = client.get("/openapi.json").json()
    assert doc["info"]["title"] == "Potion API"
    for path in ("/auth/register", "/auth/login", "/potions/{potion_id}", "/analytics/search"):
        assert path in doc["paths"]


def test_config_defaults_are_local_dev_friendly():
    cfg = Config()
    assert cfg.AUTH_TOKEN_EXPIRE_MINUTES > 0
    assert cfg.MONGO_URI


def test_store_failure_maps_to_500(cfg):
    db = MagicMock()
    db.__getitem__.return_value.find.side_effect = ServerSelectionTimeoutError("store down")
    client = TestClient(create_app(cfg, db=db))
    token = create_access_token(secret=cfg.AUTH_JWT_SECRET, user_id="u1", username="alchemist", expires_minutes=5)
    client.cookies.set(cfg.AUTH_COOKIE_NAME, token)

    r = client.get("/potions")
    assert r.status_code == 500
    assert r.json() == {"error": "store_error"}


def test_missing_config_is_a_server_error(cfg, db):
    app = create_app(cfg, db=db)
    del app.state.cfg
    client = TestClient(app)

    r = client.get("/potions")
    assert r.status_code == 500
    assert r.json() == {"error": "server_config_missing"}


@pytest.mark.parametrize(
    "loc, field",
    [
        (("body", 1), "body"),
        (("body", "price"), "price"),
        (("query", "min"), "min"),
        (("ratings", "flavor"), "ratings.flavor"),
        (("ingredients", 0), "ingredients.0"),
        ((), "body"),
    ],
)
def test_field_errors_names_the_offending_field(loc, field):
    assert field_errors([{"loc": loc, "msg": "bad"}]) == [{"field": field, "msg": "bad"}]
