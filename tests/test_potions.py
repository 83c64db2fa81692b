from __future__ import annotations

from bson import ObjectId


ELIXIR = {
    "name": "Elixir of Focus",
    "price": 12.5,
    "score": 8,
    "ingredients": ["sage", {"item": "owl feather", "qty": 2}],
    "ratings": {"strength": 7, "flavor": 3.5},
    "tryDate": "2024-05-01",
    "categories": ["mind", "study"],
    "vendor_id": "v1",
}


def test_create_then_get_round_trips_fields(auth_client):
    r = auth_client.post("/potions", json=ELIXIR)
    assert r.status_code == 201
    created = r.json()
    potion_id = created["_id"]
    assert ObjectId.is_valid(potion_id)

    r = auth_client.get(f"/potions/{potion_id}")
    assert r.status_code == 200
    got = r.json()
    for key in ("name", "price", "score", "ingredients", "ratings", "categories", "vendor_id"):
        assert got[key] == ELIXIR[key]
    assert got["tryDate"].startswith("2024-05-01")


def test_create_accepts_partial_and_drops_unknown_fields(auth_client, db):
    r = auth_client.post("/potions", json={"name": "Mystery", "$where": "1", "color": "blue"})
    assert r.status_code == 201

    stored = db["potions"].find_one({"_id": ObjectId(r.json()["_id"])})
    assert set(stored) == {"_id", "name"}


def test_create_rejects_bad_types(auth_client, db):
    r = auth_client.post("/potions", json={"name": "Bad", "price": "expensive"})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "price"
    assert db["potions"].count_documents({}) == 0


def test_list_and_names(auth_client, seed):
    seed({"name": "A", "price": 1}, {"name": "B", "price": 2}, {"price": 3})

    r = auth_client.get("/potions")
    assert r.status_code == 200
    assert len(r.json()) == 3
    assert all(isinstance(p["_id"], str) for p in r.json())

    r = auth_client.get("/potions/names")
    assert sorted(r.json()) == ["A", "B"]


def test_find_by_vendor(auth_client, seed):
    seed(
        {"name": "A", "vendor_id": "v1"},
        {"name": "B", "vendor_id": "v2"},
        {"name": "C", "vendor_id": "v1"},
    )
    r = auth_client.get("/potions/vendor/v1")
    assert r.status_code == 200
    assert sorted(p["name"] for p in r.json()) == ["A", "C"]

    assert auth_client.get("/potions/vendor/unknown").json() == []


def test_price_range_is_inclusive(auth_client, seed):
    seed({"name": "cheap", "price": 5}, {"name": "mid", "price": 10}, {"name": "dear", "price": 20})

    r = auth_client.get("/potions/price-range", params={"min": 5, "max": 10})
    assert sorted(p["name"] for p in r.json()) == ["cheap", "mid"]

    r = auth_client.get("/potions/price-range", params={"min": 10})
    assert sorted(p["name"] for p in r.json()) == ["dear", "mid"]

    r = auth_client.get("/potions/price-range", params={"max": 9.99})
    assert [p["name"] for p in r.json()] == ["cheap"]


def test_price_range_rejects_non_numeric_bounds(auth_client):
    r = auth_client.get("/potions/price-range", params={"min": "abc", "max": 10})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "min"


def test_get_missing_potion_is_404(auth_client):
    r = auth_client.get(f"/potions/{ObjectId()}")
    assert r.status_code == 404
    assert r.json() == {"error": "potion_not_found"}


def test_malformed_id_is_400(auth_client):
    r = auth_client.get("/potions/not-an-id")
    assert r.status_code == 400
    assert r.json() == {"error": "invalid_id"}


def test_update_replaces_supplied_fields_only(auth_client):
    potion_id = auth_client.post("/potions", json=ELIXIR).json()["_id"]

    r = auth_client.put(f"/potions/{potion_id}", json={"price": 15, "categories": ["mind"]})
    assert r.status_code == 200
    assert r.json()["message"] == "Potion updated successfully"

    got = auth_client.get(f"/potions/{potion_id}").json()
    assert got["price"] == 15
    assert got["categories"] == ["mind"]
    assert got["name"] == ELIXIR["name"]
    assert got["score"] == ELIXIR["score"]


def test_update_missing_potion_is_404(auth_client):
    r = auth_client.put(f"/potions/{ObjectId()}", json={"price": 1})
    assert r.status_code == 404

    r = auth_client.put(f"/potions/{ObjectId()}", json={})
    assert r.status_code == 404


def test_delete_then_get_is_404(auth_client):
    potion_id = auth_client.post("/potions", json=ELIXIR).json()["_id"]

    r = auth_client.delete(f"/potions/{potion_id}")
    assert r.status_code == 200
    assert r.json() == {"message": "Potion deleted"}

    assert auth_client.get(f"/potions/{potion_id}").status_code == 404
    assert auth_client.delete(f"/potions/{potion_id}").status_code == 404


def test_malformed_json_body_is_400_on_body(auth_client, db):
    r = auth_client.post("/potions", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert r.json() == {"errors": [{"field": "body", "msg": "JSON decode error"}]}
    assert db["potions"].count_documents({}) == 0


def test_non_object_body_is_400(auth_client, db):
    r = auth_client.post("/potions", json=["not", "an", "object"])
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "body"
    assert db["potions"].count_documents({}) == 0
