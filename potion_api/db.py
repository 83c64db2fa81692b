from __future__ import annotations

from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from potion_api.config import Config
from potion_api.errors import ValidationError


USERS = "users"
POTIONS = "potions"


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def connect(cfg: Config) -> MongoClient:
    """Build a pooled client. Connection happens lazily on first operation."""
    timeout = max(1, int(cfg.MONGO_TIMEOUT_MS))
    return MongoClient(
        cfg.MONGO_URI,
        serverSelectionTimeoutMS=timeout,
        connectTimeoutMS=timeout,
        socketTimeoutMS=timeout,
        tz_aware=True,
    )


def get_database(cfg: Config, client: Optional[MongoClient] = None) -> Database:
    client = client or connect(cfg)
    return client[cfg.MONGO_DB_NAME]


def get_db(request: Request) -> Database:
    """FastAPI dependency: the database handle owned by the app."""
    return request.app.state.db


def users_col(db: Database) -> Collection:
    return db[USERS]


def potions_col(db: Database) -> Collection:
    return db[POTIONS]


def init_db(db: Database) -> None:
    """Ensure indexes exist. Safe to call repeatedly."""
    users_col(db).create_index([("username", ASCENDING)], unique=True, name="username_unique")
    potions_col(db).create_index([("vendor_id", ASCENDING)], name="vendor_id")
    potions_col(db).create_index([("price", ASCENDING)], name="price")
    _debug(f"indexes ensured on database={db.name}")


def parse_object_id(value: str) -> ObjectId:
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise ValidationError("invalid_id")


def serialize_doc(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Make a store document JSON-friendly (ObjectId -> str)."""
    d = dict(doc)
    if isinstance(d.get("_id"), ObjectId):
        d["_id"] = str(d["_id"])
    return d
