"""Item store: CRUD over the `potions` collection.

Every function takes the database handle as its first argument. Results are
returned JSON-ready (`_id` as a string).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.database import Database

from potion_api.db import parse_object_id, potions_col, serialize_doc
from potion_api.errors import NotFoundError


def _debug(msg: str) -> None:
    print(f"[potions] {msg}")


def list_potions(db: Database) -> List[Dict[str, Any]]:
    # Unpaginated on purpose; the collection is expected to stay small.
    return [serialize_doc(d) for d in potions_col(db).find()]


def list_names(db: Database) -> List[str]:
    return [d["name"] for d in potions_col(db).find({}, {"name": 1, "_id": 0}) if "name" in d]


def find_by_vendor(db: Database, vendor_id: str) -> List[Dict[str, Any]]:
    return [serialize_doc(d) for d in potions_col(db).find({"vendor_id": vendor_id})]


def price_range_filter(min_price: Optional[float], max_price: Optional[float]) -> Dict[str, Any]:
    """Inclusive bounds; a missing bound leaves that side open."""
    bounds: Dict[str, Any] = {}
    if min_price is not None:
        bounds["$gte"] = min_price
    if max_price is not None:
        bounds["$lte"] = max_price
    return {"price": bounds} if bounds else {}


def find_by_price_range(
    db: Database,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> List[Dict[str, Any]]:
    query = price_range_filter(min_price, max_price)
    return [serialize_doc(d) for d in potions_col(db).find(query)]


def find_by_id(db: Database, potion_id: str) -> Dict[str, Any]:
    doc = potions_col(db).find_one({"_id": parse_object_id(potion_id)})
    if doc is None:
        raise NotFoundError("potion_not_found")
    return serialize_doc(doc)


def create_potion(db: Database, fields: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(fields)
    res = potions_col(db).insert_one(doc)
    doc["_id"] = res.inserted_id
    _debug(f"created potion id={res.inserted_id} name={doc.get('name')!r}")
    return serialize_doc(doc)


def update_potion(db: Database, potion_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Replace the supplied fields. Raises NotFoundError when the id matches nothing."""
    oid = parse_object_id(potion_id)
    if not fields:
        # Nothing to write; still report a missing id.
        return find_by_id(db, potion_id)

    doc = potions_col(db).find_one_and_update(
        {"_id": oid},
        {"$set": dict(fields)},
        return_document=ReturnDocument.AFTER,
    )
    if doc is None:
        raise NotFoundError("potion_not_found")
    return serialize_doc(doc)


def delete_potion(db: Database, potion_id: str) -> None:
    res = potions_col(db).delete_one({"_id": parse_object_id(potion_id)})
    if res.deleted_count == 0:
        raise NotFoundError("potion_not_found")
    _debug(f"deleted potion id={potion_id}")
