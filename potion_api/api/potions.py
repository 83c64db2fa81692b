from __future__ import annotations

from typing import Any, Dict, List, Optional

import pydantic
from fastapi import APIRouter, Depends, Query, Request
from pymongo.database import Database

from potion_api.auth import get_current_user
from potion_api.db import get_db
from potion_api.errors import ValidationError, field_errors
from potion_api.potions import store
from potion_api.potions.models import PotionIn


router = APIRouter(prefix="/potions", tags=["Potions"], dependencies=[Depends(get_current_user)])


async def potion_payload(
    request: Request,
    _user: Dict[str, Any] = Depends(get_current_user),
) -> PotionIn:
    """Parse the request body only once the session has been accepted."""
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("invalid_json", errors=[{"field": "body", "msg": "JSON decode error"}])

    try:
        return PotionIn.model_validate(body)
    except pydantic.ValidationError as e:
        raise ValidationError("invalid_potion", errors=field_errors(e.errors()))


@router.get("")
def list_potions(db: Database = Depends(get_db)) -> List[Dict[str, Any]]:
    return store.list_potions(db)


@router.get("/names")
def list_potion_names(db: Database = Depends(get_db)) -> List[str]:
    return store.list_names(db)


@router.get("/vendor/{vendor_id}")
def potions_by_vendor(vendor_id: str, db: Database = Depends(get_db)) -> List[Dict[str, Any]]:
    return store.find_by_vendor(db, vendor_id)


@router.get("/price-range")
def potions_by_price_range(
    min_price: Optional[float] = Query(None, alias="min"),
    max_price: Optional[float] = Query(None, alias="max"),
    db: Database = Depends(get_db),
) -> List[Dict[str, Any]]:
    return store.find_by_price_range(db, min_price, max_price)


@router.get("/{potion_id}")
def get_potion(potion_id: str, db: Database = Depends(get_db)) -> Dict[str, Any]:
    return store.find_by_id(db, potion_id)


@router.post("", status_code=201)
def create_potion(
    payload: PotionIn = Depends(potion_payload),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    return store.create_potion(db, payload.to_fields())


@router.put("/{potion_id}")
def update_potion(
    potion_id: str,
    payload: PotionIn = Depends(potion_payload),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    potion = store.update_potion(db, potion_id, payload.to_fields())
    return {"message": "Potion updated successfully", "potion": potion}


@router.delete("/{potion_id}")
def delete_potion(potion_id: str, db: Database = Depends(get_db)) -> Dict[str, Any]:
    store.delete_potion(db, potion_id)
    return {"message": "Potion deleted"}
