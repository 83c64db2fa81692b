from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database

from potion_api.analytics import query as analytics
from potion_api.auth import get_current_user
from potion_api.db import get_db


router = APIRouter(prefix="/analytics", tags=["Analytics"], dependencies=[Depends(get_current_user)])


@router.get("/distinct-categories")
def distinct_categories(db: Database = Depends(get_db)) -> int:
    """Number of distinct category values across all potions."""
    return analytics.distinct_category_count(db)


@router.get("/average-score-by-vendor")
def average_score_by_vendor(db: Database = Depends(get_db)) -> List[Dict[str, Any]]:
    return analytics.average_score_by_vendor(db)


@router.get("/average-score-by-category")
def average_score_by_category(db: Database = Depends(get_db)) -> List[Dict[str, Any]]:
    return analytics.average_score_by_category(db)


@router.get("/strength-flavor-ratio")
def strength_flavor_ratio(db: Database = Depends(get_db)) -> List[Dict[str, Any]]:
    return analytics.strength_flavor_ratio(db)


@router.get("/search")
def search(
    group_by: Optional[str] = Query(None, alias="groupBy", description="vendor_id | categories"),
    metric: Optional[str] = Query(None, description="avg | sum | count"),
    field: Optional[str] = Query(None, description="score | price | ratings.strength | ratings.flavor"),
    db: Database = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Group potions by vendor or category with a chosen metric."""
    q = analytics.parse_search(group_by, metric, field)
    return analytics.search(db, q)
