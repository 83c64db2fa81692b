"""Query translator: request parameters -> MongoDB aggregation pipelines.

Fixed reports (distinct categories, averages by vendor/category, the
strength/flavor ratio) plus one parametrized grouping (`search`). The
parametrized form is parsed against explicit whitelists before any pipeline
is built; nothing from the query string is interpolated unchecked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pymongo.database import Database

from potion_api.db import potions_col
from potion_api.errors import ValidationError


GROUP_BY_FIELDS = ("vendor_id", "categories")
METRICS = ("avg", "sum", "count")
METRIC_FIELDS = ("score", "price", "ratings.strength", "ratings.flavor")

# Group keys holding arrays; unwound to one row per element before grouping.
_ARRAY_GROUP_KEYS = ("categories",)


@dataclass(frozen=True)
class SearchQuery:
    group_by: str
    metric: str
    field: Optional[str] = None


def parse_search(
    group_by: Optional[str],
    metric: Optional[str],
    field: Optional[str] = None,
) -> SearchQuery:
    """Validate raw query parameters. Collects every problem before raising."""
    g = (group_by or "").strip()
    m = (metric or "").strip()
    f = (field or "").strip() or None

    errors: List[Dict[str, Any]] = []
    if g not in GROUP_BY_FIELDS:
        errors.append({"field": "groupBy", "msg": f"must be one of {', '.join(GROUP_BY_FIELDS)}", "value": group_by})
    if m not in METRICS:
        errors.append({"field": "metric", "msg": f"must be one of {', '.join(METRICS)}", "value": metric})
    elif m == "count":
        # field is meaningless for a plain count
        f = None
    elif f not in METRIC_FIELDS:
        errors.append({"field": "field", "msg": f"must be one of {', '.join(METRIC_FIELDS)}", "value": field})

    if errors:
        raise ValidationError("invalid_search", errors=errors)
    return SearchQuery(group_by=g, metric=m, field=f)


def _unwind(key: str) -> Dict[str, Any]:
    return {"$unwind": f"${key}"}


def _group_stages(group_by: str, accumulators: Dict[str, Any]) -> List[Dict[str, Any]]:
    stages: List[Dict[str, Any]] = []
    if group_by in _ARRAY_GROUP_KEYS:
        stages.append(_unwind(group_by))
    group: Dict[str, Any] = {"_id": f"${group_by}"}
    group.update(accumulators)
    stages.append({"$group": group})
    stages.append({"$sort": {"_id": 1}})
    return stages


def average_score_pipeline(group_by: str) -> List[Dict[str, Any]]:
    return _group_stages(group_by, {"averageScore": {"$avg": "$score"}})


def strength_flavor_ratio_pipeline() -> List[Dict[str, Any]]:
    # Missing or zero flavor yields null instead of a division error.
    return [
        {
            "$project": {
                "strengthFlavorRatio": {
                    "$cond": {
                        "if": {"$eq": [{"$ifNull": ["$ratings.flavor", 0]}, 0]},
                        "then": None,
                        "else": {"$divide": ["$ratings.strength", "$ratings.flavor"]},
                    }
                }
            }
        }
    ]


def build_search_pipeline(query: SearchQuery) -> List[Dict[str, Any]]:
    if query.metric == "count":
        accumulators: Dict[str, Any] = {"count": {"$sum": 1}}
    else:
        accumulators = {query.metric: {f"${query.metric}": f"${query.field}"}}
    return _group_stages(query.group_by, accumulators)


def _run(db: Database, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    rows = []
    for row in potions_col(db).aggregate(pipeline):
        if "_id" in row and row["_id"] is not None and not isinstance(row["_id"], (str, int, float)):
            row["_id"] = str(row["_id"])
        rows.append(row)
    return rows


def distinct_category_count(db: Database) -> int:
    return len(potions_col(db).distinct("categories"))


def average_score_by_vendor(db: Database) -> List[Dict[str, Any]]:
    return _run(db, average_score_pipeline("vendor_id"))


def average_score_by_category(db: Database) -> List[Dict[str, Any]]:
    return _run(db, average_score_pipeline("categories"))


def strength_flavor_ratio(db: Database) -> List[Dict[str, Any]]:
    return _run(db, strength_flavor_ratio_pipeline())


def search(db: Database, query: SearchQuery) -> List[Dict[str, Any]]:
    return _run(db, build_search_pipeline(query))
