from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, field_validator

from potion_api.util.time import parse_iso_datetime


class Ratings(BaseModel):
    strength: Optional[float] = None
    flavor: Optional[float] = None


class PotionIn(BaseModel):
    """Potion payload for create and partial update.

    Every field is optional; only the fields actually sent are written.
    Unknown keys are ignored, so operator-style keys never reach the store.
    """

    name: Optional[str] = None
    price: Optional[float] = None
    score: Optional[float] = None
    ingredients: Optional[List[Any]] = None
    ratings: Optional[Ratings] = None
    tryDate: Optional[datetime] = None
    categories: Optional[List[str]] = None
    vendor_id: Optional[str] = None

    @field_validator("tryDate", mode="before")
    @classmethod
    def _parse_try_date(cls, v: Any) -> Any:
        # Accept bare dates ("2024-05-01") as well as full timestamps.
        if isinstance(v, str) and v.strip():
            try:
                return parse_iso_datetime(v)
            except ValueError:
                raise ValueError("tryDate must be an ISO-8601 date or datetime")
        return v

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
