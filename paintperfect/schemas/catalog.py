# paintperfect/schemas/catalog.py
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from paintperfect.models.enums import PriceType


class CategoryIn(BaseModel):
    value: str = Field(..., min_length=1, max_length=100)
    type: str = "room"


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    value: str
    created_at: datetime


class PricingIn(BaseModel):
    category_id: str
    price_type: PriceType = PriceType.PER_SQ_FT
    price_value: float = Field(..., ge=0, allow_inf_nan=False)


class PricingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category_id: Optional[str]
    price_type: str
    price_value: float


class EstimateIn(BaseModel):
    room_counts: Dict[str, int] = {}
    length: Optional[float] = None
    breadth: Optional[float] = None


class EstimateOut(BaseModel):
    estimated_cost: Decimal
    rooms: Dict[str, int]
    length_ft: float
    breadth_ft: float
