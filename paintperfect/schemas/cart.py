# paintperfect/schemas/cart.py
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel

from paintperfect.schemas.requests import RequestOut


class CartAddIn(BaseModel):
    design_id: str


class CartConfigureIn(BaseModel):
    room_counts: Dict[str, int] = {}
    length: Optional[float] = None
    breadth: Optional[float] = None


class RoomDeltaIn(BaseModel):
    room: str
    delta: int


class CartLineOut(BaseModel):
    id: str
    design_id: str
    design_title: str
    design_image: str
    vendor_id: Optional[str] = None
    quantity: int
    room_counts: Dict[str, int]
    length: Optional[float] = None
    breadth: Optional[float] = None
    dimension_image: Optional[str] = None
    estimate: Decimal


class CartOut(BaseModel):
    items: List[CartLineOut]
    total: Decimal


class CheckoutOut(BaseModel):
    created: List[RequestOut]
    skipped_item_ids: List[str]
    total_cost: Decimal
