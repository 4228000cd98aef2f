# paintperfect/schemas/requests.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class RequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    vendor_id: Optional[str] = None
    design_id: Optional[str] = None
    room_types: Dict[str, int]
    dimensions: Optional[Dict[str, Any]] = None
    estimated_cost: Optional[float] = None
    dimension_image: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class JobUpdateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    status: str
    notes: Optional[str] = None
    before_image: Optional[str] = None
    after_image: Optional[str] = None
    updated_at: datetime
