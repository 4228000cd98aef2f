# paintperfect/schemas/admin.py
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from paintperfect.schemas.auth import ProfileOut


class VendorListOut(BaseModel):
    approved: List[ProfileOut]
    pending: List[ProfileOut]


class AssignIn(BaseModel):
    vendor_id: str


class AssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    vendor_id: str
    assigned_by: Optional[str] = None
    status: str
    created_at: datetime


class StatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    pending: int
    in_progress: int
    completed: int
    completed_value: Decimal
    designs: int = 0
