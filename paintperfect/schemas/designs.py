# paintperfect/schemas/designs.py
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict


class DesignOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    vendor_id: str
    title: str
    category: str
    tags: List[str] = []
    image_url: str
    created_at: datetime


class GalleryOut(BaseModel):
    items: List[DesignOut]
    showing: int
    total: int
