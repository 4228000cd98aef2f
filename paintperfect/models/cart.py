# paintperfect/models/cart.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paintperfect.db import Base, utcnow
from paintperfect.models.design import PaintingDesign


class CartItem(Base):
    """A design in a customer's cart plus the rooms/dimensions chosen for it."""

    __tablename__ = "cart_items"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    design_id: Mapped[str] = mapped_column(
        ForeignKey("painting_designs.id", ondelete="CASCADE"), nullable=False
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    room_counts: Mapped[Dict[str, int]] = mapped_column(JSON, nullable=False, default=dict)
    length: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    breadth: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    dimension_image_key: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    dimension_image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    design: Mapped["PaintingDesign"] = relationship("PaintingDesign")
