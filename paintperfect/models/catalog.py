# paintperfect/models/catalog.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import DateTime, Float, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paintperfect.db import Base, utcnow
from paintperfect.models.enums import PriceType


class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("type", "value", name="uq_category_type_value"),)

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    # "room" is the only type the estimator reads
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    value: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    pricing: Mapped[List["Pricing"]] = relationship(
        "Pricing",
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Category {self.type}:{self.value!r}>"


class Pricing(Base):
    __tablename__ = "pricing"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    category_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"), index=True, nullable=True
    )
    price_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PriceType.PER_SQ_FT.value
    )
    price_value: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    category: Mapped[Optional["Category"]] = relationship(
        "Category", back_populates="pricing"
    )
