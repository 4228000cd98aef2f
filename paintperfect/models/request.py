# paintperfect/models/request.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paintperfect.db import Base, utcnow
from paintperfect.models.enums import RequestStatus
from paintperfect.models.profile import Profile


class PaintingRequest(Base):
    __tablename__ = "painting_requests"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    vendor_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"), index=True, nullable=True
    )
    design_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("painting_designs.id", ondelete="SET NULL"), nullable=True
    )

    # {"Bedroom": 2, "Kitchen": 1}; only rooms with count > 0
    room_types: Mapped[Dict[str, int]] = mapped_column(JSON, nullable=False)
    # {"length": 12.0, "breadth": 10.0} or None
    dimensions: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    estimated_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    dimension_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RequestStatus.PENDING.value, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    user: Mapped["Profile"] = relationship("Profile", foreign_keys=[user_id])
    vendor: Mapped[Optional["Profile"]] = relationship("Profile", foreign_keys=[vendor_id])

    updates: Mapped[List["JobUpdate"]] = relationship(
        "JobUpdate",
        back_populates="request",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="JobUpdate.updated_at",
    )

    def __repr__(self) -> str:
        return f"<PaintingRequest id={self.id} status={self.status}>"


class JobUpdate(Base):
    __tablename__ = "job_updates"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    request_id: Mapped[str] = mapped_column(
        ForeignKey("painting_requests.id", ondelete="CASCADE"), index=True, nullable=False
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    before_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    after_image: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    request: Mapped["PaintingRequest"] = relationship(
        "PaintingRequest", back_populates="updates"
    )


class VendorAssignment(Base):
    """Admin hand-off of a request to a vendor."""

    __tablename__ = "vendor_requests"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    request_id: Mapped[str] = mapped_column(
        ForeignKey("painting_requests.id", ondelete="CASCADE"), index=True, nullable=False
    )
    vendor_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    assigned_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
