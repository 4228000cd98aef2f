# paintperfect/models/design.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from paintperfect.db import Base, utcnow
from paintperfect.models.profile import Profile


class PaintingDesign(Base):
    __tablename__ = "painting_designs"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    vendor_id: Mapped[str] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    # storage key inside the "designs" bucket, used for deletes
    image_key: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )

    vendor: Mapped["Profile"] = relationship("Profile")

    def __repr__(self) -> str:
        return f"<PaintingDesign id={self.id} title={self.title!r}>"
