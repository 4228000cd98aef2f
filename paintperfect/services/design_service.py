# paintperfect/services/design_service.py
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from paintperfect.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from paintperfect.core.logging_config import logger
from paintperfect.models.design import PaintingDesign
from paintperfect.models.profile import Profile
from paintperfect.services.storage import (
    DESIGNS_BUCKET,
    IncomingFile,
    Storage,
    file_extension,
    key_join,
    timestamp_ms,
)

ALL_CATEGORIES = "All"
GALLERY_CATEGORIES = ["All", "Interior", "Exterior", "Commercial", "Artistic", "Restoration"]


def parse_tags(tags_csv: Optional[str]) -> List[str]:
    return [t.strip() for t in (tags_csv or "").split(",") if t.strip()]


def matches(design: PaintingDesign, category: str, search: str) -> bool:
    if category and category != ALL_CATEGORIES and design.category != category:
        return False
    term = (search or "").strip().lower()
    if not term:
        return True
    if term in design.title.lower():
        return True
    return any(term in tag.lower() for tag in (design.tags or []))


def list_designs(
    db: Session,
    *,
    category: str = ALL_CATEGORIES,
    search: str = "",
) -> Tuple[List[PaintingDesign], int]:
    """
    Gallery listing, newest first.
    Returns (filtered designs, total number of designs).
    """
    designs = (
        db.query(PaintingDesign)
        .options(joinedload(PaintingDesign.vendor))
        .order_by(PaintingDesign.created_at.desc())
        .all()
    )
    filtered = [d for d in designs if matches(d, category, search)]
    return filtered, len(designs)


def get_design(db: Session, design_id: str) -> PaintingDesign:
    design = db.get(PaintingDesign, design_id)
    if design is None:
        raise NotFoundError("Design not found")
    return design


def list_vendor_designs(db: Session, vendor: Profile) -> List[PaintingDesign]:
    return (
        db.query(PaintingDesign)
        .filter(PaintingDesign.vendor_id == vendor.id)
        .order_by(PaintingDesign.created_at.desc())
        .all()
    )


def upload_design(
    db: Session,
    storage: Storage,
    vendor: Profile,
    *,
    title: str,
    category: str,
    tags_csv: Optional[str],
    image: Optional[IncomingFile],
) -> PaintingDesign:
    if not vendor.is_vendor or not vendor.is_approved:
        raise PermissionDeniedError("Only approved vendors can upload designs")

    title = (title or "").strip()
    category = (category or "").strip()
    if not title or not category or image is None or not image.data:
        raise ValidationError("Title, category, and image are required.")

    ext = file_extension(image.content_type)
    key = key_join(vendor.id, f"{timestamp_ms()}.{ext}")
    stored = storage.upload(DESIGNS_BUCKET, key, image.data, image.content_type)

    design = PaintingDesign(
        vendor_id=vendor.id,
        title=title,
        category=category,
        tags=parse_tags(tags_csv),
        image_url=stored.url,
        image_key=stored.key,
    )
    db.add(design)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.delete(DESIGNS_BUCKET, stored.key)
        raise
    db.refresh(design)

    logger.info("design_uploaded", design_id=design.id, vendor_id=vendor.id, category=category)
    return design


def delete_design(db: Session, storage: Storage, vendor: Profile, design_id: str) -> None:
    design = get_design(db, design_id)
    if design.vendor_id != vendor.id:
        raise PermissionDeniedError("You can only delete your own designs")

    image_key = design.image_key
    db.delete(design)
    db.commit()
    if image_key:
        storage.delete(DESIGNS_BUCKET, image_key)
    logger.info("design_deleted", design_id=design_id, vendor_id=vendor.id)
