# paintperfect/services/catalog_service.py
import math
from typing import Dict, List

from sqlalchemy.orm import Session

from paintperfect.core.exceptions import ConflictError, NotFoundError, ValidationError
from paintperfect.core.logging_config import logger
from paintperfect.models.catalog import Category, Pricing
from paintperfect.models.enums import PriceType
from paintperfect.services.estimator import ROOM_CATEGORY_TYPE, RoomRate, build_rate_table


def list_room_categories(db: Session) -> List[Category]:
    return (
        db.query(Category)
        .filter(Category.type == ROOM_CATEGORY_TYPE)
        .order_by(Category.value.asc())
        .all()
    )


def list_pricing(db: Session) -> List[Pricing]:
    return db.query(Pricing).order_by(Pricing.created_at.asc()).all()


def rate_table(db: Session) -> Dict[str, RoomRate]:
    return build_rate_table(list_room_categories(db), list_pricing(db))


def create_category(db: Session, *, value: str, type: str = ROOM_CATEGORY_TYPE) -> Category:
    value = (value or "").strip()
    type = (type or "").strip() or ROOM_CATEGORY_TYPE
    if not value:
        raise ValidationError("Category value is required")

    dup = db.query(Category).filter(Category.type == type, Category.value == value).first()
    if dup:
        raise ConflictError(f"Category already exists: {value}")

    category = Category(type=type, value=value)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("category_created", category_id=category.id, value=value, type=type)
    return category


def set_pricing(
    db: Session,
    *,
    category_id: str,
    price_value: float,
    price_type: str = PriceType.PER_SQ_FT.value,
) -> Pricing:
    """One price row per category: update the existing row or create it."""
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    try:
        ptype = PriceType(price_type)
    except ValueError:
        raise ValidationError(f"Unknown price type: {price_type}")
    if price_value is None or not math.isfinite(price_value) or price_value < 0:
        raise ValidationError("Price must be a finite number, zero or positive")

    pricing = (
        db.query(Pricing)
        .filter(Pricing.category_id == category_id)
        .order_by(Pricing.created_at.asc())
        .first()
    )
    if pricing is None:
        pricing = Pricing(category_id=category_id)
        db.add(pricing)
    pricing.price_type = ptype.value
    pricing.price_value = float(price_value)

    db.commit()
    db.refresh(pricing)
    logger.info(
        "pricing_set",
        category_id=category_id,
        price_type=ptype.value,
        price_value=float(price_value),
    )
    return pricing


def delete_category(db: Session, category_id: str) -> None:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    db.delete(category)
    db.commit()
    logger.info("category_deleted", category_id=category_id)
