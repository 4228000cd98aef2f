"""
Cart and checkout.

A cart item is a design plus the rooms and dimensions the customer picked
for it. Checkout turns every configured item into a painting request for
the design's vendor and then removes the item from the cart.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from paintperfect.core.exceptions import (
    CheckoutError,
    NotFoundError,
    PaintPerfectError,
    PermissionDeniedError,
    ValidationError,
)
from paintperfect.core.logging_config import logger
from paintperfect.models.cart import CartItem
from paintperfect.models.profile import Profile
from paintperfect.models.request import PaintingRequest
from paintperfect.observability.metrics import checkout_items_counter
from paintperfect.services import catalog_service, design_service
from paintperfect.services.estimator import (
    RoomRate,
    adjust_room_count,
    dimensions_payload,
    estimate_cost,
    parse_side,
    selected_rooms,
)
from paintperfect.services.request_service import persist_request, store_dimension_image
from paintperfect.services.storage import DIMENSIONS_BUCKET, IncomingFile, Storage, timestamp_ms


@dataclass
class CheckoutResult:
    created: List[PaintingRequest] = field(default_factory=list)
    skipped_item_ids: List[str] = field(default_factory=list)

    @property
    def total_cost(self) -> Decimal:
        return sum((Decimal(str(r.estimated_cost or 0)) for r in self.created), Decimal("0"))


def list_cart(db: Session, user: Profile) -> List[CartItem]:
    return (
        db.query(CartItem)
        .options(joinedload(CartItem.design))
        .filter(CartItem.user_id == user.id)
        .order_by(CartItem.created_at.asc())
        .all()
    )


def _own_item(db: Session, user: Profile, item_id: str) -> CartItem:
    item = db.get(CartItem, item_id)
    if item is None:
        raise NotFoundError("Cart item not found")
    if item.user_id != user.id:
        raise PermissionDeniedError("This cart item belongs to someone else")
    return item


def add_to_cart(db: Session, user: Profile, design_id: str) -> CartItem:
    design = design_service.get_design(db, design_id)

    item = (
        db.query(CartItem)
        .filter(CartItem.user_id == user.id, CartItem.design_id == design.id)
        .first()
    )
    if item is None:
        item = CartItem(user_id=user.id, design_id=design.id, quantity=1, room_counts={})
        db.add(item)
    else:
        item.quantity += 1

    db.commit()
    db.refresh(item)
    logger.info("cart_item_added", user_id=user.id, design_id=design.id, quantity=item.quantity)
    return item


def remove_item(db: Session, storage: Storage, user: Profile, item_id: str) -> None:
    item = _own_item(db, user, item_id)
    image_key = item.dimension_image_key
    db.delete(item)
    db.commit()
    if image_key:
        storage.delete(DIMENSIONS_BUCKET, image_key)
    logger.info("cart_item_removed", user_id=user.id, item_id=item_id)


def configure_item(
    db: Session,
    storage: Storage,
    user: Profile,
    item_id: str,
    *,
    room_counts: Optional[Mapping[str, Any]] = None,
    length: Any = None,
    breadth: Any = None,
    dimension_image: Optional[IncomingFile] = None,
) -> CartItem:
    """Store the rooms, dimensions and optional dimension image for a cart item."""
    item = _own_item(db, user, item_id)

    if room_counts is not None:
        item.room_counts = selected_rooms(room_counts)
    item.length = parse_side(length)
    item.breadth = parse_side(breadth)

    if dimension_image is not None and dimension_image.data:
        _replace_dimension_image(storage, user, item, dimension_image)

    db.commit()
    db.refresh(item)
    return item


def attach_dimension_image(
    db: Session, storage: Storage, user: Profile, item_id: str, image: Optional[IncomingFile]
) -> CartItem:
    item = _own_item(db, user, item_id)
    if image is None or not image.data:
        raise ValidationError("Please upload a dimension image")
    _replace_dimension_image(storage, user, item, image)
    db.commit()
    db.refresh(item)
    return item


def _replace_dimension_image(
    storage: Storage, user: Profile, item: CartItem, image: IncomingFile
) -> None:
    old_key = item.dimension_image_key
    stored = store_dimension_image(storage, user, image, f"{item.id}_{timestamp_ms()}")
    item.dimension_image_url = stored.url
    item.dimension_image_key = stored.key
    if old_key and old_key != stored.key:
        storage.delete(DIMENSIONS_BUCKET, old_key)


def change_room_count(db: Session, user: Profile, item_id: str, room: str, delta: int) -> CartItem:
    """The +/- buttons next to each room; counts never drop below zero."""
    item = _own_item(db, user, item_id)
    item.room_counts = selected_rooms(adjust_room_count(item.room_counts or {}, room, delta))
    db.commit()
    db.refresh(item)
    return item


def item_estimate(item: CartItem, rates: Mapping[str, RoomRate]) -> Decimal:
    return estimate_cost(item.room_counts, item.length, item.breadth, rates)


def cart_summary(db: Session, user: Profile) -> Dict[str, Any]:
    """Items with their estimates and the cart total, for pages and the API."""
    items = list_cart(db, user)
    rates = catalog_service.rate_table(db)
    lines = [{"item": i, "estimate": item_estimate(i, rates)} for i in items]
    total = sum((line["estimate"] for line in lines), Decimal("0"))
    rooms = [c.value for c in catalog_service.list_room_categories(db)]
    return {"lines": lines, "total": total, "rooms": rooms}


def checkout(db: Session, user: Profile) -> CheckoutResult:
    """
    Convert configured cart items into painting requests, one at a time.

    Items without any selected room are skipped and stay in the cart.
    Each converted item is committed on its own, so a failure part-way
    leaves earlier items converted and raises CheckoutError.
    """
    items = list_cart(db, user)
    rates = catalog_service.rate_table(db)
    result = CheckoutResult()

    for item in items:
        item_id = item.id
        rooms = selected_rooms(item.room_counts)
        if not rooms:
            result.skipped_item_ids.append(item_id)
            checkout_items_counter.labels(result="skipped").inc()
            continue

        try:
            request = persist_request(
                db,
                user=user,
                vendor_id=item.design.vendor_id if item.design else None,
                design_id=item.design_id,
                room_types=rooms,
                dimensions=dimensions_payload(item.length, item.breadth),
                estimated_cost=item_estimate(item, rates),
                dimension_image=item.dimension_image_url,
                source="checkout",
                commit=False,
            )
            db.delete(item)
            db.commit()
        except PaintPerfectError:
            db.rollback()
            checkout_items_counter.labels(result="error").inc()
            raise
        except SQLAlchemyError as e:
            db.rollback()
            checkout_items_counter.labels(result="error").inc()
            logger.error("checkout_failed", user_id=user.id, item_id=item_id, error=str(e))
            raise CheckoutError(
                f"Failed to complete checkout: {e}",
                details={"converted": len(result.created)},
            ) from e

        result.created.append(request)
        checkout_items_counter.labels(result="converted").inc()

    logger.info(
        "checkout_completed",
        user_id=user.id,
        created=len(result.created),
        skipped=len(result.skipped_item_ids),
    )
    return result
