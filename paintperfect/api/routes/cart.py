from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from starlette.responses import Response

from paintperfect.auth.deps import require_roles
from paintperfect.db import get_db
from paintperfect.dependencies import get_storage_service
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.schemas.cart import (
    CartAddIn,
    CartConfigureIn,
    CartLineOut,
    CartOut,
    CheckoutOut,
    RoomDeltaIn,
)
from paintperfect.schemas.requests import RequestOut
from paintperfect.services import cart_service
from paintperfect.services.storage import Storage
from paintperfect.web.forms import incoming_file

router = APIRouter(prefix="/api/cart", tags=["api-cart"])

require_customer = require_roles(Role.USER)


def _cart_out(db: Session, user: Profile) -> CartOut:
    summary = cart_service.cart_summary(db, user)
    lines = []
    for line in summary["lines"]:
        item = line["item"]
        lines.append(
            CartLineOut(
                id=item.id,
                design_id=item.design_id,
                design_title=item.design.title,
                design_image=item.design.image_url,
                vendor_id=item.design.vendor_id,
                quantity=item.quantity,
                room_counts=item.room_counts or {},
                length=item.length,
                breadth=item.breadth,
                dimension_image=item.dimension_image_url,
                estimate=line["estimate"],
            )
        )
    return CartOut(items=lines, total=summary["total"])


@router.get("", response_model=CartOut)
def get_cart(db: Session = Depends(get_db), user: Profile = Depends(require_customer)):
    return _cart_out(db, user)


@router.post("", response_model=CartOut, status_code=201)
def add_to_cart(
    payload: CartAddIn,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_customer),
):
    cart_service.add_to_cart(db, user, payload.design_id)
    return _cart_out(db, user)


@router.post("/checkout", response_model=CheckoutOut)
def checkout(db: Session = Depends(get_db), user: Profile = Depends(require_customer)):
    result = cart_service.checkout(db, user)
    return CheckoutOut(
        created=[RequestOut.model_validate(r) for r in result.created],
        skipped_item_ids=result.skipped_item_ids,
        total_cost=result.total_cost,
    )


@router.put("/{item_id}", response_model=CartOut)
def configure_item(
    item_id: str,
    payload: CartConfigureIn,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(require_customer),
):
    cart_service.configure_item(
        db,
        storage,
        user,
        item_id,
        room_counts=payload.room_counts,
        length=payload.length,
        breadth=payload.breadth,
    )
    return _cart_out(db, user)


@router.post("/{item_id}/dimension-image", response_model=CartOut)
async def upload_dimension_image(
    item_id: str,
    image: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(require_customer),
):
    cart_service.attach_dimension_image(db, storage, user, item_id, await incoming_file(image))
    return _cart_out(db, user)


@router.post("/{item_id}/rooms", response_model=CartOut)
def change_room(
    item_id: str,
    payload: RoomDeltaIn,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_customer),
):
    cart_service.change_room_count(db, user, item_id, payload.room, payload.delta)
    return _cart_out(db, user)


@router.delete("/{item_id}", status_code=204)
def remove_item(
    item_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(require_customer),
):
    cart_service.remove_item(db, storage, user, item_id)
    return Response(status_code=204)
