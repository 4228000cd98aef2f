from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from paintperfect.auth.deps import require_page_roles
from paintperfect.core.exceptions import PaintPerfectError
from paintperfect.db import get_db
from paintperfect.dependencies import get_storage_service
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.services import cart_service
from paintperfect.services.storage import Storage
from paintperfect.web.forms import form_str, incoming_file, redirect_with, room_counts_from_form
from paintperfect.web.templating import render

router = APIRouter(prefix="/cart", tags=["cart"])

require_customer = require_page_roles(Role.USER)

CART = "/cart"


@router.get("", response_class=HTMLResponse)
def cart_page(
    request: Request,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_customer),
):
    return render(request, "cart.html", cart_service.cart_summary(db, user), user=user)


@router.post("/add")
def add_to_cart(
    design_id: str = Form(...),
    db: Session = Depends(get_db),
    user: Profile = Depends(require_customer),
):
    try:
        item = cart_service.add_to_cart(db, user, design_id)
    except PaintPerfectError as e:
        return redirect_with("/gallery", error=e.message)
    return redirect_with("/gallery", msg=f"{item.design.title} added to cart")


@router.post("/items/{item_id}")
async def configure_item(
    request: Request,
    item_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(require_customer),
):
    form = await request.form()
    try:
        cart_service.configure_item(
            db,
            storage,
            user,
            item_id,
            room_counts=room_counts_from_form(form) or None,
            length=form_str(form, "length"),
            breadth=form_str(form, "breadth"),
            dimension_image=await incoming_file(form.get("dimension_image")),
        )
    except PaintPerfectError as e:
        return redirect_with(CART, error=e.message)
    return redirect_with(CART, msg="Cart updated")


@router.post("/items/{item_id}/rooms")
def change_room(
    item_id: str,
    room: str = Form(...),
    delta: int = Form(...),
    db: Session = Depends(get_db),
    user: Profile = Depends(require_customer),
):
    try:
        cart_service.change_room_count(db, user, item_id, room, delta)
    except PaintPerfectError as e:
        return redirect_with(CART, error=e.message)
    return redirect_with(CART)


@router.post("/items/{item_id}/remove")
def remove_item(
    item_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(require_customer),
):
    try:
        cart_service.remove_item(db, storage, user, item_id)
    except PaintPerfectError as e:
        return redirect_with(CART, error=e.message)
    return redirect_with(CART, msg="Item removed from cart")


@router.post("/checkout")
def checkout(
    db: Session = Depends(get_db),
    user: Profile = Depends(require_customer),
):
    try:
        result = cart_service.checkout(db, user)
    except PaintPerfectError as e:
        return redirect_with(CART, error=e.message)

    if not result.created:
        return redirect_with(CART, error="Select at least one room for an item before checking out")
    msg = f"{len(result.created)} request(s) submitted"
    if result.skipped_item_ids:
        msg += f"; {len(result.skipped_item_ids)} item(s) without rooms stay in your cart"
    return redirect_with("/user/dashboard", msg=msg)
