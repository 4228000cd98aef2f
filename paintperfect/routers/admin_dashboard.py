from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from paintperfect.auth.deps import require_page_roles
from paintperfect.core.exceptions import PaintPerfectError
from paintperfect.db import get_db
from paintperfect.models.enums import PriceType, Role
from paintperfect.models.profile import Profile
from paintperfect.services import admin_service, catalog_service, request_service
from paintperfect.web.forms import redirect_with
from paintperfect.web.templating import render

router = APIRouter(prefix="/admin", tags=["admin"])

require_admin = require_page_roles(Role.ADMIN)

DASHBOARD = "/admin/dashboard"


@router.get("/dashboard", response_class=HTMLResponse)
def admin_dashboard(
    request: Request,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    requests = request_service.list_all(db)
    approved, pending = admin_service.list_vendors(db)
    return render(
        request,
        "admin_dashboard.html",
        {
            "requests": requests,
            "stats": admin_service.request_stats(requests),
            "approved_vendors": approved,
            "pending_vendors": pending,
            "categories": catalog_service.list_room_categories(db),
            "price_types": [p.value for p in PriceType],
        },
        user=admin,
    )


@router.post("/vendors/{vendor_id}/approve")
def approve_vendor(
    vendor_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    try:
        vendor = admin_service.approve_vendor(db, admin, vendor_id)
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg=f"{vendor.display_name} approved")


@router.post("/requests/{request_id}/assign")
def assign_request(
    request_id: str,
    vendor_id: str = Form(...),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    try:
        admin_service.assign_request(db, admin, request_id, vendor_id)
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg="Vendor assigned successfully")


@router.post("/categories")
def create_category(
    value: str = Form(...),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    try:
        catalog_service.create_category(db, value=value)
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg=f"Room type {value.strip()} added")


@router.post("/categories/{category_id}/pricing")
def set_pricing(
    category_id: str,
    price_value: float = Form(...),
    price_type: str = Form(PriceType.PER_SQ_FT.value),
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    try:
        catalog_service.set_pricing(
            db, category_id=category_id, price_value=price_value, price_type=price_type
        )
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg="Pricing saved")


@router.post("/categories/{category_id}/delete")
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    try:
        catalog_service.delete_category(db, category_id)
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg="Room type deleted")
