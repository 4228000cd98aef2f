from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from paintperfect.auth.deps import require_page_roles
from paintperfect.core.exceptions import PaintPerfectError
from paintperfect.db import get_db
from paintperfect.dependencies import get_storage_service
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.services import admin_service, design_service, request_service
from paintperfect.services.storage import Storage
from paintperfect.web.forms import form_str, incoming_file, redirect_with
from paintperfect.web.templating import render

router = APIRouter(prefix="/vendor", tags=["vendor"])

require_vendor = require_page_roles(Role.VENDOR)

DASHBOARD = "/vendor/dashboard"


@router.get("/dashboard", response_class=HTMLResponse)
def vendor_dashboard(
    request: Request,
    db: Session = Depends(get_db),
    vendor: Profile = Depends(require_vendor),
):
    if not vendor.is_approved:
        # /dashboard reports the pending approval and ends the session
        return RedirectResponse(url="/dashboard", status_code=303)

    requests = request_service.list_for_vendor(db, vendor)
    return render(
        request,
        "vendor_dashboard.html",
        {
            "requests": requests,
            "stats": admin_service.vendor_stats(db, vendor, requests),
            "designs": design_service.list_vendor_designs(db, vendor),
            "categories": design_service.GALLERY_CATEGORIES[1:],
        },
        user=vendor,
    )


@router.post("/requests/{request_id}/advance")
def advance_request(
    request_id: str,
    db: Session = Depends(get_db),
    vendor: Profile = Depends(require_vendor),
):
    try:
        updated = request_service.advance_status(db, vendor, request_id)
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(
        DASHBOARD, msg=f"Status updated to {request_service.status_label(updated.status)}"
    )


@router.post("/requests/{request_id}/updates")
async def post_update(
    request: Request,
    request_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    vendor: Profile = Depends(require_vendor),
):
    form = await request.form()
    try:
        request_service.post_job_update(
            db,
            storage,
            vendor,
            request_id,
            notes=form_str(form, "notes"),
            before_image=await incoming_file(form.get("before_image")),
            after_image=await incoming_file(form.get("after_image")),
        )
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg="Job update posted")


@router.post("/designs")
async def upload_design(
    request: Request,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    vendor: Profile = Depends(require_vendor),
):
    form = await request.form()
    try:
        design_service.upload_design(
            db,
            storage,
            vendor,
            title=form_str(form, "title"),
            category=form_str(form, "category"),
            tags_csv=form_str(form, "tags"),
            image=await incoming_file(form.get("image")),
        )
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg="Design uploaded successfully")


@router.post("/designs/{design_id}/delete")
def delete_design(
    design_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    vendor: Profile = Depends(require_vendor),
):
    try:
        design_service.delete_design(db, storage, vendor, design_id)
    except PaintPerfectError as e:
        return redirect_with(DASHBOARD, error=e.message)
    return redirect_with(DASHBOARD, msg="Design deleted")
