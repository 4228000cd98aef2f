from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from paintperfect.auth.deps import require_page_roles
from paintperfect.core.exceptions import PaintPerfectError
from paintperfect.db import get_db
from paintperfect.dependencies import get_storage_service
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.services import admin_service, catalog_service, design_service, request_service
from paintperfect.services.storage import Storage
from paintperfect.web.forms import form_str, incoming_file, redirect_with, room_counts_from_form
from paintperfect.web.templating import render

router = APIRouter(prefix="/user", tags=["user"])

require_customer = require_page_roles(Role.USER)


@router.get("/dashboard", response_class=HTMLResponse)
def user_dashboard(
    request: Request,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_customer),
):
    requests = request_service.list_for_user(db, user)
    designs, _ = design_service.list_designs(db)
    return render(
        request,
        "user_dashboard.html",
        {
            "requests": requests,
            "stats": admin_service.request_stats(requests),
            "designs": designs,
            "rooms": [c.value for c in catalog_service.list_room_categories(db)],
            "selected_design": request.query_params.get("design_id", ""),
        },
        user=user,
    )


@router.post("/requests")
async def create_request_form(
    request: Request,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(require_customer),
):
    form = await request.form()
    try:
        request_service.create_request(
            db,
            storage,
            user,
            design_id=form_str(form, "design_id") or None,
            room_counts=room_counts_from_form(form),
            length=form_str(form, "length"),
            breadth=form_str(form, "breadth"),
            dimension_image=await incoming_file(form.get("dimension_image")),
        )
    except PaintPerfectError as e:
        return redirect_with("/user/dashboard", error=e.message)
    return redirect_with("/user/dashboard", msg="Request submitted successfully")
