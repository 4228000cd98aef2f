from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from paintperfect.auth.deps import require_page_roles
from paintperfect.core.exceptions import PaintPerfectError
from paintperfect.db import get_db
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.services import request_service
from paintperfect.web.forms import redirect_with
from paintperfect.web.templating import render

router = APIRouter(prefix="/requests", tags=["requests"])


@router.get("/{request_id}", response_class=HTMLResponse)
def request_detail(
    request: Request,
    request_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(require_page_roles(Role.USER, Role.VENDOR, Role.ADMIN)),
):
    """Request with its job-update timeline (owner, assigned vendor, admins)."""
    try:
        updates = request_service.list_job_updates(db, user, request_id)
    except PaintPerfectError as e:
        return redirect_with("/dashboard", error=e.message)
    painting_request = request_service.get_request(db, request_id)
    return render(
        request,
        "request_detail.html",
        {"req": painting_request, "updates": updates},
        user=user,
    )
