import json
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from paintperfect.auth.deps import get_current_user, require_approved_vendor, require_roles
from paintperfect.core.exceptions import PermissionDeniedError, ValidationError
from paintperfect.db import get_db
from paintperfect.dependencies import get_storage_service
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.schemas.admin import StatsOut
from paintperfect.schemas.requests import JobUpdateOut, RequestOut
from paintperfect.services import admin_service, request_service
from paintperfect.services.storage import Storage
from paintperfect.web.forms import incoming_file

router = APIRouter(prefix="/api/requests", tags=["api-requests"])


def _visible_requests(db: Session, user: Profile):
    if user.role == Role.ADMIN.value:
        return request_service.list_all(db)
    if user.role == Role.VENDOR.value:
        return request_service.list_for_vendor(db, user)
    return request_service.list_for_user(db, user)


def _parse_room_counts(raw: str) -> dict:
    try:
        counts = json.loads(raw or "{}")
    except json.JSONDecodeError:
        raise ValidationError("room_counts must be a JSON object")
    if not isinstance(counts, dict):
        raise ValidationError("room_counts must be a JSON object")
    return counts


@router.get("", response_model=List[RequestOut])
def list_requests(db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    """Own requests for customers, assigned ones for vendors, all for admins."""
    return _visible_requests(db, user)


@router.get("/stats", response_model=StatsOut)
def my_stats(db: Session = Depends(get_db), user: Profile = Depends(get_current_user)):
    requests = _visible_requests(db, user)
    if user.role == Role.VENDOR.value:
        return admin_service.vendor_stats(db, user, requests)
    return admin_service.request_stats(requests)


@router.post("", response_model=RequestOut, status_code=201)
async def create_request(
    design_id: str = Form(...),
    room_counts: str = Form("{}"),
    length: Optional[str] = Form(None),
    breadth: Optional[str] = Form(None),
    dimension_image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(require_roles(Role.USER)),
):
    return request_service.create_request(
        db,
        storage,
        user,
        design_id=design_id,
        room_counts=_parse_room_counts(room_counts),
        length=length,
        breadth=breadth,
        dimension_image=await incoming_file(dimension_image),
    )


@router.get("/{request_id}", response_model=RequestOut)
def get_request(
    request_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    painting_request = request_service.get_request(db, request_id)
    if not request_service.can_view(user, painting_request):
        raise PermissionDeniedError("You cannot view this request")
    return painting_request


@router.post("/{request_id}/advance", response_model=RequestOut)
def advance(
    request_id: str,
    db: Session = Depends(get_db),
    vendor: Profile = Depends(require_approved_vendor),
):
    return request_service.advance_status(db, vendor, request_id)


@router.get("/{request_id}/updates", response_model=List[JobUpdateOut])
def job_updates(
    request_id: str,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    return request_service.list_job_updates(db, user, request_id)


@router.post("/{request_id}/updates", response_model=JobUpdateOut, status_code=201)
async def post_job_update(
    request_id: str,
    notes: str = Form(""),
    before_image: Optional[UploadFile] = File(None),
    after_image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    vendor: Profile = Depends(require_approved_vendor),
):
    return request_service.post_job_update(
        db,
        storage,
        vendor,
        request_id,
        notes=notes,
        before_image=await incoming_file(before_image),
        after_image=await incoming_file(after_image),
    )
