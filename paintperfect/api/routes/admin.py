from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from paintperfect.auth.deps import require_roles
from paintperfect.db import get_db
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.schemas.admin import AssignIn, AssignmentOut, StatsOut, VendorListOut
from paintperfect.schemas.auth import ProfileOut
from paintperfect.services import admin_service, request_service

router = APIRouter(prefix="/api/admin", tags=["api-admin"])

require_admin = require_roles(Role.ADMIN)


@router.get("/vendors", response_model=VendorListOut)
def list_vendors(db: Session = Depends(get_db), admin: Profile = Depends(require_admin)):
    approved, pending = admin_service.list_vendors(db)
    return VendorListOut(
        approved=[ProfileOut.model_validate(v) for v in approved],
        pending=[ProfileOut.model_validate(v) for v in pending],
    )


@router.post("/vendors/{vendor_id}/approve", response_model=ProfileOut)
def approve_vendor(
    vendor_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    return admin_service.approve_vendor(db, admin, vendor_id)


@router.post("/requests/{request_id}/assign", response_model=AssignmentOut, status_code=201)
def assign_request(
    request_id: str,
    payload: AssignIn,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    return admin_service.assign_request(db, admin, request_id, payload.vendor_id)


@router.get("/stats", response_model=StatsOut)
def stats(db: Session = Depends(get_db), admin: Profile = Depends(require_admin)):
    return admin_service.request_stats(request_service.list_all(db))
