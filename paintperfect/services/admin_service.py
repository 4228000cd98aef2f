# paintperfect/services/admin_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Tuple

from sqlalchemy.orm import Session

from paintperfect.core.exceptions import NotFoundError, ValidationError
from paintperfect.core.logging_config import logger
from paintperfect.db import utcnow
from paintperfect.models.design import PaintingDesign
from paintperfect.models.enums import RequestStatus, Role
from paintperfect.models.profile import Profile
from paintperfect.models.request import PaintingRequest, VendorAssignment
from paintperfect.observability.metrics import vendor_approvals_counter
from paintperfect.services.request_service import get_request


@dataclass
class DashboardStats:
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    # admin: revenue, vendor: earnings, user: total spent (completed jobs only)
    completed_value: Decimal = Decimal("0")
    designs: int = 0


def request_stats(requests: Iterable[PaintingRequest]) -> DashboardStats:
    stats = DashboardStats()
    for r in requests:
        stats.total += 1
        if r.status == RequestStatus.PENDING.value:
            stats.pending += 1
        elif r.status == RequestStatus.IN_PROGRESS.value:
            stats.in_progress += 1
        elif r.status == RequestStatus.COMPLETED.value:
            stats.completed += 1
            stats.completed_value += Decimal(str(r.estimated_cost or 0))
    return stats


def vendor_stats(db: Session, vendor: Profile, requests: Iterable[PaintingRequest]) -> DashboardStats:
    stats = request_stats(requests)
    stats.designs = (
        db.query(PaintingDesign).filter(PaintingDesign.vendor_id == vendor.id).count()
    )
    return stats


def list_vendors(db: Session) -> Tuple[List[Profile], List[Profile]]:
    """(approved, pending) vendor accounts."""
    vendors = (
        db.query(Profile)
        .filter(Profile.role == Role.VENDOR.value)
        .order_by(Profile.created_at.asc())
        .all()
    )
    approved = [v for v in vendors if v.is_approved]
    pending = [v for v in vendors if not v.is_approved]
    return approved, pending


def _get_vendor(db: Session, vendor_id: str) -> Profile:
    vendor = db.get(Profile, vendor_id)
    if vendor is None or vendor.role != Role.VENDOR.value:
        raise NotFoundError("Vendor not found")
    return vendor


def approve_vendor(db: Session, admin: Profile, vendor_id: str) -> Profile:
    vendor = _get_vendor(db, vendor_id)
    if vendor.is_approved:
        return vendor

    vendor.is_approved = True
    vendor.approved_at = utcnow()
    vendor.approved_by = admin.id
    db.commit()
    db.refresh(vendor)

    vendor_approvals_counter.inc()
    logger.info("vendor_approved", vendor_id=vendor.id, admin_id=admin.id)
    return vendor


def assign_request(db: Session, admin: Profile, request_id: str, vendor_id: str) -> VendorAssignment:
    """Hand a request to an approved vendor."""
    request = get_request(db, request_id)
    vendor = _get_vendor(db, vendor_id)
    if not vendor.is_approved:
        raise ValidationError("Vendor is not approved yet")
    if request.status == RequestStatus.COMPLETED.value:
        raise ValidationError("Completed requests cannot be reassigned")

    assignment = VendorAssignment(
        request_id=request.id,
        vendor_id=vendor.id,
        assigned_by=admin.id,
        status="pending",
    )
    request.vendor_id = vendor.id
    db.add(assignment)
    db.commit()
    db.refresh(assignment)

    logger.info(
        "request_assigned",
        request_id=request.id,
        vendor_id=vendor.id,
        admin_id=admin.id,
    )
    return assignment
