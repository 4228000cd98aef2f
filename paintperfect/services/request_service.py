# paintperfect/services/request_service.py
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from paintperfect.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from paintperfect.core.logging_config import logger
from paintperfect.models.enums import STATUS_FLOW, RequestStatus, Role
from paintperfect.models.profile import Profile
from paintperfect.models.request import JobUpdate, PaintingRequest
from paintperfect.observability.metrics import (
    requests_created_counter,
    status_transitions_counter,
)
from paintperfect.services import catalog_service, design_service
from paintperfect.services.estimator import dimensions_payload, estimate_cost, selected_rooms
from paintperfect.services.storage import (
    DIMENSIONS_BUCKET,
    JOB_UPDATES_BUCKET,
    IncomingFile,
    Storage,
    StoredFile,
    file_extension,
    key_join,
    timestamp_ms,
)


def next_status(status: str) -> Optional[str]:
    try:
        nxt = STATUS_FLOW.get(RequestStatus(status))
    except ValueError:
        return None
    return nxt.value if nxt else None


def status_label(status: Optional[str]) -> str:
    return (status or "").replace("_", " ")


def store_dimension_image(
    storage: Storage, user: Profile, image: IncomingFile, name: str
) -> StoredFile:
    """Upload a dimension sketch/photo to dimensions/<user_id>/<name>.<ext>."""
    ext = file_extension(image.content_type)
    key = key_join(user.id, f"{name}.{ext}")
    return storage.upload(DIMENSIONS_BUCKET, key, image.data, image.content_type)


def persist_request(
    db: Session,
    *,
    user: Profile,
    vendor_id: Optional[str],
    design_id: Optional[str],
    room_types: Mapping[str, int],
    dimensions: Optional[Dict[str, float]],
    estimated_cost: Any,
    dimension_image: Optional[str],
    source: str,
    commit: bool = True,
) -> PaintingRequest:
    request = PaintingRequest(
        user_id=user.id,
        vendor_id=vendor_id,
        design_id=design_id,
        room_types=dict(room_types),
        dimensions=dimensions,
        estimated_cost=float(estimated_cost),
        dimension_image=dimension_image or None,
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    if commit:
        db.commit()
        db.refresh(request)
    else:
        db.flush()

    requests_created_counter.labels(source=source).inc()
    logger.info(
        "request_created",
        request_id=request.id,
        user_id=user.id,
        vendor_id=vendor_id,
        estimated_cost=float(estimated_cost),
        source=source,
    )
    return request


def create_request(
    db: Session,
    storage: Storage,
    user: Profile,
    *,
    design_id: Optional[str],
    room_counts: Optional[Mapping[str, Any]],
    length: Any = None,
    breadth: Any = None,
    dimension_image: Optional[IncomingFile] = None,
) -> PaintingRequest:
    """Request a painting job for one design directly (no cart)."""
    if not design_id:
        raise ValidationError("Please choose a design before submitting")
    design = design_service.get_design(db, design_id)

    rooms = selected_rooms(room_counts)
    if not rooms:
        raise ValidationError("Please select at least one room")
    if dimension_image is None or not dimension_image.data:
        raise ValidationError("Please upload a dimension image")

    cost = estimate_cost(rooms, length, breadth, catalog_service.rate_table(db))
    stored = store_dimension_image(storage, user, dimension_image, uuid4().hex)

    try:
        return persist_request(
            db,
            user=user,
            vendor_id=design.vendor_id,
            design_id=design.id,
            room_types=rooms,
            dimensions=dimensions_payload(length, breadth),
            estimated_cost=cost,
            dimension_image=stored.url,
            source="dialog",
        )
    except SQLAlchemyError:
        db.rollback()
        storage.delete(DIMENSIONS_BUCKET, stored.key)
        raise


def _base_query(db: Session):
    return db.query(PaintingRequest).options(
        joinedload(PaintingRequest.user),
        joinedload(PaintingRequest.vendor),
    )


def list_for_user(db: Session, user: Profile) -> List[PaintingRequest]:
    return (
        _base_query(db)
        .filter(PaintingRequest.user_id == user.id)
        .order_by(PaintingRequest.created_at.desc())
        .all()
    )


def list_for_vendor(db: Session, vendor: Profile) -> List[PaintingRequest]:
    return (
        _base_query(db)
        .filter(PaintingRequest.vendor_id == vendor.id)
        .order_by(PaintingRequest.created_at.desc())
        .all()
    )


def list_all(db: Session) -> List[PaintingRequest]:
    return _base_query(db).order_by(PaintingRequest.created_at.desc()).all()


def get_request(db: Session, request_id: str) -> PaintingRequest:
    request = db.get(PaintingRequest, request_id)
    if request is None:
        raise NotFoundError("Painting request not found")
    return request


def can_view(profile: Profile, request: PaintingRequest) -> bool:
    if profile.role == Role.ADMIN.value:
        return True
    return profile.id in (request.user_id, request.vendor_id)


def _assigned_request(db: Session, vendor: Profile, request_id: str) -> PaintingRequest:
    if not vendor.is_vendor or not vendor.is_approved:
        raise PermissionDeniedError("Only approved vendors can update jobs")
    request = get_request(db, request_id)
    if request.vendor_id != vendor.id:
        raise PermissionDeniedError("This request is not assigned to you")
    return request


def advance_status(db: Session, vendor: Profile, request_id: str) -> PaintingRequest:
    """Move an assigned request one step along pending -> ... -> completed."""
    request = _assigned_request(db, vendor, request_id)
    new_status = next_status(request.status)
    if new_status is None:
        raise ValidationError(f"Request is already {status_label(request.status)}")

    request.status = new_status
    db.add(
        JobUpdate(
            request_id=request.id,
            status=new_status,
            notes=f"Status updated to {status_label(new_status)}",
        )
    )
    db.commit()
    db.refresh(request)

    status_transitions_counter.labels(to_status=new_status).inc()
    logger.info(
        "request_status_changed",
        request_id=request.id,
        vendor_id=vendor.id,
        status=new_status,
    )
    return request


def post_job_update(
    db: Session,
    storage: Storage,
    vendor: Profile,
    request_id: str,
    *,
    notes: Optional[str] = None,
    before_image: Optional[IncomingFile] = None,
    after_image: Optional[IncomingFile] = None,
) -> JobUpdate:
    """Progress note with optional before/after photos; status is unchanged."""
    request = _assigned_request(db, vendor, request_id)
    notes = (notes or "").strip() or None
    if not notes and before_image is None and after_image is None:
        raise ValidationError("Add a note or at least one photo")

    urls: Dict[str, Optional[str]] = {"before": None, "after": None}
    for label, image in (("before", before_image), ("after", after_image)):
        if image is None or not image.data:
            continue
        ext = file_extension(image.content_type)
        key = key_join(request.id, f"{label}_{timestamp_ms()}.{ext}")
        urls[label] = storage.upload(JOB_UPDATES_BUCKET, key, image.data, image.content_type).url

    update = JobUpdate(
        request_id=request.id,
        status=request.status,
        notes=notes,
        before_image=urls["before"],
        after_image=urls["after"],
    )
    db.add(update)
    db.commit()
    db.refresh(update)
    logger.info("job_update_posted", request_id=request.id, vendor_id=vendor.id)
    return update


def list_job_updates(db: Session, viewer: Profile, request_id: str) -> List[JobUpdate]:
    request = get_request(db, request_id)
    if not can_view(viewer, request):
        raise PermissionDeniedError("You cannot view this request")
    return (
        db.query(JobUpdate)
        .filter(JobUpdate.request_id == request.id)
        .order_by(JobUpdate.updated_at.asc())
        .all()
    )
