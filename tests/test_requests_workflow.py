import json

import pytest
from sqlalchemy.exc import OperationalError

from paintperfect.core.exceptions import PermissionDeniedError, ValidationError
from paintperfect.models.enums import Role
from paintperfect.models.request import PaintingRequest
from paintperfect.services import request_service

from conftest import PNG_BYTES


@pytest.fixture
def make_request(db):
    def _make(user, vendor=None, design=None, rooms=None, cost=100.0):
        return request_service.persist_request(
            db,
            user=user,
            vendor_id=vendor.id if vendor else None,
            design_id=design.id if design else None,
            room_types=rooms or {"Bedroom": 1},
            dimensions=None,
            estimated_cost=cost,
            dimension_image=None,
            source="test",
        )

    return _make


def test_next_status_chain():
    assert request_service.next_status("pending") == "accepted"
    assert request_service.next_status("accepted") == "in_progress"
    assert request_service.next_status("in_progress") == "completed"
    assert request_service.next_status("completed") is None
    assert request_service.next_status("bogus") is None
    assert request_service.status_label("in_progress") == "in progress"


def test_create_request(db, storage, customer, design, rooms, png):
    req = request_service.create_request(
        db,
        storage,
        customer,
        design_id=design.id,
        room_counts={"Bedroom": 1, "Kitchen": 1, "Attic": 0},
        length="15",
        breadth="12",
        dimension_image=png(),
    )
    assert req.vendor_id == design.vendor_id
    assert req.room_types == {"Bedroom": 1, "Kitchen": 1}
    assert req.dimensions == {"length": 15.0, "breadth": 12.0}
    # 180 sq ft * 2.50 + 350
    assert req.estimated_cost == 800.0
    assert req.dimension_image.startswith(f"/files/dimensions/{customer.id}/")
    assert req.status == "pending"


def test_create_request_removes_dimension_image_when_commit_fails(
    db, storage, customer, design, rooms, png, monkeypatch
):
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(OperationalError):
        request_service.create_request(
            db,
            storage,
            customer,
            design_id=design.id,
            room_counts={"Bedroom": 1},
            dimension_image=png("plan.html"),
        )
    assert not any(p.is_file() for p in storage.base_path.rglob("*"))


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"design_id": None}, "Please choose a design before submitting"),
        ({"room_counts": {"Bedroom": 0}}, "Please select at least one room"),
        ({"dimension_image": None}, "Please upload a dimension image"),
    ],
)
def test_create_request_validation(db, storage, customer, design, png, overrides, message):
    kwargs = {"design_id": design.id, "room_counts": {"Bedroom": 1}, "dimension_image": png()}
    kwargs.update(overrides)
    with pytest.raises(ValidationError) as exc:
        request_service.create_request(db, storage, customer, **kwargs)
    assert exc.value.message == message
    assert db.query(PaintingRequest).count() == 0


def test_vendor_advances_status_and_logs_updates(db, customer, vendor, make_request):
    req = make_request(customer, vendor)
    for expected in ("accepted", "in_progress", "completed"):
        req = request_service.advance_status(db, vendor, req.id)
        assert req.status == expected

    with pytest.raises(ValidationError):
        request_service.advance_status(db, vendor, req.id)

    notes = [u.notes for u in request_service.list_job_updates(db, vendor, req.id)]
    assert notes == [
        "Status updated to accepted",
        "Status updated to in progress",
        "Status updated to completed",
    ]


def test_only_assigned_approved_vendor_can_advance(db, customer, vendor, pending_vendor, make_profile, make_request):
    other = make_profile("other@example.com", Role.VENDOR)
    req = make_request(customer, vendor)
    with pytest.raises(PermissionDeniedError):
        request_service.advance_status(db, other, req.id)

    unapproved_req = make_request(customer, pending_vendor)
    with pytest.raises(PermissionDeniedError):
        request_service.advance_status(db, pending_vendor, unapproved_req.id)

    with pytest.raises(PermissionDeniedError):
        request_service.advance_status(db, customer, req.id)


def test_post_job_update_with_photos(db, storage, customer, vendor, make_request, png):
    req = make_request(customer, vendor)
    update = request_service.post_job_update(
        db, storage, vendor, req.id, notes="  Primer done ", before_image=png("before.png")
    )
    assert update.notes == "Primer done"
    assert update.status == "pending"
    assert update.before_image.startswith(f"/files/job-updates/{req.id}/before_")
    assert update.after_image is None

    with pytest.raises(ValidationError):
        request_service.post_job_update(db, storage, vendor, req.id, notes="   ")


def test_job_updates_visibility(db, customer, vendor, admin, make_profile, make_request):
    stranger = make_profile("stranger@example.com", Role.USER)
    req = make_request(customer, vendor)
    request_service.advance_status(db, vendor, req.id)

    for viewer in (customer, vendor, admin):
        assert len(request_service.list_job_updates(db, viewer, req.id)) == 1
    with pytest.raises(PermissionDeniedError):
        request_service.list_job_updates(db, stranger, req.id)


def test_listings_are_scoped_and_newest_first(db, customer, vendor, make_profile, make_request):
    other = make_profile("other@example.com", Role.USER)
    first = make_request(customer, vendor)
    second = make_request(customer)
    make_request(other, vendor)

    assert [r.id for r in request_service.list_for_user(db, customer)] == [second.id, first.id]
    assert len(request_service.list_for_vendor(db, vendor)) == 2
    assert len(request_service.list_all(db)) == 3


# ---------- pages / API ----------


def test_user_dashboard_create_request(client, db, customer, design, rooms, login):
    login(customer)
    r = client.post(
        "/user/requests",
        data={"design_id": design.id, "room__Bedroom": "2", "room__Kitchen": "0", "length": "", "breadth": ""},
        files={"dimension_image": ("plan.png", PNG_BYTES, "image/png")},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert "msg=" in r.headers["location"]

    req = db.query(PaintingRequest).one()
    assert req.room_types == {"Bedroom": 2}
    assert req.dimensions is None
    assert req.estimated_cost == 500.0

    r = client.get("/user/dashboard")
    assert "2 Bedrooms" in r.text
    assert "$500.00" in r.text


def test_user_dashboard_create_request_requires_image(client, db, customer, design, rooms, login):
    login(customer)
    r = client.post(
        "/user/requests",
        data={"design_id": design.id, "room__Bedroom": "1"},
        follow_redirects=False,
    )
    assert "error=" in r.headers["location"]
    assert db.query(PaintingRequest).count() == 0


def test_vendor_dashboard_advance_and_detail(client, db, customer, vendor, make_request, login):
    req = make_request(customer, vendor)
    login(vendor)

    r = client.get("/vendor/dashboard")
    assert r.status_code == 200
    assert "Mark as accepted" in r.text

    r = client.post(f"/vendor/requests/{req.id}/advance", follow_redirects=False)
    assert r.status_code == 303
    db.expire_all()
    assert db.get(PaintingRequest, req.id).status == "accepted"

    r = client.get(f"/requests/{req.id}")
    assert r.status_code == 200
    assert "Status updated to accepted" in r.text


def test_api_request_lifecycle(client, db, customer, vendor, design, rooms, bearer):
    r = client.post(
        "/api/requests",
        data={"design_id": design.id, "room_counts": json.dumps({"Kitchen": 1}), "length": "9", "breadth": "9"},
        files={"dimension_image": ("plan.png", PNG_BYTES, "image/png")},
        headers=bearer(customer),
    )
    assert r.status_code == 201
    req_id = r.json()["id"]
    assert r.json()["estimated_cost"] == 350.0

    r = client.post(f"/api/requests/{req_id}/advance", headers=bearer(vendor))
    assert r.json()["status"] == "accepted"

    r = client.post(
        f"/api/requests/{req_id}/updates",
        data={"notes": "Walls sanded"},
        headers=bearer(vendor),
    )
    assert r.status_code == 201

    r = client.get(f"/api/requests/{req_id}/updates", headers=bearer(customer))
    assert [u["notes"] for u in r.json()] == ["Status updated to accepted", "Walls sanded"]

    r = client.get("/api/requests/stats", headers=bearer(vendor))
    assert r.json()["total"] == 1


def test_api_create_request_rejects_bad_room_json(client, customer, design, bearer):
    r = client.post(
        "/api/requests",
        data={"design_id": design.id, "room_counts": "not json"},
        headers=bearer(customer),
    )
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "validation_error"
