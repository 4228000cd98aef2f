import re

import pytest
from sqlalchemy.exc import OperationalError

from paintperfect.core.exceptions import PermissionDeniedError, ValidationError
from paintperfect.models.design import PaintingDesign
from paintperfect.models.enums import Role
from paintperfect.services import design_service
from paintperfect.services.storage import IncomingFile

from conftest import PNG_BYTES


@pytest.fixture
def portfolio(make_design, vendor):
    return [
        make_design(vendor, "Ocean Bedroom", "Interior", ["blue", "calm"]),
        make_design(vendor, "Brick Facade", "Exterior", ["heritage"]),
        make_design(vendor, "Cafe Mural", "Artistic", ["Blue", "mural"]),
    ]


def test_list_designs_newest_first(db, portfolio):
    designs, total = design_service.list_designs(db)
    assert total == 3
    assert [d.title for d in designs] == ["Cafe Mural", "Brick Facade", "Ocean Bedroom"]


def test_category_filter_is_exact(db, portfolio):
    designs, total = design_service.list_designs(db, category="Exterior")
    assert [d.title for d in designs] == ["Brick Facade"]
    assert total == 3

    designs, _ = design_service.list_designs(db, category="exterior")
    assert designs == []


def test_search_matches_title_and_tags_case_insensitively(db, portfolio):
    designs, _ = design_service.list_designs(db, search="BLUE")
    assert {d.title for d in designs} == {"Ocean Bedroom", "Cafe Mural"}

    designs, _ = design_service.list_designs(db, search="facade")
    assert [d.title for d in designs] == ["Brick Facade"]

    designs, _ = design_service.list_designs(db, category="Interior", search="mural")
    assert designs == []


def test_parse_tags():
    assert design_service.parse_tags(" warm, , cozy ,") == ["warm", "cozy"]
    assert design_service.parse_tags(None) == []


def test_upload_design_stores_image_under_vendor(db, storage, vendor, png):
    design = design_service.upload_design(
        db,
        storage,
        vendor,
        title=" Sage Kitchen ",
        category="Interior",
        tags_csv="green, kitchen",
        image=png("kitchen.PNG"),
    )
    assert design.title == "Sage Kitchen"
    assert design.tags == ["green", "kitchen"]
    assert re.fullmatch(rf"{vendor.id}/\d+\.png", design.image_key)
    assert design.image_url == f"/files/designs/{design.image_key}"
    assert storage.exists("designs", design.image_key)


@pytest.mark.parametrize("missing", ["title", "category", "image"])
def test_upload_design_requires_title_category_and_image(db, storage, vendor, png, missing):
    kwargs = {"title": "T", "category": "Interior", "tags_csv": "", "image": png()}
    kwargs[missing] = None if missing == "image" else ""
    with pytest.raises(ValidationError) as exc:
        design_service.upload_design(db, storage, vendor, **kwargs)
    assert exc.value.message == "Title, category, and image are required."


def test_upload_design_requires_approved_vendor(db, storage, pending_vendor, customer, png):
    for profile in (pending_vendor, customer):
        with pytest.raises(PermissionDeniedError):
            design_service.upload_design(
                db, storage, profile, title="T", category="Interior", tags_csv="", image=png()
            )


def test_upload_design_extension_follows_content_type(db, storage, vendor):
    design = design_service.upload_design(
        db,
        storage,
        vendor,
        title="T",
        category="Interior",
        tags_csv="",
        image=IncomingFile("evil.html", "image/png", b"<script>alert(1)</script>"),
    )
    assert design.image_key.endswith(".png")
    assert ".html" not in design.image_url


def test_upload_design_removes_image_when_commit_fails(db, storage, vendor, png, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(OperationalError):
        design_service.upload_design(
            db, storage, vendor, title="T", category="Interior", tags_csv="", image=png()
        )
    assert not any(p.is_file() for p in storage.base_path.rglob("*"))


def test_upload_rejects_non_image(db, storage, vendor):
    with pytest.raises(ValidationError):
        design_service.upload_design(
            db,
            storage,
            vendor,
            title="T",
            category="Interior",
            tags_csv="",
            image=IncomingFile("notes.txt", "text/plain", b"hello"),
        )


def test_delete_design_only_by_owner(db, storage, vendor, make_profile, png):
    other = make_profile("other@example.com", Role.VENDOR)
    design = design_service.upload_design(
        db, storage, vendor, title="T", category="Interior", tags_csv="", image=png()
    )
    with pytest.raises(PermissionDeniedError):
        design_service.delete_design(db, storage, other, design.id)

    key = design.image_key
    design_service.delete_design(db, storage, vendor, design.id)
    assert db.get(PaintingDesign, design.id) is None
    assert not storage.exists("designs", key)


# ---------- pages / API ----------


def test_gallery_page_shows_counts_and_filters(client, portfolio):
    r = client.get("/gallery", params={"category": "Interior"})
    assert r.status_code == 200
    assert "Showing 1 of 3 projects" in r.text
    assert "Ocean Bedroom" in r.text
    assert "Brick Facade" not in r.text


def test_public_pages_render(client):
    for path in ("/", "/about-us", "/services", "/gallery", "/auth", "/health"):
        assert client.get(path).status_code == 200, path


def test_api_designs_list_and_filter(client, portfolio):
    r = client.get("/api/designs", params={"search": "blue"})
    assert r.status_code == 200
    body = r.json()
    assert body["showing"] == 2
    assert body["total"] == 3


def test_api_upload_design(client, vendor, pending_vendor, bearer):
    files = {"image": ("wall.png", PNG_BYTES, "image/png")}
    data = {"title": "Feature Wall", "category": "Interior", "tags": "accent, bold"}

    r = client.post("/api/designs", data=data, files=files, headers=bearer(pending_vendor))
    assert r.status_code == 403

    r = client.post("/api/designs", data=data, files=files, headers=bearer(vendor))
    assert r.status_code == 201
    assert r.json()["tags"] == ["accent", "bold"]

    r = client.get("/api/designs/mine", headers=bearer(vendor))
    assert [d["title"] for d in r.json()] == ["Feature Wall"]


def test_vendor_dashboard_upload_flow(client, db, vendor, login):
    login(vendor)
    r = client.post(
        "/vendor/designs",
        data={"title": "Loft", "category": "Commercial", "tags": "open"},
        files={"image": ("loft.png", PNG_BYTES, "image/png")},
        follow_redirects=False,
    )
    assert r.status_code == 303
    assert "msg=" in r.headers["location"]
    assert db.query(PaintingDesign).filter(PaintingDesign.title == "Loft").count() == 1

    r = client.get("/vendor/dashboard")
    assert r.status_code == 200
    assert "Loft" in r.text


def test_api_upload_ignores_client_file_extension(client, vendor, bearer):
    r = client.post(
        "/api/designs",
        data={"title": "Sneaky", "category": "Interior"},
        files={"image": ("evil.html", b"<script>alert(1)</script>", "image/png")},
        headers=bearer(vendor),
    )
    assert r.status_code == 201
    url = r.json()["image_url"]
    assert url.endswith(".png")

    r = client.get(url)
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"
