import os
import tempfile

# settings are read at import time: point them at throwaway locations first
_TMP = tempfile.mkdtemp(prefix="paintperfect-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP}/test.db"
os.environ["LOCAL_STORAGE_ROOT"] = os.path.join(_TMP, "storage")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from paintperfect import models  # noqa: F401
from paintperfect.auth.passwords import hash_password
from paintperfect.db import Base, SessionLocal, engine
from paintperfect.main import app
from paintperfect.models.catalog import Category, Pricing
from paintperfect.models.design import PaintingDesign
from paintperfect.models.enums import PriceType, Role
from paintperfect.models.profile import Profile
from paintperfect.services.auth_service import issue_token
from paintperfect.services.storage import IncomingFile, LocalStorage

PASSWORD = "secret123"

# smallest thing that passes the content-type check
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def _fresh_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(base_path=str(tmp_path / "storage"))


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def png():
    def _make(name="photo.png"):
        return IncomingFile(filename=name, content_type="image/png", data=PNG_BYTES)

    return _make


@pytest.fixture
def make_profile(db):
    def _make(email, role=Role.USER, approved=True, name=None, company_name=None):
        profile = Profile(
            email=email,
            password_hash=hash_password(PASSWORD),
            name=name or email.split("@")[0].title(),
            role=role.value,
            company_name=company_name,
            is_approved=approved,
            is_active=True,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def customer(make_profile):
    return make_profile("customer@example.com", Role.USER)


@pytest.fixture
def vendor(make_profile):
    return make_profile("vendor@example.com", Role.VENDOR, company_name="Brush Co")


@pytest.fixture
def pending_vendor(make_profile):
    return make_profile("newvendor@example.com", Role.VENDOR, approved=False)


@pytest.fixture
def admin(make_profile):
    return make_profile("admin@example.com", Role.ADMIN)


@pytest.fixture
def bearer():
    def _headers(profile):
        return {"Authorization": f"Bearer {issue_token(profile)}"}

    return _headers


@pytest.fixture
def login(client):
    def _login(profile, password=PASSWORD):
        r = client.post(
            "/auth/login",
            data={"email": profile.email, "password": password, "next": "/dashboard"},
            follow_redirects=False,
        )
        assert r.status_code == 303
        return r

    return _login


@pytest.fixture
def rooms(db):
    """Bedroom at $2.50/sq ft, Kitchen at $350 per room, Attic without a price."""
    bedroom = Category(type="room", value="Bedroom")
    kitchen = Category(type="room", value="Kitchen")
    attic = Category(type="room", value="Attic")
    db.add_all([bedroom, kitchen, attic])
    db.flush()
    db.add_all(
        [
            Pricing(category_id=bedroom.id, price_type=PriceType.PER_SQ_FT.value, price_value=2.5),
            Pricing(category_id=kitchen.id, price_type=PriceType.PER_ROOM.value, price_value=350.0),
        ]
    )
    db.commit()
    return {"Bedroom": bedroom, "Kitchen": kitchen, "Attic": attic}


@pytest.fixture
def make_design(db):
    def _make(vendor, title="Sunset Lounge", category="Interior", tags=None):
        design = PaintingDesign(
            vendor_id=vendor.id,
            title=title,
            category=category,
            tags=tags if tags is not None else ["warm", "living"],
            image_url=f"/files/designs/{vendor.id}/{title}.png",
            image_key=None,
        )
        db.add(design)
        db.commit()
        db.refresh(design)
        return design

    return _make


@pytest.fixture
def design(make_design, vendor):
    return make_design(vendor)
