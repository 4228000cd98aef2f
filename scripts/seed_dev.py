# scripts/seed_dev.py
"""
Seed a development database (python -m scripts.seed_dev): room types with pricing and three demo
accounts (customer, approved vendor, admin). Safe to run repeatedly.
"""
from paintperfect import models  # noqa: F401
from paintperfect.db import Base, SessionLocal, engine
from paintperfect.models.catalog import Category
from paintperfect.models.enums import PriceType, Role
from paintperfect.models.profile import Profile
from paintperfect.services import auth_service, catalog_service
from paintperfect.services.admin_service import approve_vendor
from scripts.bootstrap_admin import bootstrap_admin

ROOMS = [
    ("Bedroom", PriceType.PER_SQ_FT, 2.50),
    ("Living Room", PriceType.PER_SQ_FT, 2.25),
    ("Dining Room", PriceType.PER_SQ_FT, 2.25),
    ("Kitchen", PriceType.PER_ROOM, 350.0),
    ("Bathroom", PriceType.PER_ROOM, 250.0),
    ("Hallway", PriceType.PER_SQ_FT, 1.75),
]

DEMO_PASSWORD = "demo12345"
CUSTOMER_EMAIL = "customer@paintperfect.com"
VENDOR_EMAIL = "vendor@paintperfect.com"
ADMIN_EMAIL = "admin@paintperfect.com"


def seed_rooms(db) -> None:
    for value, price_type, price in ROOMS:
        category = (
            db.query(Category)
            .filter(Category.type == "room", Category.value == value)
            .first()
        )
        if category is None:
            category = catalog_service.create_category(db, value=value)
        catalog_service.set_pricing(
            db, category_id=category.id, price_value=price, price_type=price_type.value
        )
        print(f"room: {value} -> {price} {price_type.value}")


def seed_account(db, *, email: str, name: str, role: Role, company_name=None) -> Profile:
    profile = db.query(Profile).filter(Profile.email == email).first()
    if profile is None:
        profile = auth_service.sign_up(
            db,
            email=email,
            password=DEMO_PASSWORD,
            name=name,
            role=role.value,
            company_name=company_name,
        )
        print("account created:", email)
    return profile


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_rooms(db)
        seed_account(db, email=CUSTOMER_EMAIL, name="Demo Customer", role=Role.USER)
        vendor = seed_account(
            db,
            email=VENDOR_EMAIL,
            name="Demo Vendor",
            role=Role.VENDOR,
            company_name="Brush & Roller Co.",
        )
        admin = bootstrap_admin(db, email=ADMIN_EMAIL, password=DEMO_PASSWORD)
        if not vendor.is_approved:
            approve_vendor(db, admin, vendor.id)
            print("vendor approved:", VENDOR_EMAIL)

        print("\nDemo accounts (password: %s):" % DEMO_PASSWORD)
        for email in (CUSTOMER_EMAIL, VENDOR_EMAIL, ADMIN_EMAIL):
            print(" -", email)
    finally:
        db.close()


if __name__ == "__main__":
    main()
