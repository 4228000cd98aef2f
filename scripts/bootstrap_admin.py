# scripts/bootstrap_admin.py
"""
Create (or reset) an admin account. Admins cannot sign up through the site.

    python -m scripts.bootstrap_admin --email admin@paintperfect.com --password secret123
"""
import argparse
import os

from paintperfect import models  # noqa: F401
from paintperfect.auth.passwords import hash_password
from paintperfect.db import Base, SessionLocal, engine, utcnow
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.services.auth_service import MIN_PASSWORD_LENGTH, normalize_email


def bootstrap_admin(db, *, email: str, password: str, name: str = "Admin") -> Profile:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = normalize_email(email)
    admin = db.query(Profile).filter(Profile.email == email).first()
    if admin is None:
        admin = Profile(email=email, name=name)
        db.add(admin)
        print("admin created:", email)
    else:
        print("admin updated/reset password:", email)

    admin.password_hash = hash_password(password)
    admin.role = Role.ADMIN.value
    admin.is_approved = True
    admin.approved_at = admin.approved_at or utcnow()
    admin.is_active = True
    db.commit()
    db.refresh(admin)
    return admin


def main():
    parser = argparse.ArgumentParser(description="Create or reset a PaintPerfect admin")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@paintperfect.com"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args()
    if not args.password:
        parser.error("--password (or ADMIN_PASSWORD) is required")

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        bootstrap_admin(db, email=args.email, password=args.password, name=args.name)
        print("\nLOGIN WITH:")
        print("email:", normalize_email(args.email))
    finally:
        db.close()


if __name__ == "__main__":
    main()
