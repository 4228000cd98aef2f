# paintperfect/services/auth_service.py
from pathlib import PurePosixPath
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from paintperfect.auth.jwt import create_access_token
from paintperfect.auth.passwords import hash_password, verify_password
from paintperfect.core.exceptions import AuthenticationError, ConflictError, ValidationError
from paintperfect.core.logging_config import logger
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.services.storage import (
    AVATARS_BUCKET,
    IncomingFile,
    Storage,
    file_extension,
    key_join,
)

MIN_PASSWORD_LENGTH = 6
SELF_SERVICE_ROLES = (Role.USER, Role.VENDOR)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def full_name(first_name: str, last_name: str = "") -> str:
    return f"{(first_name or '').strip()} {(last_name or '').strip()}".strip()


def sign_up(
    db: Session,
    *,
    email: str,
    password: str,
    name: str,
    role: str = Role.USER.value,
    company_name: Optional[str] = None,
) -> Profile:
    """
    Create an account. Customers are approved immediately, vendors wait for
    an admin. Admin accounts are never created here.
    """
    email_norm = normalize_email(email)
    if not email_norm or "@" not in email_norm:
        raise ValidationError("A valid email address is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")

    try:
        role_enum = Role(role)
    except ValueError:
        raise ValidationError(f"Unknown role: {role}")
    if role_enum not in SELF_SERVICE_ROLES:
        raise ValidationError("Only customer and vendor accounts can sign up")

    existing = db.query(Profile).filter(Profile.email == email_norm).first()
    if existing:
        raise ConflictError("An account with this email already exists")

    profile = Profile(
        email=email_norm,
        password_hash=hash_password(password),
        name=name,
        role=role_enum.value,
        company_name=(company_name or "").strip() or None,
        is_approved=role_enum is Role.USER,
        is_active=True,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)

    logger.info("account_created", user_id=profile.id, role=profile.role)
    return profile


def authenticate(db: Session, *, email: str, password: str) -> Profile:
    profile = db.query(Profile).filter(Profile.email == normalize_email(email)).first()
    if not profile or not profile.is_active or not verify_password(password, profile.password_hash):
        logger.info("login_failed", email=normalize_email(email))
        raise AuthenticationError("Invalid email or password")
    return profile


def issue_token(profile: Profile) -> str:
    return create_access_token(user_id=profile.id, role=profile.role, email=profile.email)


def sign_in(db: Session, *, email: str, password: str) -> str:
    profile = authenticate(db, email=email, password=password)
    logger.info("login_succeeded", user_id=profile.id, role=profile.role)
    return issue_token(profile)


def dashboard_path(profile: Profile) -> Optional[str]:
    """
    Where /dashboard sends a profile. None means access is denied
    (a vendor that has not been approved yet).
    """
    if profile.role != Role.USER.value and not profile.is_approved:
        return None
    return {
        Role.USER.value: "/user/dashboard",
        Role.VENDOR.value: "/vendor/dashboard",
        Role.ADMIN.value: "/admin/dashboard",
    }.get(profile.role)


def set_profile_image(
    db: Session, storage: Storage, profile: Profile, image: Optional[IncomingFile]
) -> Profile:
    """Store avatars/<profile_id>/avatar.<ext> and point profile_image at it."""
    if image is None or not image.data:
        raise ValidationError("Please choose a profile photo")

    old_url = profile.profile_image
    key = key_join(profile.id, f"avatar.{file_extension(image.content_type)}")
    stored = storage.upload(AVATARS_BUCKET, key, image.data, image.content_type)

    profile.profile_image = stored.url
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.delete(AVATARS_BUCKET, stored.key)
        raise
    db.refresh(profile)

    if old_url and old_url != stored.url:
        storage.delete(AVATARS_BUCKET, key_join(profile.id, "avatar" + PurePosixPath(old_url).suffix))
    logger.info("profile_image_updated", user_id=profile.id)
    return profile
