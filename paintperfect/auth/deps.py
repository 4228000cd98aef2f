from typing import Callable, Optional
from urllib.parse import quote

import jwt as pyjwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from paintperfect.auth.jwt import decode_token
from paintperfect.db import get_db
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile

security = HTTPBearer(auto_error=False)  # no auto-error: pages redirect instead

COOKIE_NAME = "access_token"


def _extract_token(
    request: Request, creds: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    # 1) cookie
    cookie_token = request.cookies.get(COOKIE_NAME)
    if cookie_token:
        return cookie_token

    # 2) Authorization header
    if creds and creds.credentials:
        return creds.credentials

    return None


def _load_profile(db: Session, token: Optional[str]) -> Optional[Profile]:
    if not token:
        return None
    try:
        payload = decode_token(token)
    except pyjwt.PyJWTError:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    profile = db.get(Profile, user_id)
    if not profile or not profile.is_active:
        return None
    return profile


def get_optional_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[Profile]:
    """Profile for the current session, or None for guests."""
    profile = _load_profile(db, _extract_token(request, creds))
    request.state.user_id = profile.id if profile else None
    return profile


def get_current_user(
    profile: Optional[Profile] = Depends(get_optional_user),
) -> Profile:
    if profile is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return profile


def require_roles(*roles: Role) -> Callable[..., Profile]:
    """JSON API gate: 401 without a session, 403 for a role outside `roles`."""
    allowed = {r.value for r in roles}

    def _dep(profile: Profile = Depends(get_current_user)) -> Profile:
        if profile.role not in allowed:
            raise HTTPException(status_code=403, detail="Forbidden for this role")
        return profile

    return _dep


def require_approved_vendor(
    profile: Profile = Depends(require_roles(Role.VENDOR)),
) -> Profile:
    if not profile.is_approved:
        raise HTTPException(status_code=403, detail="Vendor account is not approved yet")
    return profile


def _redirect(location: str, detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_303_SEE_OTHER,
        detail=detail,
        headers={"Location": location},
    )


def require_page_user(request: Request, profile: Optional[Profile]) -> Profile:
    if profile is None:
        next_url = "/dashboard"
        if request.method == "GET":
            qs = request.url.query
            next_url = request.url.path + (("?" + qs) if qs else "")
        raise _redirect(f"/auth?next={quote(next_url)}", "Not authenticated")
    return profile


def require_page_roles(*roles: Role) -> Callable[..., Profile]:
    """
    HTML gate for dashboards.

    Guests are sent to /auth; signed-in profiles with another role are sent
    back to the landing page.
    """
    allowed = {r.value for r in roles}

    def _dep(
        request: Request,
        profile: Optional[Profile] = Depends(get_optional_user),
    ) -> Profile:
        profile = require_page_user(request, profile)
        if profile.role not in allowed:
            raise _redirect("/", "Forbidden for this role")
        return profile

    return _dep
