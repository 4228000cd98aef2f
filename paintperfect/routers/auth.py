from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from paintperfect.auth.deps import COOKIE_NAME
from paintperfect.core.exceptions import PaintPerfectError
from paintperfect.core.rate_limit import auth_limit
from paintperfect.core.settings import settings
from paintperfect.db import get_db
from paintperfect.models.enums import Role
from paintperfect.services import auth_service
from paintperfect.web.forms import redirect_with
from paintperfect.web.templating import render

router = APIRouter(prefix="/auth", tags=["auth"])


def _safe_next(next: str) -> str:
    # open-redirect guard: relative paths only
    if not next or not next.startswith("/") or next.startswith("//"):
        return "/dashboard"
    return next


def set_session_cookie(response, token: str) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        max_age=60 * 60 * settings.JWT_EXP_HOURS,
        path="/",
    )


def clear_session_cookie(response) -> None:
    response.delete_cookie(key=COOKIE_NAME, path="/")


# ---------- HTML page ----------


@router.get("", response_class=HTMLResponse)
def auth_page(request: Request, next: str = "/dashboard", mode: str = "login"):
    return render(
        request,
        "auth.html",
        {"next": _safe_next(next), "mode": "signup" if mode == "signup" else "login"},
    )


# ---------- Form POST endpoints (cookie-setting) ----------


@router.post("/login")
@auth_limit
def login_form(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    next: str = Form("/dashboard"),
    db: Session = Depends(get_db),
):
    next = _safe_next(next)
    try:
        token = auth_service.sign_in(db, email=email, password=password)
    except PaintPerfectError as e:
        return redirect_with(f"/auth?next={quote(next)}", error=e.message)

    resp = RedirectResponse(url=next, status_code=303)
    set_session_cookie(resp, token)
    return resp


@router.post("/signup")
@auth_limit
def signup_form(
    request: Request,
    first_name: str = Form(...),
    last_name: str = Form(""),
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form(Role.USER.value),
    company_name: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        profile = auth_service.sign_up(
            db,
            email=email,
            password=password,
            name=auth_service.full_name(first_name, last_name),
            role=role,
            company_name=company_name,
        )
    except PaintPerfectError as e:
        return redirect_with("/auth?mode=signup", error=e.message)

    # no session here: the new account signs in explicitly
    msg = "Account created. Please sign in."
    if profile.role == Role.VENDOR.value:
        msg = "Vendor account created. You can sign in once an admin approves it."
    resp = redirect_with("/auth", msg=msg)
    clear_session_cookie(resp)
    return resp


@router.post("/logout")
def logout():
    resp = RedirectResponse(url="/", status_code=303)
    clear_session_cookie(resp)
    return resp
