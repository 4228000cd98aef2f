from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from paintperfect.auth.deps import get_optional_user, require_page_user
from paintperfect.db import get_db
from paintperfect.models.profile import Profile
from paintperfect.routers.auth import clear_session_cookie
from paintperfect.services import auth_service, catalog_service, design_service
from paintperfect.web.templating import render

router = APIRouter(tags=["pages"])

SERVICES = [
    ("Interior Painting", "Walls, ceilings and trim for every room in the house."),
    ("Exterior Painting", "Facades, fences and decks, prepared and sealed for the weather."),
    ("Commercial Projects", "Offices, shops and restaurants, scheduled around your hours."),
    ("Artistic Murals", "Custom murals and feature walls from our vendor artists."),
    ("Restoration", "Careful repair and repainting of heritage and damaged surfaces."),
    ("Color Consultation", "Help choosing a palette before the first brush stroke."),
]


@router.get("/", response_class=HTMLResponse)
def landing(
    request: Request,
    db: Session = Depends(get_db),
    user: Optional[Profile] = Depends(get_optional_user),
):
    featured, _ = design_service.list_designs(db)
    return render(request, "landing.html", {"featured": featured[:6]}, user=user)


@router.get("/about-us", response_class=HTMLResponse)
def about(request: Request, user: Optional[Profile] = Depends(get_optional_user)):
    return render(request, "about.html", user=user)


@router.get("/services", response_class=HTMLResponse)
def services(
    request: Request,
    db: Session = Depends(get_db),
    user: Optional[Profile] = Depends(get_optional_user),
):
    return render(
        request,
        "services.html",
        {"services": SERVICES, "rates": catalog_service.rate_table(db).values()},
        user=user,
    )


@router.get("/gallery", response_class=HTMLResponse)
def gallery(
    request: Request,
    category: str = design_service.ALL_CATEGORIES,
    search: str = "",
    db: Session = Depends(get_db),
    user: Optional[Profile] = Depends(get_optional_user),
):
    designs, total = design_service.list_designs(db, category=category, search=search)
    return render(
        request,
        "gallery.html",
        {
            "designs": designs,
            "total": total,
            "category": category,
            "search": search,
            "categories": design_service.GALLERY_CATEGORIES,
        },
        user=user,
    )


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request, user: Optional[Profile] = Depends(get_optional_user)):
    user = require_page_user(request, user)
    target = auth_service.dashboard_path(user)
    if target is None:
        resp = render(request, "dashboard_denied.html", status_code=403)
        clear_session_cookie(resp)
        return resp
    return RedirectResponse(url=target, status_code=303)
