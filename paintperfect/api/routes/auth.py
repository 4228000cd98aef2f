from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from sqlalchemy.orm import Session
from starlette.responses import Response

from paintperfect.auth.deps import get_current_user
from paintperfect.core.rate_limit import auth_limit
from paintperfect.db import get_db
from paintperfect.dependencies import get_storage_service
from paintperfect.models.profile import Profile
from paintperfect.routers.auth import clear_session_cookie
from paintperfect.schemas.auth import LoginIn, ProfileOut, SignUpIn, TokenOut
from paintperfect.services import auth_service
from paintperfect.services.storage import Storage
from paintperfect.web.forms import incoming_file

router = APIRouter(prefix="/api/auth", tags=["api-auth"])


@router.post("/signup", response_model=ProfileOut, status_code=201)
@auth_limit
def signup(request: Request, payload: SignUpIn, db: Session = Depends(get_db)):
    """Create a customer or vendor account. No token is issued."""
    return auth_service.sign_up(
        db,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        role=payload.role,
        company_name=payload.company_name,
    )


@router.post("/login", response_model=TokenOut)
@auth_limit
def login(request: Request, payload: LoginIn, db: Session = Depends(get_db)):
    profile = auth_service.authenticate(db, email=payload.email, password=payload.password)
    return TokenOut(
        access_token=auth_service.issue_token(profile),
        role=profile.role,
        dashboard=auth_service.dashboard_path(profile),
    )


@router.post("/logout", status_code=204)
def logout():
    resp = Response(status_code=204)
    clear_session_cookie(resp)
    return resp


@router.get("/me", response_model=ProfileOut)
def me(user: Profile = Depends(get_current_user)):
    return user


@router.post("/me/avatar", response_model=ProfileOut)
async def upload_avatar(
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    user: Profile = Depends(get_current_user),
):
    return auth_service.set_profile_image(db, storage, user, await incoming_file(image))
