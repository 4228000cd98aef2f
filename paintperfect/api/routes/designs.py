from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from starlette.responses import Response

from paintperfect.auth.deps import require_approved_vendor, require_roles
from paintperfect.db import get_db
from paintperfect.dependencies import get_storage_service
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.schemas.designs import DesignOut, GalleryOut
from paintperfect.services import design_service
from paintperfect.services.storage import Storage
from paintperfect.web.forms import incoming_file

router = APIRouter(prefix="/api/designs", tags=["api-designs"])


@router.get("", response_model=GalleryOut)
def list_designs(
    category: str = design_service.ALL_CATEGORIES,
    search: str = "",
    db: Session = Depends(get_db),
):
    designs, total = design_service.list_designs(db, category=category, search=search)
    return GalleryOut(
        items=[DesignOut.model_validate(d) for d in designs],
        showing=len(designs),
        total=total,
    )


@router.get("/mine", response_model=List[DesignOut])
def my_designs(
    db: Session = Depends(get_db),
    vendor: Profile = Depends(require_roles(Role.VENDOR)),
):
    return design_service.list_vendor_designs(db, vendor)


@router.get("/{design_id}", response_model=DesignOut)
def get_design(design_id: str, db: Session = Depends(get_db)):
    return design_service.get_design(db, design_id)


@router.post("", response_model=DesignOut, status_code=201)
async def upload_design(
    title: str = Form(...),
    category: str = Form(...),
    tags: str = Form(""),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    vendor: Profile = Depends(require_approved_vendor),
):
    return design_service.upload_design(
        db,
        storage,
        vendor,
        title=title,
        category=category,
        tags_csv=tags,
        image=await incoming_file(image),
    )


@router.delete("/{design_id}", status_code=204)
def delete_design(
    design_id: str,
    db: Session = Depends(get_db),
    storage: Storage = Depends(get_storage_service),
    vendor: Profile = Depends(require_roles(Role.VENDOR)),
):
    design_service.delete_design(db, storage, vendor, design_id)
    return Response(status_code=204)
