from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.responses import Response

from paintperfect.auth.deps import require_roles
from paintperfect.db import get_db
from paintperfect.models.enums import Role
from paintperfect.models.profile import Profile
from paintperfect.schemas.catalog import (
    CategoryIn,
    CategoryOut,
    EstimateIn,
    EstimateOut,
    PricingIn,
    PricingOut,
)
from paintperfect.services import catalog_service
from paintperfect.services.estimator import estimate_cost, resolve_dimensions, selected_rooms

router = APIRouter(prefix="/api/catalog", tags=["api-catalog"])


@router.get("/rooms", response_model=List[CategoryOut])
def list_rooms(db: Session = Depends(get_db)):
    return catalog_service.list_room_categories(db)


@router.get("/pricing", response_model=List[PricingOut])
def list_pricing(db: Session = Depends(get_db)):
    return catalog_service.list_pricing(db)


@router.post("/estimate", response_model=EstimateOut)
def estimate(payload: EstimateIn, db: Session = Depends(get_db)):
    length, breadth = resolve_dimensions(payload.length, payload.breadth)
    return EstimateOut(
        estimated_cost=estimate_cost(
            payload.room_counts, payload.length, payload.breadth, catalog_service.rate_table(db)
        ),
        rooms=selected_rooms(payload.room_counts),
        length_ft=length,
        breadth_ft=breadth,
    )


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryIn,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_roles(Role.ADMIN)),
):
    return catalog_service.create_category(db, value=payload.value, type=payload.type)


@router.put("/pricing", response_model=PricingOut)
def set_pricing(
    payload: PricingIn,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_roles(Role.ADMIN)),
):
    return catalog_service.set_pricing(
        db,
        category_id=payload.category_id,
        price_value=payload.price_value,
        price_type=payload.price_type.value,
    )


@router.delete("/categories/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_roles(Role.ADMIN)),
):
    catalog_service.delete_category(db, category_id)
    return Response(status_code=204)
