# solidaria/routers/donations.py

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from solidaria.database import get_db
from solidaria.core.auth import get_current_user
from solidaria.core.rate_limiter import limiter
from solidaria.schemas.donation import (
    DonationCreate,
    DonationResponse,
    IngredientProgressResponse,
)
from solidaria.services import donations as donation_service

router = APIRouter(tags=["Ingredient Donations"])


@router.get(
    "/kermesses/{kermesse_id}/ingredients/progress",
    response_model=list[IngredientProgressResponse],
)
def get_ingredients_with_progress(
    kermesse_id: int,
    db: Session = Depends(get_db),
):
    return donation_service.ingredient_progress(db, kermesse_id)


@router.post(
    "/ingredients/{ingredient_id}/donate",
    response_model=DonationResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("20/minute")
def donate_ingredient(
    request: Request,
    ingredient_id: int,
    donation_data: DonationCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return donation_service.record_donation(
        db,
        ingredient_id,
        current_user.id,
        donation_data.quantity,
    )
