# solidaria/routers/kermesses.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from solidaria.database import get_db
from solidaria.core.auth import get_current_user
from solidaria.schemas.kermesse import (
    CollaboratorResponse,
    DishCreate,
    DishResponse,
    IngredientCreate,
    IngredientResponse,
    KermesseCreate,
    KermesseDetailResponse,
    KermesseResponse,
    KermesseStatusUpdate,
)
from solidaria.services import kermesses as kermesse_service
from solidaria.services.collaboration import list_collaborators

router = APIRouter(
    prefix="/kermesses",
    tags=["Kermesses"],
)


@router.get("", response_model=list[KermesseResponse])
def list_kermesses(db: Session = Depends(get_db)):
    return kermesse_service.list_active_kermesses(db)


@router.post(
    "",
    response_model=KermesseResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_kermesse(
    kermesse_data: KermesseCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return kermesse_service.create_kermesse(db, current_user.id, kermesse_data)


@router.get("/{kermesse_id}", response_model=KermesseDetailResponse)
def get_kermesse(
    kermesse_id: int,
    db: Session = Depends(get_db),
):
    kermesse = kermesse_service.get_kermesse_detail(db, kermesse_id)

    return KermesseDetailResponse(
        **KermesseResponse.model_validate(kermesse).model_dump(),
        dishes=[DishResponse.model_validate(dish) for dish in kermesse.dishes],
        ingredients=[IngredientResponse.model_validate(i) for i in kermesse.ingredients],
        collaborators=[
            CollaboratorResponse.model_validate(c)
            for c in list_collaborators(db, kermesse.id)
        ],
    )


@router.patch("/{kermesse_id}/status", response_model=KermesseResponse)
def update_kermesse_status(
    kermesse_id: int,
    status_data: KermesseStatusUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return kermesse_service.update_kermesse_status(
        db,
        kermesse_id,
        current_user.id,
        status_data.status,
    )


@router.post(
    "/{kermesse_id}/dishes",
    response_model=DishResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_dish(
    kermesse_id: int,
    dish_data: DishCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return kermesse_service.create_dish(db, kermesse_id, current_user.id, dish_data)


@router.post(
    "/{kermesse_id}/ingredients",
    response_model=IngredientResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient(
    kermesse_id: int,
    ingredient_data: IngredientCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return kermesse_service.create_ingredient(db, kermesse_id, current_user.id, ingredient_data)
