# schemas/kermesse.py

from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional

from solidaria.core.enums import KermesseStatus


class KermesseCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    event_date: date
    beneficiary_name: str
    beneficiary_reason: str
    beneficiary_image_url: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    financial_goal: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Fundraising target, exact amount",
    )
    qr_code_url: Optional[str] = None


class KermesseStatusUpdate(BaseModel):
    status: KermesseStatus


class KermesseResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: str
    event_date: date
    beneficiary_name: str
    beneficiary_reason: str
    beneficiary_image_url: Optional[str]
    start_time: Optional[str]
    end_time: Optional[str]
    financial_goal: Optional[Decimal]
    qr_code_url: Optional[str]
    status: KermesseStatus
    organizer_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class DishCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""

    price: Decimal = Field(
        ...,
        ge=0,
        max_digits=10,
        decimal_places=2,
    )

    quantity_available: int = Field(0, ge=0)
    image_url: Optional[str] = None


class DishResponse(BaseModel):
    id: int
    kermesse_id: int
    name: str
    description: str
    price: Decimal
    quantity_available: int
    image_url: Optional[str]

    class Config:
        from_attributes = True


class IngredientCreate(BaseModel):
    name: str = Field(..., min_length=1)
    quantity_needed: Decimal = Field(..., ge=0, max_digits=12, decimal_places=3)
    unit: str = Field(..., min_length=1)


class IngredientResponse(BaseModel):
    id: int
    kermesse_id: int
    name: str
    quantity_needed: Decimal
    unit: str

    class Config:
        from_attributes = True


class CollaboratorResponse(BaseModel):
    id: int
    user_id: int
    username: str
    full_name: str
    role: str
    phone: str

    class Config:
        from_attributes = True


class KermesseDetailResponse(KermesseResponse):
    dishes: List[DishResponse]
    ingredients: List[IngredientResponse]
    collaborators: List[CollaboratorResponse]
