# schemas/donation.py

from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime


class DonationCreate(BaseModel):
    quantity: Decimal = Field(..., max_digits=12, decimal_places=3)


class DonationResponse(BaseModel):
    id: int
    ingredient_id: int
    user_id: int
    quantity_donated: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


class IngredientProgressResponse(BaseModel):
    ingredient_id: int
    name: str
    quantity_needed: Decimal
    unit: str
    quantity_donated: Decimal

    class Config:
        from_attributes = True
