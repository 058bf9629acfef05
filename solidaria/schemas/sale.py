# schemas/sale.py

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from decimal import Decimal

from solidaria.core.enums import DeliveryMethod, SaleStatus

class SaleItemCreate(BaseModel):
    dish_id: int
    quantity: int

class SaleCreate(BaseModel):
    kermesse_id: int
    customer_name: str = Field(..., min_length=1)
    items: List[SaleItemCreate]
    delivery_method: DeliveryMethod = DeliveryMethod.PICKUP
    delivery_address: Optional[str] = None
    contact_phone: Optional[str] = None
    request_id: Optional[str] = Field(None, max_length=64, description="Idempotency key for retries")

class SaleStatusUpdate(BaseModel):
    status: SaleStatus

class SaleItemResponse(BaseModel):
    id: int
    dish_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    class Config:
        from_attributes = True

class SaleResponse(BaseModel):
    id: int
    kermesse_id: int
    seller_id: int
    buyer_id: Optional[int]
    customer_name: str
    total_amount: Decimal
    status: SaleStatus
    delivery_method: DeliveryMethod
    delivery_address: Optional[str]
    contact_phone: Optional[str]
    created_at: datetime
    items: List[SaleItemResponse]

    class Config:
        from_attributes = True
