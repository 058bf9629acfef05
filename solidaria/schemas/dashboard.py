# schemas/dashboard.py

from pydantic import BaseModel
from decimal import Decimal
from typing import Optional


class DashboardStatsResponse(BaseModel):
    financial_goal: Optional[Decimal]
    total_raised: Decimal
    progress_percentage: float
    total_orders: int
    pending_orders: int
    paid_orders: int
    delivered_orders: int
    ingredient_coverage_percentage: float

    class Config:
        from_attributes = True
