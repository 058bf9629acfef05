# =========================================================
# SALES ROUTER
#
# - Any signed-in user can place an order (seller = buyer = caller)
# - Organizer and accepted collaborators can list sales and
#   move them along PENDING -> PAID -> DELIVERED
# =========================================================

from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.orm import Session

from solidaria.database import get_db
from solidaria.core.auth import get_current_user
from solidaria.core.rate_limiter import limiter
from solidaria.schemas.sale import SaleCreate, SaleResponse, SaleStatusUpdate
from solidaria.services import orders as order_service

router = APIRouter(tags=["Sales"])


# =========================================================
# CREATE SALE
# =========================================================
@router.post("/sales", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def create_sale(
    request: Request,
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return order_service.create_sale(
        db,
        kermesse_id=sale_data.kermesse_id,
        seller_id=current_user.id,
        buyer_id=current_user.id,
        customer_name=sale_data.customer_name,
        items=sale_data.items,
        delivery_method=sale_data.delivery_method,
        delivery_address=sale_data.delivery_address,
        contact_phone=sale_data.contact_phone,
        request_id=sale_data.request_id,
    )


# =========================================================
# LIST SALES OF A KERMESSE
# =========================================================
@router.get("/kermesses/{kermesse_id}/sales", response_model=list[SaleResponse])
def list_sales(
    kermesse_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return order_service.list_sales(db, kermesse_id, current_user.id)


# =========================================================
# ADVANCE SALE STATUS
# =========================================================
@router.patch("/sales/{sale_id}/status", response_model=SaleResponse)
def update_sale_status(
    sale_id: int,
    status_data: SaleStatusUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return order_service.update_sale_status(db, sale_id, current_user.id, status_data.status)
