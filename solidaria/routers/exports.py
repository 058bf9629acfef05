# =========================================================
# EXPORTS ROUTER
#
# Organizer-only Excel download of a kermesse's sales ledger:
# - Sheet 1: one row per sale line
# - Sheet 2: fundraising summary (same numbers as the dashboard)
# =========================================================

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session, selectinload
from io import BytesIO

from openpyxl import Workbook

from solidaria.database import get_db
from solidaria.core.auth import get_current_user
from solidaria.core.rate_limiter import limiter
from solidaria.models.kermesses import Kermesse
from solidaria.models.sale_items import SaleItem
from solidaria.models.sales import Sale
from solidaria.services.aggregation import compute_stats
from solidaria.services.kermesses import get_kermesse, require_organizer

router = APIRouter(prefix="/kermesses", tags=["Exports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# =========================================================
# EXPORT ROUTE
# =========================================================
@router.get("/{kermesse_id}/sales/export")
@limiter.limit("5/minute")
def export_sales(
    request: Request,
    kermesse_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    kermesse = get_kermesse(db, kermesse_id)
    require_organizer(kermesse, current_user.id, "export sales")

    sales = (
        db.query(Sale)
        .options(selectinload(Sale.items).selectinload(SaleItem.dish))
        .filter(Sale.kermesse_id == kermesse.id)
        .order_by(Sale.created_at.asc(), Sale.id.asc())
        .all()
    )

    return _build_excel(
        db=db,
        kermesse=kermesse,
        sales=sales,
        filename=f"{kermesse.slug}_sales.xlsx",
    )


# =========================================================
# EXCEL BUILDER
# =========================================================
def _build_excel(db: Session, kermesse: Kermesse, sales: list[Sale], filename: str):

    workbook = Workbook()

    # =======================
    # SHEET 1 - RAW SALES
    # =======================
    sheet = workbook.active
    sheet.title = "Sales Data"

    sheet.append([
        "Date",
        "Sale ID",
        "Customer",
        "Status",
        "Delivery",
        "Dish",
        "Quantity",
        "Unit Price",
        "Subtotal",
        "Total Sale Amount",
    ])

    # Display cells only; the ledger itself stays in Decimal
    for sale in sales:
        for item in sale.items:
            sheet.append([
                sale.created_at.strftime("%Y-%m-%d %H:%M") if sale.created_at else "",
                sale.id,
                sale.customer_name,
                sale.status,
                sale.delivery_method,
                item.dish.name if item.dish else "Deleted dish",
                item.quantity,
                float(item.unit_price),
                float(item.subtotal),
                float(sale.total_amount),
            ])

    # =======================
    # SHEET 2 - FUNDRAISING SUMMARY
    # =======================
    stats = compute_stats(db, kermesse)

    summary = workbook.create_sheet(title="Fundraising Summary")

    summary.append(["Kermesse", kermesse.name])
    summary.append(["Beneficiary", kermesse.beneficiary_name])
    summary.append(["Event Date", kermesse.event_date.isoformat()])
    summary.append([])

    summary.append([
        "Financial Goal",
        float(stats.financial_goal) if stats.financial_goal is not None else "Not set",
    ])
    summary.append(["Total Raised", float(stats.total_raised)])
    summary.append(["Progress (%)", round(stats.progress_percentage, 2)])
    summary.append([])
    summary.append(["Total Orders", stats.total_orders])
    summary.append(["Pending Orders", stats.pending_orders])
    summary.append(["Paid Orders", stats.paid_orders])
    summary.append(["Delivered Orders", stats.delivered_orders])
    summary.append([])
    summary.append(["Ingredient Coverage (%)", round(stats.ingredient_coverage_percentage, 2)])

    # =======================
    # RETURN FILE
    # =======================
    output = BytesIO()
    workbook.save(output)
    output.seek(0)

    return StreamingResponse(
        output,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
