# =========================================================
# AGGREGATION ENGINE (ORGANIZER DASHBOARD)
#
# Everything is derived from the ledger on each call:
# - total raised = PAID + DELIVERED sales only
# - order counts by status
# - progress % against the financial goal
# - ingredient coverage % (donated / needed across ingredients)
#
# Percentages are computed in Decimal and only turned into
# float when the stats object is built.
# =========================================================

from collections import Counter
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from solidaria.core.enums import SaleStatus
from solidaria.models.ingredients import Ingredient
from solidaria.models.kermesses import Kermesse
from solidaria.models.sales import Sale
from solidaria.services.donations import donated_totals
from solidaria.services.kermesses import get_kermesse, require_organizer

ZERO = Decimal("0")
HUNDRED = Decimal("100")

RAISED_STATUSES = {SaleStatus.PAID.value, SaleStatus.DELIVERED.value}


@dataclass
class DashboardStats:
    financial_goal: Optional[Decimal]
    total_raised: Decimal
    progress_percentage: float
    total_orders: int
    pending_orders: int
    paid_orders: int
    delivered_orders: int
    ingredient_coverage_percentage: float


def clamp_percentage(value: Decimal) -> Decimal:
    return max(ZERO, min(HUNDRED, value))


def progress_percentage(total_raised: Decimal, financial_goal: Optional[Decimal]) -> Decimal:
    if financial_goal is None or financial_goal <= 0:
        return ZERO

    return clamp_percentage(total_raised / financial_goal * HUNDRED)


def coverage_percentage(total_donated: Decimal, total_needed: Decimal) -> Decimal:
    # Nothing needed means nothing is missing
    if total_needed <= 0:
        return HUNDRED

    return clamp_percentage(total_donated / total_needed * HUNDRED)


def compute_stats(db: Session, kermesse: Kermesse) -> DashboardStats:
    sales = (
        db.query(Sale.status, Sale.total_amount)
        .filter(Sale.kermesse_id == kermesse.id)
        .all()
    )

    status_counts = Counter(status for status, _ in sales)

    total_raised = sum(
        (Decimal(amount) for status, amount in sales if status in RAISED_STATUSES),
        Decimal("0.00"),
    )

    needed = (
        db.query(Ingredient.quantity_needed)
        .filter(Ingredient.kermesse_id == kermesse.id)
        .all()
    )
    total_needed = sum((Decimal(quantity) for (quantity,) in needed), ZERO)
    total_donated = sum(donated_totals(db, kermesse.id).values(), ZERO)

    goal = kermesse.financial_goal

    return DashboardStats(
        financial_goal=goal,
        total_raised=total_raised,
        progress_percentage=float(progress_percentage(total_raised, goal)),
        total_orders=len(sales),
        pending_orders=status_counts[SaleStatus.PENDING.value],
        paid_orders=status_counts[SaleStatus.PAID.value],
        delivered_orders=status_counts[SaleStatus.DELIVERED.value],
        ingredient_coverage_percentage=float(coverage_percentage(total_donated, total_needed)),
    )


def dashboard_stats(db: Session, kermesse_id: int, caller_id: int) -> DashboardStats:
    kermesse = get_kermesse(db, kermesse_id)
    require_organizer(kermesse, caller_id, "view the dashboard")

    return compute_stats(db, kermesse)
