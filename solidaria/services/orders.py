# =========================================================
# ORDER PROCESSOR
#
# - Validates every line before anything is written
# - Locks the dish rows, checks and decrements stock
# - Freezes the dish price on each line (exact Decimal)
# - Header + lines commit together or not at all
# - Optional request_id makes retries return the first sale
# =========================================================

import logging
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from solidaria.core.enums import DeliveryMethod, SALE_STATUS_ORDER, SaleStatus
from solidaria.core.exceptions import (
    DishKermesseMismatch,
    DishNotFound,
    EmptyOrder,
    InsufficientStock,
    InvalidStatusTransition,
    LedgerError,
    PersistenceError,
    SaleNotFound,
    ValidationError,
)
from solidaria.models.dishes import Dish
from solidaria.models.sale_items import SaleItem
from solidaria.models.sales import Sale
from solidaria.services.kermesses import get_kermesse, require_staff

logger = logging.getLogger("solidaria")


def _find_by_request_id(
    db: Session, kermesse_id: int, seller_id: int, request_id: str
) -> Optional[Sale]:
    # Keys are scoped to the caller; another seller's key never matches
    return (
        db.query(Sale)
        .filter(
            Sale.kermesse_id == kermesse_id,
            Sale.seller_id == seller_id,
            Sale.request_id == request_id,
        )
        .first()
    )


def _requested_quantities(items) -> dict[int, int]:
    requested: dict[int, int] = {}

    for item in items:
        quantity = item.quantity

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(
                f"Item quantity for dish {item.dish_id} must be a positive integer"
            )

        # Several lines may name the same dish; stock is checked on the sum
        requested[item.dish_id] = requested.get(item.dish_id, 0) + quantity

    return requested


def _lock_dishes(db: Session, kermesse_id: int, requested: dict[int, int]) -> dict[int, Dish]:
    # One statement, rows locked in id order so concurrent orders cannot deadlock
    rows = (
        db.query(Dish)
        .filter(Dish.id.in_(sorted(requested)))
        .order_by(Dish.id)
        .with_for_update()
        .all()
    )
    found = {dish.id: dish for dish in rows}

    for dish_id in sorted(requested):
        dish = found.get(dish_id)
        quantity = requested[dish_id]

        if dish is None:
            raise DishNotFound(dish_id)

        if dish.kermesse_id != kermesse_id:
            raise DishKermesseMismatch(dish_id, kermesse_id)

        if dish.quantity_available < quantity:
            raise InsufficientStock(dish.id, dish.name, dish.quantity_available, quantity)

    return found


# =========================================================
# CREATE SALE
# =========================================================
def create_sale(
    db: Session,
    *,
    kermesse_id: int,
    seller_id: int,
    buyer_id: Optional[int],
    customer_name: str,
    items: Iterable,
    delivery_method=DeliveryMethod.PICKUP,
    delivery_address: Optional[str] = None,
    contact_phone: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Sale:
    items = list(items)

    if not items:
        raise EmptyOrder()

    requested = _requested_quantities(items)

    try:
        method = DeliveryMethod(delivery_method)
    except ValueError:
        raise ValidationError(f"Unknown delivery method {delivery_method!r}")

    if method == DeliveryMethod.DELIVERY and not delivery_address:
        raise ValidationError("Delivery address is required for home delivery")

    kermesse = get_kermesse(db, kermesse_id)

    # ===============================
    # IDEMPOTENCY CHECK (RETRY PROTECTION)
    # ===============================
    if request_id:
        existing_sale = _find_by_request_id(db, kermesse.id, seller_id, request_id)

        if existing_sale:
            logger.info(f"Replayed sale {existing_sale.id} for request_id={request_id}")
            return existing_sale

    try:
        dishes = _lock_dishes(db, kermesse.id, requested)

        sale = Sale(
            kermesse_id=kermesse.id,
            seller_id=seller_id,
            buyer_id=buyer_id,
            customer_name=customer_name,
            status=SaleStatus.PENDING.value,
            delivery_method=method.value,
            delivery_address=delivery_address,
            contact_phone=contact_phone,
            request_id=request_id,
        )

        total_amount = Decimal("0.00")

        for item in items:
            dish = dishes[item.dish_id]
            subtotal = dish.price * item.quantity
            total_amount += subtotal

            sale.items.append(
                SaleItem(
                    dish_id=dish.id,
                    quantity=item.quantity,
                    unit_price=dish.price,
                    subtotal=subtotal,
                )
            )

        for dish_id, quantity in requested.items():
            dishes[dish_id].quantity_available -= quantity

        sale.total_amount = total_amount
        db.add(sale)
        db.commit()
        db.refresh(sale)

    except LedgerError:
        db.rollback()
        raise

    except IntegrityError:
        db.rollback()

        # A concurrent retry with the same key won the insert
        if request_id:
            existing_sale = _find_by_request_id(db, kermesse_id, seller_id, request_id)
            if existing_sale:
                return existing_sale

        logger.exception(f"Integrity failure while creating sale for kermesse {kermesse_id}")
        raise PersistenceError("Unable to complete sale")

    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Database failure while creating sale for kermesse {kermesse_id}")
        raise PersistenceError("Unable to complete sale")

    logger.info(
        f"Sale {sale.id} created for kermesse {kermesse_id}: "
        f"{len(sale.items)} items, total {sale.total_amount}"
    )

    return sale


# =========================================================
# LIST + STATUS
# =========================================================
def list_sales(db: Session, kermesse_id: int, caller_id: int) -> list[Sale]:
    kermesse = get_kermesse(db, kermesse_id)
    require_staff(db, kermesse, caller_id, "view sales")

    return (
        db.query(Sale)
        .options(selectinload(Sale.items))
        .filter(Sale.kermesse_id == kermesse.id)
        .order_by(Sale.created_at.desc(), Sale.id.desc())
        .all()
    )


def update_sale_status(db: Session, sale_id: int, caller_id: int, new_status) -> Sale:
    sale = (
        db.query(Sale)
        .filter(Sale.id == sale_id)
        .with_for_update()
        .first()
    )

    if sale is None:
        raise SaleNotFound(sale_id)

    require_staff(db, sale.kermesse, caller_id, "update sales")

    current = SaleStatus(sale.status)
    try:
        requested = SaleStatus(new_status)
    except ValueError:
        raise ValidationError(f"Unknown sale status {new_status!r}")

    # PENDING -> PAID -> DELIVERED, never backwards
    if SALE_STATUS_ORDER.index(requested) <= SALE_STATUS_ORDER.index(current):
        raise InvalidStatusTransition(current.value, requested.value)

    sale.status = requested.value

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Unable to update status of sale {sale_id}")
        raise PersistenceError("Unable to update sale")

    db.refresh(sale)

    logger.info(f"Sale {sale.id} moved {current.value} -> {requested.value}")

    return sale
