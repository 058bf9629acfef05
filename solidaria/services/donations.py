# =========================================================
# DONATION ACCUMULATOR
#
# Donations are append-only fact rows. Donated totals are
# folded from the log on every read; nothing is cached on
# the ingredient.
# =========================================================

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from solidaria.core.exceptions import IngredientNotFound, PersistenceError, ValidationError
from solidaria.models.ingredient_donations import IngredientDonation
from solidaria.models.ingredients import Ingredient
from solidaria.services.kermesses import get_kermesse

logger = logging.getLogger("solidaria")


@dataclass
class IngredientProgress:
    ingredient_id: int
    name: str
    quantity_needed: Decimal
    unit: str
    quantity_donated: Decimal


# quantity_donated is Numeric(12,3)
QUANTITY_PLACES = 3
QUANTITY_DIGITS = 12


def _exact_quantity(quantity) -> Decimal:
    if isinstance(quantity, bool) or not isinstance(quantity, (Decimal, int)):
        raise ValidationError("Donated quantity must be an exact decimal")

    quantity = Decimal(quantity)

    if not quantity.is_finite() or quantity <= 0:
        raise ValidationError("Donated quantity must be greater than zero")

    # Trailing zeros do not count against the scale
    if quantity.normalize().as_tuple().exponent < -QUANTITY_PLACES:
        raise ValidationError(
            f"Donated quantity allows at most {QUANTITY_PLACES} decimal places"
        )

    if quantity.adjusted() >= QUANTITY_DIGITS - QUANTITY_PLACES:
        raise ValidationError("Donated quantity is too large")

    return quantity


def record_donation(db: Session, ingredient_id: int, user_id: int, quantity) -> IngredientDonation:
    quantity = _exact_quantity(quantity)

    ingredient = db.query(Ingredient).filter(Ingredient.id == ingredient_id).first()

    if ingredient is None:
        raise IngredientNotFound(ingredient_id)

    donation = IngredientDonation(
        ingredient_id=ingredient.id,
        user_id=user_id,
        quantity_donated=quantity,
    )

    db.add(donation)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Unable to record donation for ingredient {ingredient_id}")
        raise PersistenceError("Unable to record donation")

    db.refresh(donation)

    logger.info(
        f"Donation {donation.id}: user {user_id} gave {quantity} {ingredient.unit} "
        f"of ingredient {ingredient.id}"
    )

    return donation


def donated_totals(db: Session, kermesse_id: int) -> dict[int, Decimal]:
    """Sum of every donation per ingredient of the event, in exact decimals."""
    rows = (
        db.query(IngredientDonation.ingredient_id, IngredientDonation.quantity_donated)
        .join(Ingredient, IngredientDonation.ingredient_id == Ingredient.id)
        .filter(Ingredient.kermesse_id == kermesse_id)
        .all()
    )

    totals: dict[int, Decimal] = {}

    for ingredient_id, quantity in rows:
        totals[ingredient_id] = totals.get(ingredient_id, Decimal("0")) + Decimal(quantity)

    return totals


def ingredient_progress(db: Session, kermesse_id: int) -> list[IngredientProgress]:
    kermesse = get_kermesse(db, kermesse_id)

    ingredients = (
        db.query(Ingredient)
        .filter(Ingredient.kermesse_id == kermesse.id)
        .order_by(Ingredient.id)
        .all()
    )

    totals = donated_totals(db, kermesse.id)

    return [
        IngredientProgress(
            ingredient_id=ingredient.id,
            name=ingredient.name,
            quantity_needed=ingredient.quantity_needed,
            unit=ingredient.unit,
            quantity_donated=totals.get(ingredient.id, Decimal("0")),
        )
        for ingredient in ingredients
    ]
