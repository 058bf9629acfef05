# =========================================================
# KERMESSE SERVICE
#
# Event lookup and the organizer / staff authorization checks
# shared by every core component, plus event, dish and
# ingredient management.
# =========================================================

import logging
import re

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from solidaria.core.enums import (
    CollaboratorStatus,
    KERMESSE_STATUS_ORDER,
    KermesseStatus,
)
from solidaria.core.exceptions import (
    Forbidden,
    InvalidStatusTransition,
    KermesseNotFound,
    PersistenceError,
    ValidationError,
)
from solidaria.models.collaborators import Collaborator
from solidaria.models.dishes import Dish
from solidaria.models.ingredients import Ingredient
from solidaria.models.kermesses import Kermesse
from solidaria.schemas.kermesse import DishCreate, IngredientCreate, KermesseCreate

logger = logging.getLogger("solidaria")


# =========================================================
# LOOKUP + AUTHORIZATION
# =========================================================
def get_kermesse(db: Session, kermesse_id: int) -> Kermesse:
    kermesse = db.query(Kermesse).filter(Kermesse.id == kermesse_id).first()

    if kermesse is None:
        raise KermesseNotFound(kermesse_id)

    return kermesse


def require_organizer(kermesse: Kermesse, caller_id: int, action: str = "manage this kermesse"):
    if kermesse.organizer_id != caller_id:
        raise Forbidden(f"Only the organizer can {action}")


def is_accepted_collaborator(db: Session, kermesse_id: int, user_id: int) -> bool:
    return (
        db.query(Collaborator.id)
        .filter(
            Collaborator.kermesse_id == kermesse_id,
            Collaborator.user_id == user_id,
            Collaborator.status == CollaboratorStatus.ACCEPTED.value,
        )
        .first()
        is not None
    )


def require_staff(db: Session, kermesse: Kermesse, caller_id: int, action: str):
    """Organizer or an accepted collaborator of the event."""
    if kermesse.organizer_id == caller_id:
        return

    if not is_accepted_collaborator(db, kermesse.id, caller_id):
        raise Forbidden(f"Only the organizer or an accepted collaborator can {action}")


# =========================================================
# EVENTS
# =========================================================
def _slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "kermesse"


def _unique_slug(db: Session, name: str) -> str:
    base = _slugify(name)
    slug = base
    suffix = 2

    while db.query(Kermesse.id).filter(Kermesse.slug == slug).first() is not None:
        slug = f"{base}-{suffix}"
        suffix += 1

    return slug


def _commit(db: Session, message: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(message)
        raise PersistenceError(message)


def create_kermesse(db: Session, organizer_id: int, data: KermesseCreate) -> Kermesse:
    kermesse = Kermesse(
        **data.model_dump(),
        slug=_unique_slug(db, data.name),
        organizer_id=organizer_id,
        status=KermesseStatus.DRAFT.value,
    )

    db.add(kermesse)
    _commit(db, "Unable to create kermesse")
    db.refresh(kermesse)

    logger.info(f"Kermesse {kermesse.id} ({kermesse.slug}) created by user {organizer_id}")

    return kermesse


def list_active_kermesses(db: Session) -> list[Kermesse]:
    return (
        db.query(Kermesse)
        .filter(Kermesse.status == KermesseStatus.ACTIVE.value)
        .order_by(Kermesse.event_date.asc(), Kermesse.id.asc())
        .all()
    )


def get_kermesse_detail(db: Session, kermesse_id: int) -> Kermesse:
    kermesse = (
        db.query(Kermesse)
        .options(
            selectinload(Kermesse.dishes),
            selectinload(Kermesse.ingredients),
        )
        .filter(Kermesse.id == kermesse_id)
        .first()
    )

    if kermesse is None:
        raise KermesseNotFound(kermesse_id)

    return kermesse


def update_kermesse_status(
    db: Session,
    kermesse_id: int,
    caller_id: int,
    new_status,
) -> Kermesse:
    kermesse = get_kermesse(db, kermesse_id)
    require_organizer(kermesse, caller_id, "change the kermesse status")

    current = KermesseStatus(kermesse.status)
    try:
        requested = KermesseStatus(new_status)
    except ValueError:
        raise ValidationError(f"Unknown kermesse status {new_status!r}")

    if KERMESSE_STATUS_ORDER.index(requested) <= KERMESSE_STATUS_ORDER.index(current):
        raise InvalidStatusTransition(current.value, requested.value)

    kermesse.status = requested.value
    _commit(db, "Unable to update kermesse status")
    db.refresh(kermesse)

    logger.info(f"Kermesse {kermesse.id} moved {current.value} -> {requested.value}")

    return kermesse


# =========================================================
# DISHES + INGREDIENTS
# =========================================================
def create_dish(db: Session, kermesse_id: int, caller_id: int, data: DishCreate) -> Dish:
    kermesse = get_kermesse(db, kermesse_id)
    require_organizer(kermesse, caller_id, "add dishes")

    dish = Dish(kermesse_id=kermesse.id, **data.model_dump())

    db.add(dish)
    _commit(db, "Unable to create dish")
    db.refresh(dish)

    return dish


def create_ingredient(
    db: Session,
    kermesse_id: int,
    caller_id: int,
    data: IngredientCreate,
) -> Ingredient:
    kermesse = get_kermesse(db, kermesse_id)
    require_organizer(kermesse, caller_id, "add ingredients")

    ingredient = Ingredient(kermesse_id=kermesse.id, **data.model_dump())

    db.add(ingredient)
    _commit(db, "Unable to create ingredient")
    db.refresh(ingredient)

    return ingredient
