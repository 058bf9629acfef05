# solidaria/core/enums.py
#
# Closed value sets for the status/role columns. Stored as plain strings
# and guarded by CHECK constraints on the tables.

import enum


class KermesseStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class SaleStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    DELIVERED = "DELIVERED"


class DeliveryMethod(str, enum.Enum):
    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"


class CollaboratorStatus(str, enum.Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class CollaboratorRole(str, enum.Enum):
    KITCHEN = "KITCHEN"
    SELLER = "SELLER"
    DELIVERY = "DELIVERY"
    INGREDIENT_GETTER = "INGREDIENT_GETTER"
    COLLABORATOR = "COLLABORATOR"


# Forward-only progressions; a status may only move to a later position
KERMESSE_STATUS_ORDER = [
    KermesseStatus.DRAFT,
    KermesseStatus.ACTIVE,
    KermesseStatus.FINISHED,
]

SALE_STATUS_ORDER = [
    SaleStatus.PENDING,
    SaleStatus.PAID,
    SaleStatus.DELIVERED,
]


def sql_in(enum_cls) -> str:
    """Render an enum's values as a SQL IN list for CHECK constraints."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
