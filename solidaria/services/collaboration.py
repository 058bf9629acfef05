# =========================================================
# COLLABORATION WORKFLOW
#
#   PENDING -> ACCEPTED   (organizer approves, role assigned)
#   PENDING -> REJECTED   (organizer rejects, role stays empty)
#
# ACCEPTED and REJECTED are terminal. A user may hold at most one
# PENDING or ACCEPTED row per kermesse; the partial unique index
# on collaborators backs the check below against concurrent joins.
# =========================================================

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from solidaria.core.enums import CollaboratorRole, CollaboratorStatus
from solidaria.core.exceptions import (
    DuplicateRequest,
    PersistenceError,
    RequestAlreadyResolved,
    RequestNotFound,
    ValidationError,
)
from solidaria.models.collaborators import Collaborator
from solidaria.models.users import User
from solidaria.services.kermesses import get_kermesse, require_organizer

logger = logging.getLogger("solidaria")

DEFAULT_ROLE = CollaboratorRole.COLLABORATOR

ACTIVE_STATUSES = [
    CollaboratorStatus.PENDING.value,
    CollaboratorStatus.ACCEPTED.value,
]


@dataclass
class PendingRequest:
    id: int
    user_id: int
    username: str
    full_name: str
    proposed_role: Optional[str]
    status: str


@dataclass
class CollaboratorView:
    id: int
    user_id: int
    username: str
    full_name: str
    role: str
    phone: str


def _as_role(value) -> CollaboratorRole:
    try:
        return CollaboratorRole(value)
    except ValueError:
        raise ValidationError(f"Unknown collaborator role {value!r}")


def request_collaboration(db: Session, kermesse_id: int, user_id: int, proposed_role) -> Collaborator:
    kermesse = get_kermesse(db, kermesse_id)
    role = _as_role(proposed_role)

    existing = (
        db.query(Collaborator.id)
        .filter(
            Collaborator.kermesse_id == kermesse.id,
            Collaborator.user_id == user_id,
            Collaborator.status.in_(ACTIVE_STATUSES),
        )
        .first()
    )

    if existing:
        raise DuplicateRequest()

    collaborator = Collaborator(
        kermesse_id=kermesse.id,
        user_id=user_id,
        status=CollaboratorStatus.PENDING.value,
        proposed_role=role.value,
        role="",
    )

    db.add(collaborator)

    try:
        db.commit()
    except IntegrityError:
        # Lost the race against a concurrent request from the same user
        db.rollback()
        raise DuplicateRequest()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Unable to create collaboration request for kermesse {kermesse_id}")
        raise PersistenceError("Unable to create collaboration request")

    db.refresh(collaborator)

    logger.info(
        f"User {user_id} requested to join kermesse {kermesse.id} as {role.value} "
        f"(request {collaborator.id})"
    )

    return collaborator


def list_pending_requests(db: Session, kermesse_id: int, caller_id: int) -> list[PendingRequest]:
    kermesse = get_kermesse(db, kermesse_id)
    require_organizer(kermesse, caller_id, "view collaboration requests")

    rows = (
        db.query(Collaborator, User)
        .join(User, Collaborator.user_id == User.id)
        .filter(
            Collaborator.kermesse_id == kermesse.id,
            Collaborator.status == CollaboratorStatus.PENDING.value,
        )
        .order_by(Collaborator.id)
        .all()
    )

    return [
        PendingRequest(
            id=collaborator.id,
            user_id=collaborator.user_id,
            username=user.username,
            full_name=user.full_name,
            proposed_role=collaborator.proposed_role,
            status=collaborator.status,
        )
        for collaborator, user in rows
    ]


def resolve_request(
    db: Session,
    kermesse_id: int,
    collaborator_id: int,
    caller_id: int,
    approve: bool,
    assigned_role=None,
) -> Collaborator:
    kermesse = get_kermesse(db, kermesse_id)
    require_organizer(kermesse, caller_id, "manage collaboration requests")

    role = _as_role(assigned_role) if assigned_role is not None else DEFAULT_ROLE

    collaborator = (
        db.query(Collaborator)
        .filter(Collaborator.id == collaborator_id)
        .with_for_update()
        .first()
    )

    if collaborator is None or collaborator.kermesse_id != kermesse.id:
        raise RequestNotFound(collaborator_id)

    if collaborator.status != CollaboratorStatus.PENDING.value:
        raise RequestAlreadyResolved(collaborator.id, collaborator.status)

    if approve:
        collaborator.status = CollaboratorStatus.ACCEPTED.value
        collaborator.role = role.value
    else:
        collaborator.status = CollaboratorStatus.REJECTED.value

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Unable to resolve collaboration request {collaborator_id}")
        raise PersistenceError("Unable to update collaboration request")

    db.refresh(collaborator)

    logger.info(
        f"Collaboration request {collaborator.id} on kermesse {kermesse.id} "
        f"{collaborator.status} by organizer {caller_id}"
    )

    return collaborator


def list_collaborators(db: Session, kermesse_id: int) -> list[CollaboratorView]:
    rows = (
        db.query(Collaborator, User)
        .join(User, Collaborator.user_id == User.id)
        .filter(
            Collaborator.kermesse_id == kermesse_id,
            Collaborator.status == CollaboratorStatus.ACCEPTED.value,
        )
        .order_by(Collaborator.id)
        .all()
    )

    return [
        CollaboratorView(
            id=collaborator.id,
            user_id=collaborator.user_id,
            username=user.username,
            full_name=user.full_name,
            role=collaborator.role,
            phone=user.phone,
        )
        for collaborator, user in rows
    ]
