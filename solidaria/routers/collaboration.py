# solidaria/routers/collaboration.py

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from solidaria.database import get_db
from solidaria.core.auth import get_current_user
from solidaria.core.rate_limiter import limiter
from solidaria.schemas.collaboration import (
    CollaborationRequestCreate,
    CollaborationRequestCreated,
    CollaboratorStateResponse,
    PendingRequestResponse,
    ResolveRequest,
)
from solidaria.services import collaboration as collaboration_service

router = APIRouter(prefix="/kermesses", tags=["Collaboration"])


# =========================================================
# JOIN REQUEST
# =========================================================
@router.post(
    "/{kermesse_id}/join",
    response_model=CollaborationRequestCreated,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("10/minute")
def request_collaboration(
    request: Request,
    kermesse_id: int,
    join_data: CollaborationRequestCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return collaboration_service.request_collaboration(
        db,
        kermesse_id,
        current_user.id,
        join_data.proposed_role,
    )


# =========================================================
# ORGANIZER: PENDING REQUESTS
# =========================================================
@router.get(
    "/{kermesse_id}/collaborators/requests",
    response_model=list[PendingRequestResponse],
)
def list_collaboration_requests(
    kermesse_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return collaboration_service.list_pending_requests(db, kermesse_id, current_user.id)


# =========================================================
# ORGANIZER: APPROVE / REJECT
# =========================================================
@router.post(
    "/{kermesse_id}/collaborators/{collaborator_id}/manage",
    response_model=CollaboratorStateResponse,
)
def manage_collaboration_request(
    kermesse_id: int,
    collaborator_id: int,
    decision: ResolveRequest,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    return collaboration_service.resolve_request(
        db,
        kermesse_id,
        collaborator_id,
        current_user.id,
        approve=decision.approve,
        assigned_role=decision.assigned_role,
    )
