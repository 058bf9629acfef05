# schemas/collaboration.py

from pydantic import BaseModel
from typing import Optional

from solidaria.core.enums import CollaboratorRole, CollaboratorStatus


class CollaborationRequestCreate(BaseModel):
    proposed_role: CollaboratorRole


class CollaborationRequestCreated(BaseModel):
    id: int
    status: CollaboratorStatus

    class Config:
        from_attributes = True


class PendingRequestResponse(BaseModel):
    id: int
    user_id: int
    username: str
    full_name: str
    proposed_role: Optional[str]
    status: CollaboratorStatus

    class Config:
        from_attributes = True


class ResolveRequest(BaseModel):
    approve: bool
    assigned_role: Optional[CollaboratorRole] = None


class CollaboratorStateResponse(BaseModel):
    id: int
    kermesse_id: int
    user_id: int
    status: CollaboratorStatus
    proposed_role: Optional[str]
    role: str

    class Config:
        from_attributes = True
