# solidaria/models/collaborators.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, validates

from solidaria.core.enums import CollaboratorStatus, sql_in
from solidaria.database import Base


ACTIVE_REQUEST_CLAUSE = "status IN ('PENDING', 'ACCEPTED')"


class Collaborator(Base):
    __tablename__ = "collaborators"

    id = Column(Integer, primary_key=True, index=True)

    kermesse_id = Column(
        Integer,
        ForeignKey("kermesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status = Column(String, nullable=False, default=CollaboratorStatus.PENDING.value)
    proposed_role = Column(String, nullable=True)

    # Empty until the organizer accepts the request
    role = Column(String, nullable=False, default="")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    kermesse = relationship("Kermesse", back_populates="collaborators")
    user = relationship("User")

    __table_args__ = (
        CheckConstraint(f"status IN ({sql_in(CollaboratorStatus)})", name="ck_collaborator_status_valid"),
        # One live request or membership per (kermesse, user)
        Index(
            "uq_collaborators_active_request",
            "kermesse_id",
            "user_id",
            unique=True,
            postgresql_where=text(ACTIVE_REQUEST_CLAUSE),
            sqlite_where=text(ACTIVE_REQUEST_CLAUSE),
        ),
    )

    @validates("role")
    def _validate_role(self, key, value):
        if self.role and value != self.role:
            raise ValueError("Collaborator role is immutable once assigned")
        return value
