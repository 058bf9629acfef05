# solidaria/models/kermesses.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from solidaria.core.enums import KermesseStatus, sql_in
from solidaria.database import Base


class Kermesse(Base):
    __tablename__ = "kermesses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=False)
    description = Column(String, nullable=False, default="")
    event_date = Column(Date, nullable=False)

    organizer_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    beneficiary_name = Column(String, nullable=False)
    beneficiary_reason = Column(String, nullable=False)
    beneficiary_image_url = Column(String, nullable=True)

    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)

    financial_goal = Column(Numeric(12, 2), nullable=True)
    qr_code_url = Column(String, nullable=True)

    status = Column(String, nullable=False, default=KermesseStatus.DRAFT.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    organizer = relationship("User")

    dishes = relationship("Dish", back_populates="kermesse", cascade="all, delete-orphan")
    ingredients = relationship("Ingredient", back_populates="kermesse", cascade="all, delete-orphan")
    collaborators = relationship("Collaborator", back_populates="kermesse", cascade="all, delete-orphan")
    sales = relationship("Sale", back_populates="kermesse", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(f"status IN ({sql_in(KermesseStatus)})", name="ck_kermesse_status_valid"),
        CheckConstraint("financial_goal IS NULL OR financial_goal >= 0", name="ck_financial_goal_non_negative"),
    )
