# solidaria/models/ingredient_donations.py

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from solidaria.database import Base


class IngredientDonation(Base):
    """Append-only fact row. Never updated or merged with earlier donations."""

    __tablename__ = "ingredient_donations"

    id = Column(Integer, primary_key=True, index=True)

    ingredient_id = Column(
        Integer,
        ForeignKey("ingredients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    quantity_donated = Column(Numeric(12, 3), nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    ingredient = relationship("Ingredient", back_populates="donations")

    __table_args__ = (
        CheckConstraint("quantity_donated > 0", name="ck_quantity_donated_positive"),
    )
