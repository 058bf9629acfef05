# solidaria/models/ingredients.py

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from solidaria.database import Base


class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True)

    kermesse_id = Column(
        Integer,
        ForeignKey("kermesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    quantity_needed = Column(Numeric(12, 3), nullable=False)
    unit = Column(String, nullable=False)  # kg, liters, units...

    kermesse = relationship("Kermesse", back_populates="ingredients")

    donations = relationship(
        "IngredientDonation",
        back_populates="ingredient",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("quantity_needed >= 0", name="ck_quantity_needed_non_negative"),
    )
