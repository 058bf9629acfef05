# solidaria/models/dishes.py

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from solidaria.database import Base


class Dish(Base):
    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True, index=True)

    kermesse_id = Column(
        Integer,
        ForeignKey("kermesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    quantity_available = Column(Integer, nullable=False, default=0)
    image_url = Column(String, nullable=True)

    kermesse = relationship("Kermesse", back_populates="dishes")

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_dish_price_non_negative"),
        CheckConstraint("quantity_available >= 0", name="ck_dish_quantity_non_negative"),
    )
