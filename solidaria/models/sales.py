# models/sales.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from solidaria.core.enums import DeliveryMethod, SaleStatus, sql_in
from solidaria.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)

    kermesse_id = Column(
        Integer,
        ForeignKey("kermesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    seller_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    buyer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    customer_name = Column(String, nullable=False)

    # Always the sum of the items' subtotals; written once at creation
    total_amount = Column(Numeric(12, 2), nullable=False)

    status = Column(String, nullable=False, default=SaleStatus.PENDING.value)

    delivery_method = Column(String, nullable=False, default=DeliveryMethod.PICKUP.value)
    delivery_address = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)

    # Client-supplied idempotency key
    request_id = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    kermesse = relationship("Kermesse", back_populates="sales")

    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.id",
    )


    __table_args__ = (
        Index("ix_sales_kermesse_status", "kermesse_id", "status"),
        UniqueConstraint("kermesse_id", "seller_id", "request_id", name="uq_sales_seller_request_id"),
        CheckConstraint(f"status IN ({sql_in(SaleStatus)})", name="ck_sale_status_valid"),
        CheckConstraint(f"delivery_method IN ({sql_in(DeliveryMethod)})", name="ck_delivery_method_valid"),
        CheckConstraint("total_amount >= 0", name="ck_total_amount_non_negative"),
    )
