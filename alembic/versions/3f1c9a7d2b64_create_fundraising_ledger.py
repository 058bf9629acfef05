"""create_fundraising_ledger

Revision ID: 3f1c9a7d2b64
Revises:
Create Date: 2026-10-19 10:12:44.318207
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b64'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ACTIVE_REQUEST_CLAUSE = "status IN ('PENDING', 'ACCEPTED')"


def upgrade() -> None:
    """Upgrade schema."""

    # USERS
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=False),
        sa.Column("phone", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # KERMESSES
    op.create_table(
        "kermesses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("event_date", sa.Date(), nullable=False),
        sa.Column("organizer_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("beneficiary_name", sa.String(), nullable=False),
        sa.Column("beneficiary_reason", sa.String(), nullable=False),
        sa.Column("beneficiary_image_url", sa.String(), nullable=True),
        sa.Column("start_time", sa.String(), nullable=True),
        sa.Column("end_time", sa.String(), nullable=True),
        sa.Column("financial_goal", sa.Numeric(12, 2), nullable=True),
        sa.Column("qr_code_url", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="DRAFT"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("status IN ('DRAFT', 'ACTIVE', 'FINISHED')", name="ck_kermesse_status_valid"),
        sa.CheckConstraint("financial_goal IS NULL OR financial_goal >= 0", name="ck_financial_goal_non_negative"),
    )
    op.create_index("ix_kermesses_id", "kermesses", ["id"])
    op.create_index("ix_kermesses_slug", "kermesses", ["slug"], unique=True)
    op.create_index("ix_kermesses_organizer_id", "kermesses", ["organizer_id"])

    # DISHES
    op.create_table(
        "dishes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("kermesse_id", sa.Integer(), sa.ForeignKey("kermesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("quantity_available", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.CheckConstraint("price >= 0", name="ck_dish_price_non_negative"),
        sa.CheckConstraint("quantity_available >= 0", name="ck_dish_quantity_non_negative"),
    )
    op.create_index("ix_dishes_id", "dishes", ["id"])
    op.create_index("ix_dishes_kermesse_id", "dishes", ["kermesse_id"])

    # INGREDIENTS
    op.create_table(
        "ingredients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("kermesse_id", sa.Integer(), sa.ForeignKey("kermesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("quantity_needed", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.CheckConstraint("quantity_needed >= 0", name="ck_quantity_needed_non_negative"),
    )
    op.create_index("ix_ingredients_id", "ingredients", ["id"])
    op.create_index("ix_ingredients_kermesse_id", "ingredients", ["kermesse_id"])

    # INGREDIENT DONATIONS
    op.create_table(
        "ingredient_donations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ingredient_id", sa.Integer(), sa.ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity_donated", sa.Numeric(12, 3), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("quantity_donated > 0", name="ck_quantity_donated_positive"),
    )
    op.create_index("ix_ingredient_donations_id", "ingredient_donations", ["id"])
    op.create_index("ix_ingredient_donations_ingredient_id", "ingredient_donations", ["ingredient_id"])
    op.create_index("ix_ingredient_donations_user_id", "ingredient_donations", ["user_id"])

    # COLLABORATORS
    op.create_table(
        "collaborators",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("kermesse_id", sa.Integer(), sa.ForeignKey("kermesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="PENDING"),
        sa.Column("proposed_role", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("status IN ('PENDING', 'ACCEPTED', 'REJECTED')", name="ck_collaborator_status_valid"),
    )
    op.create_index("ix_collaborators_id", "collaborators", ["id"])
    op.create_index("ix_collaborators_kermesse_id", "collaborators", ["kermesse_id"])
    op.create_index("ix_collaborators_user_id", "collaborators", ["user_id"])
    op.create_index(
        "uq_collaborators_active_request",
        "collaborators",
        ["kermesse_id", "user_id"],
        unique=True,
        postgresql_where=sa.text(ACTIVE_REQUEST_CLAUSE),
        sqlite_where=sa.text(ACTIVE_REQUEST_CLAUSE),
    )

    # SALES
    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("kermesse_id", sa.Integer(), sa.ForeignKey("kermesses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("buyer_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("total_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="PENDING"),
        sa.Column("delivery_method", sa.String(), nullable=False, server_default="PICKUP"),
        sa.Column("delivery_address", sa.String(), nullable=True),
        sa.Column("contact_phone", sa.String(), nullable=True),
        sa.Column("request_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("kermesse_id", "seller_id", "request_id", name="uq_sales_seller_request_id"),
        sa.CheckConstraint("status IN ('PENDING', 'PAID', 'DELIVERED')", name="ck_sale_status_valid"),
        sa.CheckConstraint("delivery_method IN ('PICKUP', 'DELIVERY')", name="ck_delivery_method_valid"),
        sa.CheckConstraint("total_amount >= 0", name="ck_total_amount_non_negative"),
    )
    op.create_index("ix_sales_id", "sales", ["id"])
    op.create_index("ix_sales_kermesse_id", "sales", ["kermesse_id"])
    op.create_index("ix_sales_seller_id", "sales", ["seller_id"])
    op.create_index("ix_sales_created_at", "sales", ["created_at"])
    op.create_index("ix_sales_kermesse_status", "sales", ["kermesse_id", "status"])

    # SALE ITEMS
    op.create_table(
        "sale_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sale_id", sa.Integer(), sa.ForeignKey("sales.id", ondelete="CASCADE"), nullable=False),
        sa.Column("dish_id", sa.Integer(), sa.ForeignKey("dishes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_sale_item_quantity_positive"),
    )
    op.create_index("ix_sale_items_id", "sale_items", ["id"])
    op.create_index("ix_sale_items_sale_id", "sale_items", ["sale_id"])
    op.create_index("ix_sale_items_dish_id", "sale_items", ["dish_id"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("sale_items")
    op.drop_table("sales")
    op.drop_index("uq_collaborators_active_request", table_name="collaborators")
    op.drop_table("collaborators")
    op.drop_table("ingredient_donations")
    op.drop_table("ingredients")
    op.drop_table("dishes")
    op.drop_table("kermesses")
    op.drop_table("users")
