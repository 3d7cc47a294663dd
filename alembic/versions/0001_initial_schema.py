"""initial schema: catalog, users, tacos, orders

Revision ID: 0001
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ingredient",
        sa.Column("id", sa.String(4), primary_key=True),
        sa.Column("name", sa.String(25), nullable=False),
        sa.Column("type", sa.String(10), nullable=False),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password", sa.String, nullable=False),
        sa.Column("fullname", sa.String),
        sa.Column("street", sa.String),
        sa.Column("city", sa.String),
        sa.Column("state", sa.String(2)),
        sa.Column("zip", sa.String(10)),
        sa.Column("phone_number", sa.String),
        sa.Column("roles", sa.Text),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "taco",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "taco_ingredients",
        sa.Column("taco", sa.Integer, sa.ForeignKey("taco.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("position", sa.Integer, primary_key=True),
        sa.Column("ingredient", sa.String(4), sa.ForeignKey("ingredient.id", ondelete="RESTRICT"), nullable=False),
    )

    op.create_table(
        "taco_order",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="SET NULL")),
        sa.Column("delivery_name", sa.String(50), nullable=False),
        sa.Column("delivery_address", sa.String(50), nullable=False),
        sa.Column("delivery_city", sa.String(50), nullable=False),
        sa.Column("delivery_state", sa.String(2), nullable=False),
        sa.Column("delivery_zip", sa.String(10), nullable=False),
        sa.Column("cc_number", sa.String(19), nullable=False),
        sa.Column("cc_expiration", sa.String(5), nullable=False),
        sa.Column("cc_cvv", sa.String(3), nullable=False),
        sa.Column("placed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_taco_order_user_id", "taco_order", ["user_id"])
    op.create_index("ix_taco_order_user_placed", "taco_order", ["user_id", "placed_at"])

    op.create_table(
        "taco_order_tacos",
        sa.Column("taco_order", sa.Integer, sa.ForeignKey("taco_order.id", ondelete="CASCADE"), nullable=False),
        sa.Column("taco", sa.Integer, sa.ForeignKey("taco.id", ondelete="RESTRICT"), nullable=False),
    )
    op.create_index("ix_taco_order_tacos_taco_order", "taco_order_tacos", ["taco_order"])


def downgrade() -> None:
    op.drop_table("taco_order_tacos")
    op.drop_table("taco_order")
    op.drop_table("taco_ingredients")
    op.drop_table("taco")
    op.drop_table("users")
    op.drop_table("ingredient")
