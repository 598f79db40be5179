"""create users, materials, stock_movements

Revision ID: a1f3c9d2e4b7
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "a1f3c9d2e4b7"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", sa.String(16), nullable=False, server_default="operator"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )

    op.create_table(
        "materials",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(32), nullable=False, server_default="un"),
        sa.Column("min_stock", sa.Float(), nullable=False, server_default="0"),
        sa.Column("max_stock", sa.Float(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    # unicité insensible à la casse
    op.create_index("uq_materials_name_lower", "materials", [sa.text("lower(name)")], unique=True)

    op.create_table(
        "stock_movements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "material_id",
            sa.Integer(),
            sa.ForeignKey("materials.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("location", sa.String(128), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("type IN ('incoming', 'outgoing')", name="ck_stock_movement_type"),
        sa.CheckConstraint("quantity <> 0", name="ck_stock_movement_qty_nonzero"),
    )
    op.create_index("ix_stock_movements_material_id", "stock_movements", ["material_id"])
    op.create_index("ix_stock_movements_type", "stock_movements", ["type"])
    op.create_index("ix_stock_movements_timestamp_desc", "stock_movements", [sa.text("timestamp DESC")])

    op.execute(
        """
        INSERT INTO users (name, email, role)
        VALUES ('System', 'system@buildstock.local', 'admin')
        """
    )


def downgrade() -> None:
    op.drop_index("ix_stock_movements_timestamp_desc", table_name="stock_movements")
    op.drop_index("ix_stock_movements_type", table_name="stock_movements")
    op.drop_index("ix_stock_movements_material_id", table_name="stock_movements")
    op.drop_table("stock_movements")
    op.drop_index("uq_materials_name_lower", table_name="materials")
    op.drop_table("materials")
    op.drop_table("users")
