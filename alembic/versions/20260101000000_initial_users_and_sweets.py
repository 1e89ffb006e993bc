"""Initial schema: users and sweets.

Revision ID: 20260101000000
Revises:
Create Date: 2026-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260101000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="user"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "sweets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint("quantity >= 0", name="ck_sweets_quantity_non_negative"),
        sa.CheckConstraint("price > 0", name="ck_sweets_price_positive"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_sweets_name"), "sweets", ["name"], unique=False)
    op.create_index(op.f("ix_sweets_category"), "sweets", ["category"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_sweets_category"), table_name="sweets")
    op.drop_index(op.f("ix_sweets_name"), table_name="sweets")
    op.drop_table("sweets")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")
