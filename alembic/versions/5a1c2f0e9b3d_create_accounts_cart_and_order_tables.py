"""create accounts, cart and order tables

Revision ID: 5a1c2f0e9b3d
Revises:
Create Date: 2026-10-19 09:12:40.118204

Idempotent — databases bootstrapped by Base.metadata.create_all() already
have these tables and are left untouched.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5a1c2f0e9b3d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    if not _table_exists("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("email", sa.String(), nullable=False),
            sa.Column("password_hash", sa.String(), nullable=False),
            sa.Column("name", sa.String(), nullable=True),
            sa.Column("phone", sa.String(), nullable=True),
            sa.Column("site_address", sa.Text(), nullable=True),
            sa.Column("usage_type", sa.Enum("OWN_USE", "RESALE", name="usagetype"), nullable=True),
            sa.Column("icms_taxpayer", sa.Boolean(), nullable=True),
            sa.Column("state", sa.Enum("RS", "SC", "PR", name="brazilianstate"), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("email"),
        )
        op.create_index("ix_users_id", "users", ["id"])

    if not _table_exists("auth_tokens"):
        op.create_table(
            "auth_tokens",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("user_id", sa.Integer(), nullable=False),
            sa.Column("token_hash", sa.String(), nullable=False),
            sa.Column("token_type", sa.String(), nullable=True),
            sa.Column("expires_at", sa.DateTime(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_auth_tokens_id", "auth_tokens", ["id"])

    if not _table_exists("cart_slots"):
        op.create_table(
            "cart_slots",
            sa.Column("key", sa.String(), nullable=False),
            sa.Column("items_json", sa.JSON(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("key"),
        )

    if not _table_exists("orders"):
        op.create_table(
            "orders",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("order_number", sa.String(), nullable=False),
            sa.Column("owner_key", sa.String(), nullable=False),
            sa.Column("customer_name", sa.String(), nullable=False),
            sa.Column("email", sa.String(), nullable=False),
            sa.Column("phone", sa.String(), nullable=False),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("items_json", sa.JSON(), nullable=True),
            sa.Column("total", sa.Float(), nullable=True),
            sa.Column("status", sa.Enum("SUBMITTED", "CONTACTED", "CANCELLED", name="orderstatus"),
                      nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("order_number"),
        )
        op.create_index("ix_orders_id", "orders", ["id"])
        op.create_index("ix_orders_owner_key", "orders", ["owner_key"])


def downgrade() -> None:
    for table_name in ["orders", "cart_slots", "auth_tokens", "users"]:
        if _table_exists(table_name):
            op.drop_table(table_name)
