"""Add roles table and seed the fixed ADMIN/CUSTOMER roles.

Revision ID: 20250301000000
Revises:
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20250301000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=15), nullable=False),
        sa.Column("name", sa.String(length=20), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    # Ids are fixed: the service refers to them as ADMIN_ROLE_ID / CUSTOMER_ROLE_ID.
    op.bulk_insert(
        roles,
        [
            {"id": 1, "code": "ADMIN", "name": "Administrator"},
            {"id": 2, "code": "CUSTOMER", "name": "Customer"},
        ],
    )
    op.execute("SELECT setval(pg_get_serial_sequence('roles', 'id'), 2)")


def downgrade() -> None:
    op.drop_table("roles")
