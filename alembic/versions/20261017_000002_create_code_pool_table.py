"""Create code_pool table and seed bases 001-999

Revision ID: 20261017_000002
Revises: 20261017_000001
Create Date: 2026-10-17

Each row carries the digital root of its base as the check digit.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261017_000002"
down_revision: Union[str, None] = "20261017_000001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _digital_root(base: str) -> int:
    total = sum(int(c) for c in base)
    while total > 9:
        total = sum(int(c) for c in str(total))
    return total


def upgrade() -> None:
    code_pool = op.create_table(
        "code_pool",
        sa.Column("base", sa.String(3), nullable=False),
        sa.Column("checksum_digit", sa.String(1), nullable=False),
        sa.Column("allocated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("owner_type", sa.Enum("TENANT", "VEHICLE", name="code_owner_type"), nullable=True),
        sa.Column("owner_id", sa.String(64), nullable=True),
        sa.Column("allocated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("base"),
    )
    op.create_index("ix_code_pool_allocated", "code_pool", ["allocated"])
    op.create_index("ix_code_pool_owner_id", "code_pool", ["owner_id"])

    rows = []
    for n in range(1, 1000):
        base = f"{n:03d}"
        rows.append({"base": base, "checksum_digit": str(_digital_root(base)), "allocated": False})
    op.bulk_insert(code_pool, rows)


def downgrade() -> None:
    op.drop_index("ix_code_pool_owner_id", table_name="code_pool")
    op.drop_index("ix_code_pool_allocated", table_name="code_pool")
    op.drop_table("code_pool")
    sa.Enum(name="code_owner_type").drop(op.get_bind(), checkfirst=True)
