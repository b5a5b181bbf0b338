"""Create the property run report store.

Revision ID: 001_create_property_runs
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_create_property_runs"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "property_runs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("seed", sa.BigInteger(), nullable=False),
        sa.Column("trials", sa.Integer(), nullable=False),
        sa.Column("passed", sa.Integer(), nullable=False),
        sa.Column("failed", sa.Integer(), nullable=False),
        sa.Column("errored", sa.Integer(), nullable=False),
        sa.Column("report", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint("passed >= 0", name="ck_property_runs_passed_non_negative"),
        sa.CheckConstraint("failed >= 0", name="ck_property_runs_failed_non_negative"),
        sa.CheckConstraint("errored <= failed", name="ck_property_runs_errored_subset"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_property_runs_seed", "property_runs", ["seed"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_property_runs_seed", table_name="property_runs")
    op.drop_table("property_runs")
