"""rivalries: one row per wrestler pair, soft-ended and re-activated in place

- wrestler1_id < wrestler2_id (pair stored in canonical order, unique per save)
- level 1..4
- deleting a save or either wrestler removes the rivalry

Revision ID: 0002_rivalries
Revises: 0001_initial_schema
Create Date: 2026-01-24
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0002_rivalries"
down_revision = "0001_initial_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "rivalries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("save_id", sa.Integer(), sa.ForeignKey("saves.id", ondelete="CASCADE"), nullable=False),
        sa.Column("wrestler1_id", sa.Integer(), sa.ForeignKey("wrestlers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("wrestler2_id", sa.Integer(), sa.ForeignKey("wrestlers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("started_week", sa.Integer(), nullable=False),
        sa.Column("ended_week", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
        sa.CheckConstraint("level BETWEEN 1 AND 4", name="ck_rivalries_level"),
        sa.CheckConstraint("wrestler1_id < wrestler2_id", name="ck_rivalries_pair_order"),
    )
    op.create_index(
        "uq_rivalries_save_pair",
        "rivalries",
        ["save_id", "wrestler1_id", "wrestler2_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index("uq_rivalries_save_pair", table_name="rivalries")
    op.drop_table("rivalries")
