"""initial schema: saves + roster + titles + planner + match log + finances

- Every child table is owned by a save (ON DELETE CASCADE).
- title_reigns / title_defenses / match_log / match_log_participants /
  finances / weekly_summaries are append-only (no UPDATE, enforced by SQLite
  triggers). DELETE stays allowed so the save cascade can clean them up.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-01-10
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None

APPEND_ONLY = (
    "title_reigns",
    "title_defenses",
    "match_log",
    "match_log_participants",
    "finances",
    "weekly_summaries",
)


def _save_fk() -> sa.Column:
    return sa.Column("save_id", sa.Integer(), sa.ForeignKey("saves.id", ondelete="CASCADE"), nullable=False)


def upgrade() -> None:
    # ---- saves ----
    op.create_table(
        "saves",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("brand", sa.Text(), nullable=False),
        sa.Column("theme_color", sa.Text(), nullable=False),
        sa.Column("current_week", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("current_cash", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.Text(), nullable=False),
    )

    # ---- roster ----
    op.create_table(
        "wrestlers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("gender", sa.Text(), nullable=False),  # Male|Female
        sa.Column("alignment", sa.Text(), nullable=False),  # Face|Heel
        sa.Column("ring_level", sa.Integer(), nullable=False),
        sa.Column("mic", sa.Integer(), nullable=False),
        sa.Column("main_class", sa.Text(), nullable=False),
        sa.Column("alt_class", sa.Text(), nullable=False, server_default="None"),
        sa.Column("is_permanent", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("weeks_remaining", sa.Integer(), nullable=False, server_default="25"),
        sa.Column("salary", sa.Float(), nullable=False, server_default="0"),
        sa.Column("wins", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("losses", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("image_ref", sa.Text(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_wrestlers_save_id", "wrestlers", ["save_id"])

    # ---- titles ----
    op.create_table(
        "titles",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),  # World|Midcard|Tag|MITB
        sa.Column("gender", sa.Text(), nullable=False),
        sa.Column("holder1_id", sa.Integer(), nullable=True),
        sa.Column("holder2_id", sa.Integer(), nullable=True),  # Tag only
        sa.Column("week_won", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("image_ref", sa.Text(), nullable=True),
    )
    op.create_index("ix_titles_save_id", "titles", ["save_id"])

    op.create_table(
        "title_reigns",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("title_id", sa.Integer(), sa.ForeignKey("titles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("holder1_id", sa.Integer(), nullable=False),
        sa.Column("holder2_id", sa.Integer(), nullable=True),
        sa.Column("week_won", sa.Integer(), nullable=False),
        sa.Column("week_lost", sa.Integer(), nullable=False),
        sa.Column("defeated_by1_id", sa.Integer(), nullable=True),  # NULL: manual change
        sa.Column("defeated_by2_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_title_reigns_title_id", "title_reigns", ["title_id"])

    op.create_table(
        "title_defenses",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("title_id", sa.Integer(), sa.ForeignKey("titles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("holder1_id", sa.Integer(), nullable=False),
        sa.Column("holder2_id", sa.Integer(), nullable=True),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_title_defenses_title_id", "title_defenses", ["title_id"])

    # ---- planner ----
    op.create_table(
        "planned_matches",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("match_type", sa.Text(), nullable=False),
        sa.Column("stipulation", sa.Text(), nullable=False, server_default="Normal"),
        sa.Column("cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("is_title_match", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("title_id", sa.Integer(), sa.ForeignKey("titles.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_completed", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("result_text", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_planned_matches_save_week", "planned_matches", ["save_id", "week", "sort_order"])

    op.create_table(
        "planned_match_participants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("match_id", sa.Integer(), sa.ForeignKey("planned_matches.id", ondelete="CASCADE"), nullable=False),
        sa.Column("team_index", sa.Integer(), nullable=False),
        sa.Column("slot", sa.Integer(), nullable=False),
        sa.Column("wrestler_id", sa.Integer(), nullable=False),
    )
    op.create_index(
        "uq_planned_match_participants_match_wrestler",
        "planned_match_participants",
        ["match_id", "wrestler_id"],
        unique=True,
    )

    # ---- permanent match log ----
    op.create_table(
        "match_log",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("match_type", sa.Text(), nullable=False),
        sa.Column("winner_id", sa.Integer(), nullable=False),
        sa.Column("winner_name", sa.Text(), nullable=False),
        sa.Column("loser_name", sa.Text(), nullable=False, server_default=""),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("is_title_change", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("title_id", sa.Integer(), nullable=True),
        sa.Column("title_name", sa.Text(), nullable=True),
        sa.Column("planned_match_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_match_log_save_week", "match_log", ["save_id", "week"])

    op.create_table(
        "match_log_participants",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("log_id", sa.Integer(), sa.ForeignKey("match_log.id", ondelete="CASCADE"), nullable=False),
        sa.Column("wrestler_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.Text(), nullable=False),  # winner|loser
        sa.Column("team_index", sa.Integer(), nullable=False),
    )
    op.create_index("ix_match_log_participants_log_id", "match_log_participants", ["log_id"])

    # ---- finance ledger ----
    op.create_table(
        "finances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("kind", sa.Text(), nullable=False),  # IN|OUT
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("ix_finances_save_week", "finances", ["save_id", "week"])

    op.create_table(
        "weekly_summaries",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _save_fk(),
        sa.Column("week", sa.Integer(), nullable=False),
        sa.Column("event_name", sa.Text(), nullable=False, server_default="Weekly Show"),
        sa.Column("avg_rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_income", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total_expenses", sa.Float(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.Text(), nullable=False),
    )
    op.create_index("uq_weekly_summaries_save_week", "weekly_summaries", ["save_id", "week"], unique=True)

    # ---- append-only invariants (SQLite triggers) ----
    for table in APPEND_ONLY:
        op.execute(f"""
        CREATE TRIGGER IF NOT EXISTS trg_{table}_no_update
        BEFORE UPDATE ON {table}
        BEGIN
          SELECT RAISE(ABORT, 'append-only: {table} cannot be updated');
        END;
        """)


def downgrade() -> None:
    for table in reversed(APPEND_ONLY):
        op.execute(f"DROP TRIGGER IF EXISTS trg_{table}_no_update;")

    op.drop_index("uq_weekly_summaries_save_week", table_name="weekly_summaries")
    op.drop_table("weekly_summaries")
    op.drop_index("ix_finances_save_week", table_name="finances")
    op.drop_table("finances")
    op.drop_index("ix_match_log_participants_log_id", table_name="match_log_participants")
    op.drop_table("match_log_participants")
    op.drop_index("ix_match_log_save_week", table_name="match_log")
    op.drop_table("match_log")
    op.drop_index("uq_planned_match_participants_match_wrestler", table_name="planned_match_participants")
    op.drop_table("planned_match_participants")
    op.drop_index("ix_planned_matches_save_week", table_name="planned_matches")
    op.drop_table("planned_matches")
    op.drop_index("ix_title_defenses_title_id", table_name="title_defenses")
    op.drop_table("title_defenses")
    op.drop_index("ix_title_reigns_title_id", table_name="title_reigns")
    op.drop_table("title_reigns")
    op.drop_index("ix_titles_save_id", table_name="titles")
    op.drop_table("titles")
    op.drop_index("ix_wrestlers_save_id", table_name="wrestlers")
    op.drop_table("wrestlers")
    op.drop_table("saves")
