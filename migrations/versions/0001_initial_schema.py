"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

Habits, rules, the shared per-day completion ledger and challenges.
Unique constraints on (entity_kind, entity_id, day) and
(challenge_id, day_number) are the conflict targets of the upserts.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- ENUM types ---
    habit_category_enum = sa.Enum("mind", "body", "soul", name="habit_category_enum")
    habit_category_enum.create(op.get_bind(), checkfirst=True)

    time_of_day_enum = sa.Enum(
        "morning", "afternoon", "evening", "anytime", name="time_of_day_enum"
    )
    time_of_day_enum.create(op.get_bind(), checkfirst=True)

    # --- habits ---
    op.create_table(
        "habits",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("category", sa.Enum(
            "mind", "body", "soul", name="habit_category_enum", create_type=False,
        ), nullable=False),
        sa.Column("frequency", sa.String(32), nullable=False, server_default="daily"),
        sa.Column("time_of_day", sa.Enum(
            "morning", "afternoon", "evening", "anytime",
            name="time_of_day_enum", create_type=False,
        ), nullable=False),
        sa.Column("reasons", sa.Text(), nullable=True),
        sa.Column("streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_habits_id", "habits", ["id"])
    op.create_index("ix_habits_user_id", "habits", ["user_id"])

    # --- rules ---
    op.create_table(
        "rules",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("text", sa.String(512), nullable=False),
        sa.Column("category", sa.String(64), nullable=False, server_default="Personal"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("failures", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_completion_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_violation_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_rules_id", "rules", ["id"])
    op.create_index("ix_rules_user_id", "rules", ["user_id"])

    # --- completion_records ---
    op.create_table(
        "completion_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("entity_kind", sa.String(16), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("entity_kind", "entity_id", "day", name="uq_completion_entity_day"),
    )
    op.create_index("ix_completion_records_id", "completion_records", ["id"])
    op.create_index("ix_completion_records_entity_id", "completion_records", ["entity_id"])
    op.create_index("ix_completion_records_day", "completion_records", ["day"])

    # --- challenges ---
    op.create_table(
        "challenges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_challenges_id", "challenges", ["id"])
    op.create_index("ix_challenges_user_id", "challenges", ["user_id"])

    # --- challenge_day_logs ---
    op.create_table(
        "challenge_day_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("challenge_id", sa.Integer(), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("challenge_id", "day_number", name="uq_challenge_day_number"),
    )
    op.create_index("ix_challenge_day_logs_id", "challenge_day_logs", ["id"])
    op.create_index("ix_challenge_day_logs_challenge_id", "challenge_day_logs", ["challenge_id"])


def downgrade() -> None:
    op.drop_table("challenge_day_logs")
    op.drop_table("challenges")
    op.drop_table("completion_records")
    op.drop_table("rules")
    op.drop_table("habits")
    sa.Enum(name="time_of_day_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="habit_category_enum").drop(op.get_bind(), checkfirst=True)
