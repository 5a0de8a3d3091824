"""Initial schema: exercises, workout sessions, performed sets, personal records.

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

metric_kind = sa.Enum("STRENGTH", "CARDIO", name="metrickind")
session_status = sa.Enum("EXCEEDED", "TARGET_MET", "PARTIAL", name="sessionstatus")
record_type = sa.Enum("MAX_WEIGHT", "BEST_VOLUME", "CARDIO_TIME", name="recordtype")
medal = sa.Enum("GOLD", "SILVER", "BRONZE", name="medal")


def upgrade() -> None:
    op.create_table(
        "exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("metric_kind", metric_kind, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_exercises_name"), "exercises", ["name"], unique=False)

    op.create_table(
        "workout_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("target_duration_minutes", sa.Integer(), nullable=True),
        sa.Column("status", session_status, nullable=True),
        sa.Column("has_records", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workout_sessions_completed_at", "workout_sessions", ["completed_at"], unique=False)

    op.create_table(
        "session_exercises",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=True),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["session_id"], ["workout_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_session_exercises_session_id", "session_exercises", ["session_id"], unique=False)
    op.create_index(op.f("ix_session_exercises_exercise_id"), "session_exercises", ["exercise_id"], unique=False)

    op.create_table(
        "performed_sets",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("session_exercise_id", sa.Uuid(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Numeric(precision=8, scale=2), nullable=True),
        sa.Column("distance_meters", sa.Integer(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["session_exercise_id"], ["session_exercises.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_performed_sets_session_exercise_id", "performed_sets", ["session_exercise_id"], unique=False
    )

    op.create_table(
        "personal_records",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("exercise_id", sa.Uuid(), nullable=False),
        sa.Column("session_id", sa.Uuid(), nullable=False),
        sa.Column("record_type", record_type, nullable=False),
        sa.Column("distance_meters", sa.Integer(), nullable=True),
        sa.Column("value_kg", sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column("reps", sa.Integer(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("achieved_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("medal", medal, nullable=False),
        sa.ForeignKeyConstraint(["exercise_id"], ["exercises.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["session_id"], ["workout_sessions.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_personal_records_bucket",
        "personal_records",
        ["exercise_id", "record_type", "distance_meters"],
        unique=False,
    )
    op.create_index("ix_personal_records_session_id", "personal_records", ["session_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_personal_records_session_id", table_name="personal_records")
    op.drop_index("ix_personal_records_bucket", table_name="personal_records")
    op.drop_table("personal_records")
    op.drop_index("ix_performed_sets_session_exercise_id", table_name="performed_sets")
    op.drop_table("performed_sets")
    op.drop_index(op.f("ix_session_exercises_exercise_id"), table_name="session_exercises")
    op.drop_index("ix_session_exercises_session_id", table_name="session_exercises")
    op.drop_table("session_exercises")
    op.drop_index("ix_workout_sessions_completed_at", table_name="workout_sessions")
    op.drop_table("workout_sessions")
    op.drop_index(op.f("ix_exercises_name"), table_name="exercises")
    op.drop_table("exercises")
    for enum in (medal, record_type, session_status, metric_kind):
        enum.drop(op.get_bind(), checkfirst=True)
