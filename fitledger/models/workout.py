"""WorkoutSession, SessionExercise and PerformedSet models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitledger.core.enums import SessionStatus
from fitledger.db.base import Base


class WorkoutSession(Base):
    """A performed workout. Only sessions with completed_at set are evaluated.

    status and has_records are derived by the evaluation pipeline and stay
    blank until the session's first evaluation."""

    __tablename__ = "workout_sessions"
    __table_args__ = (Index("ix_workout_sessions_completed_at", "completed_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), default="Workout")
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    target_duration_minutes: Mapped[int | None] = mapped_column(Integer, nullable=True)

    status: Mapped[SessionStatus | None] = mapped_column(Enum(SessionStatus), nullable=True)
    has_records: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    exercises: Mapped[list["SessionExercise"]] = relationship(
        "SessionExercise",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="SessionExercise.position",
    )
    # Withdrawn through SessionEvaluator.delete_session; the FK refuses anything else
    records: Mapped[list["PersonalRecord"]] = relationship(
        "PersonalRecord",
        back_populates="session",
        cascade="all",
        passive_deletes=True,
    )


class SessionExercise(Base):
    """An exercise as performed within a session. exercise_id is None for unlinked entries."""

    __tablename__ = "session_exercises"
    __table_args__ = (Index("ix_session_exercises_session_id", "session_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="SET NULL"), nullable=True, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)

    session: Mapped["WorkoutSession"] = relationship("WorkoutSession", back_populates="exercises")
    exercise: Mapped["Exercise | None"] = relationship("Exercise")
    sets: Mapped[list["PerformedSet"]] = relationship(
        "PerformedSet",
        back_populates="session_exercise",
        cascade="all, delete-orphan",
        order_by="PerformedSet.position",
    )


class PerformedSet(Base):
    """One set. Strength: reps + weight (None = bodyweight). Cardio: distance + duration."""

    __tablename__ = "performed_sets"
    __table_args__ = (Index("ix_performed_sets_session_exercise_id", "session_exercise_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    session_exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("session_exercises.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    reps: Mapped[int] = mapped_column(Integer, default=0)
    weight: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)

    distance_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)

    session_exercise: Mapped["SessionExercise"] = relationship("SessionExercise", back_populates="sets")
