"""PersonalRecord model - one podium entry inside a (exercise, record type, distance) bucket."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitledger.core.enums import Medal, RecordType
from fitledger.db.base import Base


class PersonalRecord(Base):
    """Ranked record. Immutable once created except for medal, which follows bucket membership."""

    __tablename__ = "personal_records"
    __table_args__ = (
        Index("ix_personal_records_bucket", "exercise_id", "record_type", "distance_meters"),
        Index("ix_personal_records_session_id", "session_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False
    )
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workout_sessions.id", ondelete="RESTRICT"), nullable=False
    )
    record_type: Mapped[RecordType] = mapped_column(Enum(RecordType), nullable=False)
    distance_meters: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Cardio bucket key

    value_kg: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)  # Weight or volume
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Reps at max weight
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Cardio time

    achieved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    medal: Mapped[Medal] = mapped_column(Enum(Medal), default=Medal.GOLD, nullable=False)

    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="records")
    session: Mapped["WorkoutSession"] = relationship("WorkoutSession", back_populates="records")
