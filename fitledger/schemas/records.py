"""Personal record, podium and session status schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from fitledger.core.enums import Medal, RecordType, SessionStatus


class RecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    exercise_id: UUID
    session_id: UUID
    record_type: RecordType
    distance_meters: int | None = None
    value_kg: float | None = None
    reps: int | None = None
    duration_seconds: int | None = None
    achieved_at: datetime
    medal: Medal


class PodiumRead(BaseModel):
    """One bucket: up to three records, gold first."""

    record_type: RecordType
    distance_meters: int | None = None
    entries: list[RecordRead] = []


class CardioBestRead(BaseModel):
    distance_meters: int
    duration_seconds: int
    achieved_at: datetime
    session_id: UUID


class ExerciseBestsRead(BaseModel):
    """Gold-medal bests for one exercise."""

    exercise_id: UUID
    exercise_name: str
    max_weight_kg: float | None = None
    max_weight_reps: int | None = None
    max_weight_at: datetime | None = None
    best_volume_kg: float | None = None
    best_volume_at: datetime | None = None
    cardio: list[CardioBestRead] = []


class SessionStatusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: SessionStatus | None = None
    has_records: bool = False


class RebuildSummaryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sessions: int
    records: int
    committed: bool
