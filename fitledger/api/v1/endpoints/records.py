"""Personal records: rebuild podiums from history, and gold-medal bests per exercise."""

from __future__ import annotations

from collections import defaultdict

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitledger.core.enums import Medal, RecordType
from fitledger.db.session import get_db
from fitledger.models.exercise import Exercise
from fitledger.models.personal_record import PersonalRecord
from fitledger.schemas.records import CardioBestRead, ExerciseBestsRead, RebuildSummaryRead
from fitledger.services.evaluation import SessionEvaluator
from fitledger.services.record_store import SqlAlchemyRecordStore

router = APIRouter()


@router.post("/rebuild", response_model=RebuildSummaryRead)
async def rebuild_records(db: AsyncSession = Depends(get_db)):
    """
    Maintenance: delete all records and replay every completed session oldest first,
    then restamp every session's status. Idempotent.
    """
    summary = await SessionEvaluator(SqlAlchemyRecordStore(db)).rebuild_all()
    return RebuildSummaryRead.model_validate(summary)


def summarize_bests(exercise: Exercise, records: list[PersonalRecord]) -> ExerciseBestsRead:
    """Build the bests row for one exercise from its gold-medal records."""
    bests = ExerciseBestsRead(exercise_id=exercise.id, exercise_name=exercise.name)
    cardio: list[CardioBestRead] = []
    for r in records:
        if r.medal != Medal.GOLD:
            continue
        if r.record_type == RecordType.MAX_WEIGHT:
            bests.max_weight_kg = float(r.value_kg) if r.value_kg is not None else None
            bests.max_weight_reps = r.reps
            bests.max_weight_at = r.achieved_at
        elif r.record_type == RecordType.BEST_VOLUME:
            bests.best_volume_kg = float(r.value_kg) if r.value_kg is not None else None
            bests.best_volume_at = r.achieved_at
        elif r.distance_meters is not None and r.duration_seconds is not None:
            cardio.append(
                CardioBestRead(
                    distance_meters=r.distance_meters,
                    duration_seconds=r.duration_seconds,
                    achieved_at=r.achieved_at,
                    session_id=r.session_id,
                )
            )
    bests.cardio = sorted(cardio, key=lambda c: c.distance_meters)
    return bests


@router.get("/bests", response_model=list[ExerciseBestsRead])
async def list_bests(db: AsyncSession = Depends(get_db)):
    """Gold-medal bests for every exercise, by exercise name."""
    exercises = (await db.execute(select(Exercise).order_by(Exercise.name))).scalars().all()
    result = await db.execute(
        select(PersonalRecord).where(PersonalRecord.medal == Medal.GOLD)
    )
    by_exercise: dict = defaultdict(list)
    for record in result.scalars().all():
        by_exercise[record.exercise_id].append(record)
    return [summarize_bests(e, by_exercise.get(e.id, [])) for e in exercises]
