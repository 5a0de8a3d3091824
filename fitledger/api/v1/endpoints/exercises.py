"""Exercise podiums - every bucket's records in medal order."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitledger.core.enums import RecordType
from fitledger.db.session import get_db
from fitledger.models.exercise import Exercise
from fitledger.models.personal_record import PersonalRecord
from fitledger.schemas.records import PodiumRead, RecordRead
from fitledger.services.podium import PodiumIndex

router = APIRouter()


@router.get("/{exercise_id}/podiums", response_model=list[PodiumRead])
async def get_podiums(
    exercise_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Podiums for one exercise: strength metrics first, then cardio distances ascending."""
    exercise = await db.get(Exercise, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")

    result = await db.execute(select(PersonalRecord).where(PersonalRecord.exercise_id == exercise_id))
    index = PodiumIndex.from_records(result.scalars().all())
    podiums = sorted(
        index.buckets(),
        key=lambda item: (list(RecordType).index(item[0].record_type), item[0].distance_meters or 0),
    )
    return [
        PodiumRead(
            record_type=key.record_type,
            distance_meters=key.distance_meters,
            entries=[RecordRead.model_validate(r) for r in members],
        )
        for key, members in podiums
    ]
