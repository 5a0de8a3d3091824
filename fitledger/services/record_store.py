"""Persistence collaborator for the evaluation pipeline.

RecordStore is the port the ranking and status engines talk to; the engines
never issue queries themselves. SqlAlchemyRecordStore is the adapter over an
AsyncSession. Sessions it returns come with exercises, sets and linked
exercise identities eagerly loaded, so evaluation never triggers a lazy load.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from fitledger.core.errors import PersistenceError
from fitledger.models.personal_record import PersonalRecord
from fitledger.models.workout import SessionExercise, WorkoutSession


class RecordStore(Protocol):
    """What the evaluation pipeline needs from persistence."""

    async def fetch_completed_sessions(self, *, chronological: bool = False) -> list[WorkoutSession]:
        """Sessions with a completion time; oldest first when chronological."""
        ...

    async def fetch_all_records(self) -> list[PersonalRecord]:
        ...

    async def fetch_records(self, exercise_ids: Iterable[uuid.UUID]) -> list[PersonalRecord]:
        """Records owned by the given exercises."""
        ...

    async def get_session(self, session_id: uuid.UUID) -> WorkoutSession | None:
        ...

    def insert(self, entity: object) -> None:
        ...

    async def delete(self, entity: object) -> None:
        ...

    async def commit(self) -> None:
        """Make pending changes durable. Raises PersistenceError on failure."""
        ...


def _session_loader():
    return (
        selectinload(WorkoutSession.exercises).selectinload(SessionExercise.sets),
        selectinload(WorkoutSession.exercises).selectinload(SessionExercise.exercise),
    )


class SqlAlchemyRecordStore:
    """RecordStore backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_completed_sessions(self, *, chronological: bool = False) -> list[WorkoutSession]:
        stmt = (
            select(WorkoutSession)
            .where(WorkoutSession.completed_at.isnot(None))
            .options(*_session_loader())
        )
        if chronological:
            stmt = stmt.order_by(WorkoutSession.completed_at.asc(), WorkoutSession.started_at.asc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def fetch_all_records(self) -> list[PersonalRecord]:
        # Pending inserts must be visible to callers building session-id sets
        await self.db.flush()
        result = await self.db.execute(select(PersonalRecord))
        return list(result.scalars().all())

    async def fetch_records(self, exercise_ids: Iterable[uuid.UUID]) -> list[PersonalRecord]:
        ids = list(set(exercise_ids))
        if not ids:
            return []
        await self.db.flush()
        result = await self.db.execute(
            select(PersonalRecord).where(PersonalRecord.exercise_id.in_(ids))
        )
        return list(result.scalars().all())

    async def get_session(self, session_id: uuid.UUID) -> WorkoutSession | None:
        result = await self.db.execute(
            select(WorkoutSession)
            .where(WorkoutSession.id == session_id)
            .options(*_session_loader())
        )
        return result.scalar_one_or_none()

    def insert(self, entity: object) -> None:
        self.db.add(entity)

    async def delete(self, entity: object) -> None:
        if inspect(entity).pending:
            # Added and evicted before any flush
            self.db.expunge(entity)
            return
        await self.db.delete(entity)

    async def commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(str(e)) from e
