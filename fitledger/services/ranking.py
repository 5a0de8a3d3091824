"""Ranking engine: maintain top-3 personal record podiums per exercise metric.

Two entry points:
- evaluate(session): offer one completed session's candidates to the podiums.
  Does not commit; the caller persists ranking and status together.
- rebuild_all(): delete every record, commit, then replay all completed
  sessions oldest first. Safe to run repeatedly.

Re-evaluating a session is a no-op: a bucket that already holds a record
from the same session rejects the candidate before anything is re-ranked.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from fitledger.core.enums import Medal, MetricKind, RecordType
from fitledger.core.errors import PersistenceError
from fitledger.models.personal_record import PersonalRecord
from fitledger.models.workout import PerformedSet, WorkoutSession
from fitledger.services.podium import BucketKey, PodiumIndex, assign_medals, rank_podium, to_decimal
from fitledger.services.record_store import RecordStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """A metric value from one session, proposed for a bucket's podium."""

    bucket: BucketKey
    value_kg: Decimal | None = None
    reps: int | None = None
    duration_seconds: int | None = None

    def to_record(self, session_id: uuid.UUID, achieved_at: datetime) -> PersonalRecord:
        return PersonalRecord(
            id=uuid.uuid4(),
            exercise_id=self.bucket.exercise_id,
            session_id=session_id,
            record_type=self.bucket.record_type,
            distance_meters=self.bucket.distance_meters,
            value_kg=self.value_kg,
            reps=self.reps,
            duration_seconds=self.duration_seconds,
            achieved_at=achieved_at,
            medal=Medal.GOLD,  # placeholder until ranked
        )


def strength_candidates(exercise_id: uuid.UUID, sets: Iterable[PerformedSet]) -> list[Candidate]:
    """Max weight (heaviest completed set with weight > 0) and session volume."""
    completed = [s for s in sets if s.completed]
    candidates: list[Candidate] = []

    weighted = [s for s in completed if s.weight is not None and to_decimal(s.weight) > 0]
    if weighted:
        heaviest = max(weighted, key=lambda s: to_decimal(s.weight))
        candidates.append(
            Candidate(
                bucket=BucketKey(exercise_id, RecordType.MAX_WEIGHT),
                value_kg=to_decimal(heaviest.weight),
                reps=heaviest.reps,
            )
        )

    volume = sum(
        (int(s.reps or 0) * to_decimal(s.weight) for s in completed if s.weight is not None),
        Decimal(0),
    )
    if volume > 0:
        candidates.append(
            Candidate(bucket=BucketKey(exercise_id, RecordType.BEST_VOLUME), value_kg=volume)
        )
    return candidates


def cardio_candidates(exercise_id: uuid.UUID, sets: Iterable[PerformedSet]) -> list[Candidate]:
    """Fastest completed time per distance. Sets without a distance or time are ignored."""
    best_by_distance: dict[int, int] = {}
    for s in sets:
        if not s.completed or s.distance_meters is None:
            continue
        if s.duration_seconds is None or s.duration_seconds <= 0:
            continue
        current = best_by_distance.get(s.distance_meters)
        if current is None or s.duration_seconds < current:
            best_by_distance[s.distance_meters] = s.duration_seconds
    return [
        Candidate(
            bucket=BucketKey(exercise_id, RecordType.CARDIO_TIME, distance),
            duration_seconds=duration,
        )
        for distance, duration in sorted(best_by_distance.items())
    ]


class RankingEngine:
    """Owns podium evaluation. All reads and writes go through the RecordStore."""

    def __init__(self, store: RecordStore):
        self.store = store
        self.index = PodiumIndex()

    async def evaluate(self, session: WorkoutSession) -> list[PersonalRecord]:
        """Evaluate one completed session. Returns the records it put on a podium."""
        exercise_ids = {se.exercise.id for se in session.exercises if se.exercise is not None}
        self.index = PodiumIndex.from_records(await self.store.fetch_records(exercise_ids))
        return await self._evaluate(session)

    async def rebuild_all(self) -> bool:
        """Replay every completed session from scratch.

        Returns False when either commit fails. If the deletions cannot be
        committed the replay is skipped, since it must start from an empty store.
        """
        existing = await self.store.fetch_all_records()
        for record in existing:
            await self.store.delete(record)
        try:
            await self.store.commit()
        except PersistenceError:
            logger.exception("Rebuild aborted: could not delete %d personal records", len(existing))
            return False

        self.index = PodiumIndex()
        sessions = await self.store.fetch_completed_sessions(chronological=True)
        created = 0
        for session in sessions:
            created += len(await self._evaluate(session))
        if not await save_changes(self.store, "personal records"):
            return False
        logger.info(
            "Rebuilt podiums from %d sessions: %d records created, %d kept",
            len(sessions),
            created,
            len(self.index),
        )
        return True

    async def withdraw(self, session: WorkoutSession) -> list[PersonalRecord]:
        """Take a session's records off their podiums and move the rest up.

        Vacated places stay empty until the next rebuild_all; candidates
        evicted earlier are not recovered. Does not commit.
        """
        exercise_ids = {se.exercise.id for se in session.exercises if se.exercise is not None}
        self.index = PodiumIndex.from_records(await self.store.fetch_records(exercise_ids))
        removed: list[PersonalRecord] = []
        for key, members in list(self.index.buckets()):
            remaining = [r for r in members if r.session_id != session.id]
            if len(remaining) == len(members):
                continue
            for record in members:
                if record.session_id == session.id:
                    await self.store.delete(record)
                    removed.append(record)
            assign_medals(remaining)
            self.index.replace(key, remaining)
        return removed

    async def _evaluate(self, session: WorkoutSession) -> list[PersonalRecord]:
        achieved_at = session.completed_at or session.started_at
        created: list[PersonalRecord] = []
        for session_exercise in session.exercises:
            exercise = session_exercise.exercise
            if exercise is None:
                logger.debug("Session %s: skipping unlinked exercise %s", session.id, session_exercise.id)
                continue
            if exercise.metric_kind == MetricKind.CARDIO:
                candidates = cardio_candidates(exercise.id, session_exercise.sets)
            else:
                candidates = strength_candidates(exercise.id, session_exercise.sets)
            for candidate in candidates:
                record = await self._rerank(candidate, session.id, achieved_at)
                if record is not None:
                    created.append(record)
        return created

    async def _rerank(
        self,
        candidate: Candidate,
        session_id: uuid.UUID,
        achieved_at: datetime,
    ) -> PersonalRecord | None:
        members = self.index.members(candidate.bucket)
        if any(r.session_id == session_id for r in members):
            return None

        record = candidate.to_record(session_id, achieved_at)
        change = rank_podium(members, record)
        for evicted in change.evicted:
            await self.store.delete(evicted)
        if change.admitted:
            self.store.insert(record)
        assign_medals(change.ranked)
        self.index.replace(candidate.bucket, change.ranked)
        return record if change.admitted else None


async def save_changes(store: RecordStore, what: str) -> bool:
    """Commit; on failure log and carry on. In-memory changes stay applied."""
    try:
        await store.commit()
    except PersistenceError:
        logger.exception("Failed to save %s", what)
        return False
    return True
