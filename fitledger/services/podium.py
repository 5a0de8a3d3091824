"""Podium ranking: bucket keys, ordering, medal assignment and the podium index.

Everything here is pure bookkeeping over PersonalRecord objects; nothing
touches the database. The ranking engine decides what to persist from the
PodiumChange that rank_podium returns.

Ordering inside a bucket:
- max_weight / best_volume: value_kg descending
- cardio_time: duration_seconds ascending
Ties go to the earlier achieved_at; after that the incumbent stays ahead of
the newcomer.
"""

from __future__ import annotations

import sys
import uuid
from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from fitledger.core.constants import PODIUM_SIZE
from fitledger.core.enums import Medal, RecordType
from fitledger.models.personal_record import PersonalRecord


@dataclass(frozen=True)
class BucketKey:
    """Unit of competition: exercise + record type (+ distance for cardio)."""

    exercise_id: uuid.UUID
    record_type: RecordType
    distance_meters: int | None = None

    @classmethod
    def of(cls, record: PersonalRecord) -> "BucketKey":
        return cls(record.exercise_id, record.record_type, record.distance_meters)


@dataclass
class PodiumChange:
    """Outcome of offering one candidate to a bucket."""

    ranked: list[PersonalRecord]  # survivors, best first
    evicted: list[PersonalRecord]  # previously stored records pushed off the podium
    admitted: bool  # candidate is among the survivors


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored and fresh timestamps compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _sort_key(record: PersonalRecord, position: int) -> tuple:
    if record.record_type.higher_is_better:
        primary = -to_decimal(record.value_kg or 0)
    else:
        primary = record.duration_seconds if record.duration_seconds is not None else sys.maxsize
    return (primary, as_utc(record.achieved_at), position)


def rank_podium(
    members: list[PersonalRecord],
    candidate: PersonalRecord,
    size: int = PODIUM_SIZE,
) -> PodiumChange:
    """Sort members + candidate, keep the best `size`.

    members must be in their current medal order so that the incumbent wins
    a full tie.
    """
    combined = [*members, candidate]
    order = sorted(range(len(combined)), key=lambda i: _sort_key(combined[i], i))
    ranked = [combined[i] for i in order]
    kept, dropped = ranked[:size], ranked[size:]
    return PodiumChange(
        ranked=kept,
        evicted=[r for r in dropped if r is not candidate],
        admitted=any(r is candidate for r in kept),
    )


def assign_medals(ranked: list[PersonalRecord]) -> None:
    """Medals are a function of position: recompute all of them."""
    for rank, record in enumerate(ranked, start=1):
        record.medal = Medal.for_rank(rank)


class PodiumIndex:
    """Bucket key → record ids in medal order, plus the records themselves.

    Used instead of walking ORM back-references, so a stale relationship cache
    can never make a bucket look fuller than it is.
    """

    def __init__(self) -> None:
        self._buckets: dict[BucketKey, list[uuid.UUID]] = {}
        self._records: dict[uuid.UUID, PersonalRecord] = {}

    @classmethod
    def from_records(cls, records: Iterable[PersonalRecord]) -> "PodiumIndex":
        grouped: dict[BucketKey, list[PersonalRecord]] = defaultdict(list)
        for record in records:
            grouped[BucketKey.of(record)].append(record)
        index = cls()
        for key, members in grouped.items():
            members.sort(key=lambda r: (r.medal.rank, as_utc(r.achieved_at)))
            index.replace(key, members)
        return index

    def members(self, key: BucketKey) -> list[PersonalRecord]:
        return [self._records[record_id] for record_id in self._buckets.get(key, [])]

    def replace(self, key: BucketKey, ranked: list[PersonalRecord]) -> None:
        for record_id in self._buckets.get(key, []):
            self._records.pop(record_id, None)
        if not ranked:
            self._buckets.pop(key, None)
            return
        self._buckets[key] = [r.id for r in ranked]
        for record in ranked:
            self._records[record.id] = record

    def buckets(self) -> Iterator[tuple[BucketKey, list[PersonalRecord]]]:
        for key in self._buckets:
            yield key, self.members(key)

    def records_for_exercise(self, exercise_id: uuid.UUID) -> list[PersonalRecord]:
        return [
            record
            for key, members in self.buckets()
            if key.exercise_id == exercise_id
            for record in members
        ]

    def __len__(self) -> int:
        return len(self._records)
