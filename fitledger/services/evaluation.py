"""Evaluation orchestrator: ranking, then status, then one commit.

Ranking runs first so the status pass can see whether the session set any
record. rebuild_all replays ranking over full history and then restamps every
completed session from a single pass over all records.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fitledger.core.errors import SessionNotCompletedError
from fitledger.models.workout import WorkoutSession
from fitledger.services.ranking import RankingEngine, save_changes
from fitledger.services.record_store import RecordStore
from fitledger.services.session_status import apply_status, session_has_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RebuildSummary:
    sessions: int
    records: int
    committed: bool


class SessionEvaluator:
    """Entry point for the session-completion handler and maintenance tooling."""

    def __init__(self, store: RecordStore, ranking: RankingEngine | None = None):
        self.store = store
        self.ranking = ranking or RankingEngine(store)

    async def evaluate_session(self, session: WorkoutSession) -> None:
        """Rank and stamp one completed session. Raises SessionNotCompletedError if still in progress."""
        if session.completed_at is None:
            raise SessionNotCompletedError(session.id)

        created = await self.ranking.evaluate(session)
        has_records = session_has_records(session, self.ranking.index)
        status = apply_status(session, has_records)
        logger.info(
            "Evaluated session %s: status=%s, %d new records, has_records=%s",
            session.id,
            status.value,
            len(created),
            has_records,
        )
        await save_changes(self.store, f"evaluation of session {session.id}")

    async def delete_session(self, session: WorkoutSession) -> None:
        """Delete a session along with the records it set, re-medalling what is left.

        Raises PersistenceError if the deletion cannot be committed.
        """
        removed = await self.ranking.withdraw(session)
        await self.store.delete(session)
        await self.store.commit()
        logger.info("Deleted session %s and %d of its records", session.id, len(removed))

    async def rebuild_all(self) -> RebuildSummary:
        """Rebuild every podium, then status and has_records for every completed session."""
        if not await self.ranking.rebuild_all():
            return RebuildSummary(sessions=0, records=0, committed=False)

        sessions = await self.store.fetch_completed_sessions()
        records = await self.store.fetch_all_records()
        # One pass over all records instead of a per-session walk
        session_ids_with_records = {r.session_id for r in records}
        for session in sessions:
            apply_status(session, session.id in session_ids_with_records)

        committed = await save_changes(self.store, "session statuses")
        logger.info(
            "Restamped %d sessions, %d with records", len(sessions), len(session_ids_with_records)
        )
        return RebuildSummary(sessions=len(sessions), records=len(records), committed=committed)
