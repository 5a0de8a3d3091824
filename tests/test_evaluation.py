"""
Unit tests for the evaluation orchestrator.

Tests cover:
- Single-session evaluation: ranking, status, has_records, one commit
- Precondition: in-progress sessions are rejected
- Persistence failures are logged, not raised
- rebuild_all: replay, restamping and has_records exactness
- delete_session: records withdrawn, remaining medals renumbered
"""

import pytest

from fitledger.core.enums import MetricKind, RecordType, SessionStatus
from fitledger.core.errors import PersistenceError, SessionNotCompletedError
from fitledger.services.evaluation import RebuildSummary, SessionEvaluator
from tests.fakes import FakeRecordStore, lift, make_exercise, make_session, run


class TestEvaluateSession:
    async def test_stamps_status_and_records(self, store):
        bench = make_exercise()
        session = store.add_session(make_session((bench, [lift(100)]), minutes=45, target=40))

        await SessionEvaluator(store).evaluate_session(session)

        assert session.status == SessionStatus.TARGET_MET
        assert session.has_records is True
        assert len(store.records) == 2
        assert store.commits == 1

    async def test_in_progress_session_is_rejected(self, store):
        session = make_session((make_exercise(), [lift(100)]), completed=False)
        with pytest.raises(SessionNotCompletedError):
            await SessionEvaluator(store).evaluate_session(session)
        assert store.records == []
        assert session.status is None

    async def test_no_records_when_nothing_qualifies(self, store):
        pull_up = make_exercise("Pull Up")
        session = make_session((pull_up, [lift(None, reps=12)]), (None, [lift(300)]), minutes=20)

        await SessionEvaluator(store).evaluate_session(session)

        assert session.status == SessionStatus.PARTIAL
        assert session.has_records is False

    async def test_no_records_when_off_the_podium(self, store):
        bench = make_exercise()
        evaluator = SessionEvaluator(store)
        for day, weight in enumerate([120, 110, 100]):
            await evaluator.evaluate_session(make_session((bench, [lift(weight, reps=1)]), day=day))

        weak = make_session((bench, [lift(60, reps=1)]), day=4)
        await evaluator.evaluate_session(weak)

        assert weak.has_records is False

    async def test_reevaluation_keeps_has_records(self, store):
        rower = make_exercise("Rowing", MetricKind.CARDIO)
        session = make_session((rower, [run(2000, 420)]), minutes=130, target=60)
        evaluator = SessionEvaluator(store)

        await evaluator.evaluate_session(session)
        records = list(store.records)
        await evaluator.evaluate_session(session)

        assert store.records == records
        assert session.has_records is True
        assert session.status == SessionStatus.EXCEEDED

    async def test_commit_failure_is_logged_and_swallowed(self, store, caplog):
        bench = make_exercise()
        session = make_session((bench, [lift(100)]))
        store.failing_commits = 1

        await SessionEvaluator(store).evaluate_session(session)

        assert "Failed to save evaluation of session" in caplog.text
        # In-memory mutations stay applied
        assert session.has_records is True
        assert session.status == SessionStatus.TARGET_MET


class TestRebuildAll:
    def _history(self):
        bench = make_exercise()
        weights = [100, 110, 120, 130]
        return bench, [
            make_session((bench, [lift(w, reps=1)]), day=day, minutes=30 + day * 20, target=60)
            for day, w in enumerate(weights)
        ]

    async def test_has_records_reflects_surviving_records(self):
        bench, sessions = self._history()
        store = FakeRecordStore(sessions)
        evaluator = SessionEvaluator(store)
        for session in sessions:
            await evaluator.evaluate_session(session)
        # The first session was knocked off the podium by the fourth
        assert sessions[0].has_records is True

        summary = await evaluator.rebuild_all()

        assert summary == RebuildSummary(sessions=4, records=6, committed=True)
        assert [s.has_records for s in sessions] == [False, True, True, True]

    async def test_restamps_status(self):
        _, sessions = self._history()
        for session in sessions:
            session.status = SessionStatus.EXCEEDED
        store = FakeRecordStore(sessions)

        await SessionEvaluator(store).rebuild_all()

        # 30, 50, 70, 90 minutes against a 60 minute target
        assert [s.status for s in sessions] == [
            SessionStatus.PARTIAL,
            SessionStatus.PARTIAL,
            SessionStatus.TARGET_MET,
            SessionStatus.TARGET_MET,
        ]

    async def test_repeated_rebuilds_are_identical(self):
        _, sessions = self._history()
        store = FakeRecordStore(sessions)
        evaluator = SessionEvaluator(store)

        first = await evaluator.rebuild_all()
        state = sorted((str(r.session_id), r.record_type.value, r.medal.rank) for r in store.records)
        second = await evaluator.rebuild_all()

        assert first == second
        assert sorted((str(r.session_id), r.record_type.value, r.medal.rank) for r in store.records) == state

    async def test_follows_history_changed_out_of_band(self):
        bench, sessions = self._history()
        store = FakeRecordStore(sessions)
        evaluator = SessionEvaluator(store)
        for session in sessions:
            await evaluator.evaluate_session(session)

        # Heaviest session removed from history behind the engine's back
        store.sessions.remove(sessions[3])
        store.records = [r for r in store.records if r.session_id != sessions[3].id]
        await evaluator.rebuild_all()

        assert [s.has_records for s in sessions[:3]] == [True, True, True]

    async def test_aborted_rebuild_leaves_statuses_alone(self, caplog):
        _, sessions = self._history()
        store = FakeRecordStore(sessions)
        store.failing_commits = 1

        summary = await SessionEvaluator(store).rebuild_all()

        assert summary.committed is False
        assert all(s.status is None for s in sessions)

    async def test_skips_sessions_still_in_progress(self):
        bench = make_exercise()
        open_session = make_session((bench, [lift(500)]), completed=False)
        store = FakeRecordStore([open_session])

        summary = await SessionEvaluator(store).rebuild_all()

        assert summary.sessions == 0
        assert open_session.status is None
        assert open_session.has_records is False

    async def test_failed_replay_is_not_reported_as_committed(self, caplog):
        _, sessions = self._history()
        store = FakeRecordStore(sessions)
        original_commit = store.commit
        calls = {"n": 0}

        async def fail_second_commit():
            calls["n"] += 1
            if calls["n"] == 2:
                store.failing_commits = 1
            await original_commit()

        store.commit = fail_second_commit
        summary = await SessionEvaluator(store).rebuild_all()

        assert summary.committed is False
        assert "Restamped" not in caplog.text
        assert all(s.status is None for s in sessions)


class TestDeleteSession:
    async def test_records_leave_and_medals_close_up(self):
        bench = make_exercise()
        sessions = [make_session((bench, [lift(w, reps=1)]), day=day) for day, w in enumerate([120, 110, 100])]
        store = FakeRecordStore(sessions)
        evaluator = SessionEvaluator(store)
        for session in sessions:
            await evaluator.evaluate_session(session)
        commits = store.commits

        await evaluator.delete_session(sessions[0])

        assert sessions[0] not in store.sessions
        assert all(r.session_id != sessions[0].id for r in store.records)
        for record_type in (RecordType.MAX_WEIGHT, RecordType.BEST_VOLUME):
            ranks = sorted(r.medal.rank for r in store.records if r.record_type == record_type)
            assert ranks == [1, 2]
        assert store.commits == commits + 1

    async def test_commit_failure_propagates(self):
        bench = make_exercise()
        session = make_session((bench, [lift(100)]))
        store = FakeRecordStore([session])
        evaluator = SessionEvaluator(store)
        await evaluator.evaluate_session(session)
        store.failing_commits = 1

        with pytest.raises(PersistenceError):
            await evaluator.delete_session(session)
