"""
API tests for the evaluation endpoints, with get_db bound to SQLite.

Tests cover:
- POST /sessions/{id}/evaluate (200, 404, 409) and DELETE /sessions/{id}
- POST /records/rebuild
- GET /exercises/{id}/podiums and GET /records/bests
- Health endpoints
"""

import uuid

from fitledger.core.enums import MetricKind
from tests.fakes import lift, make_exercise, make_session, run

PREFIX = "/api/v1"


async def seed(db, *objects):
    db.add_all(objects)
    await db.commit()


class TestHealth:
    async def test_root_and_health(self, client):
        assert (await client.get("/")).json()["status"] == "ok"
        assert (await client.get(f"{PREFIX}/health")).json() == {"status": "ok"}

    async def test_ready(self, client):
        response = await client.get(f"{PREFIX}/health/ready")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"


class TestEvaluateEndpoint:
    async def test_evaluates_completed_session(self, client, db):
        bench = make_exercise()
        session = make_session((bench, [lift(100, reps=5)]), minutes=95, target=30)
        await seed(db, bench, session)

        response = await client.post(f"{PREFIX}/sessions/{session.id}/evaluate")

        assert response.status_code == 200
        assert response.json() == {"id": str(session.id), "status": "exceeded", "has_records": True}

    async def test_unknown_session(self, client):
        response = await client.post(f"{PREFIX}/sessions/{uuid.uuid4()}/evaluate")
        assert response.status_code == 404

    async def test_in_progress_session(self, client, db):
        bench = make_exercise()
        session = make_session((bench, [lift(100)]), completed=False)
        await seed(db, bench, session)

        response = await client.post(f"{PREFIX}/sessions/{session.id}/evaluate")

        assert response.status_code == 409


class TestRecordsEndpoints:
    async def test_podiums_and_bests(self, client, db):
        bench = make_exercise()
        rower = make_exercise("Rowing", MetricKind.CARDIO)
        sessions = [
            make_session((bench, [lift(w, reps=3)]), (rower, [run(2000, t)]), day=day)
            for day, (w, t) in enumerate([(100, 480), (120, 470), (90, 500), (110, 460)])
        ]
        await seed(db, bench, rower, *sessions)
        for s in sessions:
            assert (await client.post(f"{PREFIX}/sessions/{s.id}/evaluate")).status_code == 200

        podiums = (await client.get(f"{PREFIX}/exercises/{bench.id}/podiums")).json()
        assert [p["record_type"] for p in podiums] == ["max_weight", "best_volume"]
        assert [(e["value_kg"], e["medal"]) for e in podiums[0]["entries"]] == [
            (120.0, "gold"),
            (110.0, "silver"),
            (100.0, "bronze"),
        ]

        rowing = (await client.get(f"{PREFIX}/exercises/{rower.id}/podiums")).json()
        assert rowing[0]["distance_meters"] == 2000
        assert [e["duration_seconds"] for e in rowing[0]["entries"]] == [460, 470, 480]

        bests = (await client.get(f"{PREFIX}/records/bests")).json()
        assert [b["exercise_name"] for b in bests] == ["Bench Press", "Rowing"]
        assert bests[0]["max_weight_kg"] == 120.0
        assert bests[0]["max_weight_reps"] == 3
        assert bests[0]["best_volume_kg"] == 360.0
        assert [(c["distance_meters"], c["duration_seconds"]) for c in bests[1]["cardio"]] == [(2000, 460)]

    async def test_podiums_unknown_exercise(self, client):
        response = await client.get(f"{PREFIX}/exercises/{uuid.uuid4()}/podiums")
        assert response.status_code == 404

    async def test_rebuild(self, client, db):
        bench = make_exercise()
        sessions = [make_session((bench, [lift(w)]), day=day) for day, w in enumerate([80, 90])]
        open_session = make_session((bench, [lift(200)]), day=5, completed=False)
        await seed(db, bench, *sessions, open_session)

        response = await client.post(f"{PREFIX}/records/rebuild")

        assert response.status_code == 200
        assert response.json() == {"sessions": 2, "records": 4, "committed": True}
        again = await client.post(f"{PREFIX}/records/rebuild")
        assert again.json() == response.json()


class TestDeleteSessionEndpoint:
    async def test_bests_follow_the_remaining_podium(self, client, db):
        bench = make_exercise()
        sessions = [make_session((bench, [lift(w, reps=1)]), day=day) for day, w in enumerate([120, 110, 100])]
        await seed(db, bench, *sessions)
        for s in sessions:
            await client.post(f"{PREFIX}/sessions/{s.id}/evaluate")

        response = await client.delete(f"{PREFIX}/sessions/{sessions[0].id}")

        assert response.status_code == 204
        podiums = (await client.get(f"{PREFIX}/exercises/{bench.id}/podiums")).json()
        assert [e["medal"] for e in podiums[0]["entries"]] == ["gold", "silver"]
        bests = (await client.get(f"{PREFIX}/records/bests")).json()
        assert bests[0]["max_weight_kg"] == 110.0

    async def test_unknown_session(self, client):
        response = await client.delete(f"{PREFIX}/sessions/{uuid.uuid4()}")
        assert response.status_code == 404
