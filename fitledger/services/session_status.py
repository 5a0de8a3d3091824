"""Session status: calendar classification of a completed workout.

Only exceeded / target_met / partial are derived here. Missed days and rest
days come from the absence of sessions and are not stored on a session.
"""

from __future__ import annotations

from datetime import datetime

from fitledger.core.constants import EXCEEDED_MARGIN_MINUTES, UNTARGETED_GOAL_MINUTES
from fitledger.core.enums import SessionStatus
from fitledger.models.workout import WorkoutSession
from fitledger.services.podium import PodiumIndex, as_utc


def compute_status(duration_minutes: int, target_minutes: int | None) -> SessionStatus:
    """
    With a target: target + 60 or more → exceeded, target or more → target_met, else partial.
    Without a target: 60 or more → target_met, else partial (exceeded needs a target).
    """
    if target_minutes is not None:
        if duration_minutes >= target_minutes + EXCEEDED_MARGIN_MINUTES:
            return SessionStatus.EXCEEDED
        if duration_minutes >= target_minutes:
            return SessionStatus.TARGET_MET
        return SessionStatus.PARTIAL
    if duration_minutes >= UNTARGETED_GOAL_MINUTES:
        return SessionStatus.TARGET_MET
    return SessionStatus.PARTIAL


def duration_minutes(started_at: datetime, completed_at: datetime) -> int:
    """Elapsed whole minutes, rounded down."""
    delta = as_utc(completed_at) - as_utc(started_at)
    return int(delta.total_seconds() // 60)


def session_has_records(session: WorkoutSession, index: PodiumIndex) -> bool:
    """Walk the session's exercises' podiums for a record this session set."""
    for session_exercise in session.exercises:
        if session_exercise.exercise is None:
            continue
        for record in index.records_for_exercise(session_exercise.exercise.id):
            if record.session_id == session.id:
                return True
    return False


def apply_status(session: WorkoutSession, has_records: bool) -> SessionStatus:
    """Stamp status and has_records on a completed session."""
    status = compute_status(
        duration_minutes(session.started_at, session.completed_at),
        session.target_duration_minutes,
    )
    session.status = status
    session.has_records = has_records
    return status
