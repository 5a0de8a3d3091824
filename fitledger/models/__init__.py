"""ORM models - import all so Base.metadata is complete for migrations."""

from fitledger.models.exercise import Exercise
from fitledger.models.personal_record import PersonalRecord
from fitledger.models.workout import PerformedSet, SessionExercise, WorkoutSession

__all__ = [
    "Exercise",
    "PerformedSet",
    "PersonalRecord",
    "SessionExercise",
    "WorkoutSession",
]
