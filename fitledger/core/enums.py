"""Shared enums for models, services and API."""

from enum import Enum


class MetricKind(str, Enum):
    """How an exercise is measured, and therefore which podiums it competes in."""

    STRENGTH = "strength"  # Weight & reps
    CARDIO = "cardio"  # Distance & time


class RecordType(str, Enum):
    """Personal record metric."""

    MAX_WEIGHT = "max_weight"  # Heaviest completed set
    BEST_VOLUME = "best_volume"  # Session volume (weight × reps)
    CARDIO_TIME = "cardio_time"  # Fastest time for a distance

    @property
    def higher_is_better(self) -> bool:
        return self is not RecordType.CARDIO_TIME


class Medal(str, Enum):
    """Podium position inside a bucket."""

    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"

    @property
    def rank(self) -> int:
        return _MEDAL_RANKS[self]

    @classmethod
    def for_rank(cls, rank: int) -> "Medal":
        """1 → gold, 2 → silver, 3 → bronze."""
        for medal, r in _MEDAL_RANKS.items():
            if r == rank:
                return medal
        raise ValueError(f"No medal for rank {rank}")


_MEDAL_RANKS = {Medal.GOLD: 1, Medal.SILVER: 2, Medal.BRONZE: 3}


class SessionStatus(str, Enum):
    """Calendar classification of a completed session."""

    EXCEEDED = "exceeded"  # Target beaten by the exceeded margin or more
    TARGET_MET = "target_met"
    PARTIAL = "partial"
