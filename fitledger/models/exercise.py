"""Exercise model - stable exercise identity that owns its personal record podiums."""

from __future__ import annotations

import uuid

from sqlalchemy import Enum, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitledger.core.enums import MetricKind
from fitledger.db.base import Base


class Exercise(Base):
    """Canonical exercise (e.g. "Bench Press", "Rowing"). Deleting it deletes its records."""

    __tablename__ = "exercises"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    metric_kind: Mapped[MetricKind] = mapped_column(
        Enum(MetricKind), default=MetricKind.STRENGTH, nullable=False
    )

    records: Mapped[list["PersonalRecord"]] = relationship(
        "PersonalRecord",
        back_populates="exercise",
        cascade="all",
        passive_deletes=True,
    )
