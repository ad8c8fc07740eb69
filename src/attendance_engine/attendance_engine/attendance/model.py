from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import PunchType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one punch (clock-in or clock-out).

    Immutable once written; only ``processed`` is flipped later by the
    summary reconciliation batch.
    """

    record_id: int
    user_id: int
    punch_type: PunchType
    timestamp: datetime
    latitude: float
    longitude: float
    processed: bool = False

    @property
    def work_date(self) -> date:
        return self.timestamp.date()


@dataclass(frozen=True)
class ClockedOut:
    """Event published after a clock-out has been recorded."""

    user_id: int
    work_date: date
    record_id: int
