from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import DayStatus, OvertimeStatus, SummaryType

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class WorkHours:
    """Hour figures, each a non-negative Decimal with 2 decimal places."""

    total: Decimal = ZERO
    overtime: Decimal = ZERO
    late_night: Decimal = ZERO
    holiday: Decimal = ZERO

    def __add__(self, other: "WorkHours") -> "WorkHours":
        return WorkHours(
            total=self.total + other.total,
            overtime=self.overtime + other.overtime,
            late_night=self.late_night + other.late_night,
            holiday=self.holiday + other.holiday,
        )


@dataclass(frozen=True)
class AttendanceSummary:
    """Persisted summary row, unique per (user_id, target_date, summary_type)."""

    summary_id: int
    user_id: int
    target_date: date
    summary_type: SummaryType
    total_hours: Decimal
    overtime_hours: Decimal
    late_night_hours: Decimal
    holiday_hours: Decimal
    created_at: datetime

    @property
    def hours(self) -> WorkHours:
        return WorkHours(self.total_hours, self.overtime_hours, self.late_night_hours, self.holiday_hours)


@dataclass(frozen=True)
class DailySummary:
    """Read-model for one user-day, including days that are not finished."""

    user_id: int
    work_date: date
    status: DayStatus
    total_hours: Decimal
    overtime_hours: Decimal
    late_night_hours: Decimal
    holiday_hours: Decimal
    clock_in: Optional[AttendanceRecord] = None
    clock_out: Optional[AttendanceRecord] = None


@dataclass(frozen=True)
class OvertimeAssessment:
    user_id: int
    month_start: date
    overtime_hours: Decimal
    late_night_hours: Decimal
    holiday_hours: Decimal
    status: OvertimeStatus
