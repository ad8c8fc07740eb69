from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.constants import (
    DEFAULT_HOLIDAY_THRESHOLD_HOURS,
    DEFAULT_LATE_NIGHT_THRESHOLD_HOURS,
    DEFAULT_OVERTIME_THRESHOLD_HOURS,
)
from ..core.enums import OvertimeStatus
from .model import ZERO, WorkHours


@dataclass(frozen=True)
class OvertimeThresholds:
    """Monthly limits above which extra hours need a manager's review."""

    overtime: Decimal = DEFAULT_OVERTIME_THRESHOLD_HOURS
    late_night: Decimal = DEFAULT_LATE_NIGHT_THRESHOLD_HOURS
    holiday: Decimal = DEFAULT_HOLIDAY_THRESHOLD_HOURS

    def classify(self, hours: WorkHours) -> OvertimeStatus:
        if hours.overtime > self.overtime or hours.late_night > self.late_night or hours.holiday > self.holiday:
            return OvertimeStatus.CONFIRMED
        if hours.overtime > ZERO or hours.late_night > ZERO or hours.holiday > ZERO:
            return OvertimeStatus.DRAFT
        return OvertimeStatus.APPROVED
