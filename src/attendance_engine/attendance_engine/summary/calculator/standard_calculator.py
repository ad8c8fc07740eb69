from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from ...common.datetime_utils import iter_dates, whole_minutes
from ...core.constants import DEFAULT_STANDARD_WORK_HOURS, HOURS_QUANTUM, LATE_NIGHT_END, LATE_NIGHT_START
from ...holidays.repository import HolidayCalendar
from ..model import ZERO, WorkHours
from .base import WorkTimeCalculator


def hours_from_minutes(minutes: int) -> Decimal:
    """minutes / 60 rounded half-up to 2 decimals."""
    return (Decimal(int(minutes)) / Decimal(60)).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def _overlap_seconds(start: datetime, end: datetime, window_start: datetime, window_end: datetime) -> float:
    # Compare in UTC so DST shifts inside the interval are counted correctly.
    lo = max(start, window_start).astimezone(timezone.utc)
    hi = min(end, window_end).astimezone(timezone.utc)
    return max((hi - lo).total_seconds(), 0.0)


class StandardWorkTimeCalculator(WorkTimeCalculator):
    """Standard rule set.

    total: whole minutes between punches.
    overtime: anything above the standard day (8h by default).
    late night: overlap with 22:00-05:00 on every night the interval touches.
    holiday: overlap with calendar days the holiday calendar marks.
    """

    def __init__(self, holidays: HolidayCalendar, *, standard_hours: Decimal = DEFAULT_STANDARD_WORK_HOURS):
        self._holidays = holidays
        self._standard_hours = Decimal(standard_hours)

    def calculate(self, clock_in: datetime, clock_out: datetime) -> WorkHours:
        if clock_out <= clock_in:
            return WorkHours()

        total = hours_from_minutes(self._elapsed_minutes(clock_in, clock_out))
        overtime = max(total - self._standard_hours, ZERO).quantize(HOURS_QUANTUM)

        return WorkHours(
            total=total,
            overtime=overtime,
            late_night=hours_from_minutes(self.late_night_minutes(clock_in, clock_out)),
            holiday=hours_from_minutes(self.holiday_minutes(clock_in, clock_out)),
        )

    @staticmethod
    def _elapsed_minutes(start: datetime, end: datetime) -> int:
        return whole_minutes(end.astimezone(timezone.utc) - start.astimezone(timezone.utc))

    def late_night_minutes(self, start: datetime, end: datetime) -> int:
        tz = start.tzinfo
        seconds = 0.0
        # The night that began the day before clock-in can still cover its early hours.
        for day in iter_dates(start.date() - timedelta(days=1), end.date()):
            window_start = datetime.combine(day, LATE_NIGHT_START, tzinfo=tz)
            window_end = datetime.combine(day + timedelta(days=1), LATE_NIGHT_END, tzinfo=tz)
            seconds += _overlap_seconds(start, end, window_start, window_end)
        return int(seconds // 60)

    def holiday_minutes(self, start: datetime, end: datetime) -> int:
        tz = start.tzinfo
        seconds = 0.0
        for day in iter_dates(start.date(), end.date()):
            if not self._holidays.is_holiday(day):
                continue
            window_start = datetime.combine(day, datetime.min.time(), tzinfo=tz)
            window_end = datetime.combine(day + timedelta(days=1), datetime.min.time(), tzinfo=tz)
            seconds += _overlap_seconds(start, end, window_start, window_end)
        return int(seconds // 60)
