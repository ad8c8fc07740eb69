from __future__ import annotations

import logging
from collections import OrderedDict
from contextlib import nullcontext
from datetime import date
from typing import Callable, ContextManager, Dict, List, Optional, Sequence, Tuple

from ..attendance.model import AttendanceRecord, ClockedOut
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, month_bounds
from ..core.constants import DEFAULT_RECONCILE_BATCH_SIZE
from ..core.enums import DayStatus, PunchType, SummaryType
from .calculator.base import WorkTimeCalculator
from .model import AttendanceSummary, DailySummary, OvertimeAssessment, WorkHours
from .overtime import OvertimeThresholds
from .repository import SummaryRepository

logger = logging.getLogger(__name__)


def pair_punches(records: Sequence[AttendanceRecord]) -> Tuple[Optional[AttendanceRecord], Optional[AttendanceRecord]]:
    """Earliest clock-in of the day and the earliest clock-out after it."""

    ins = sorted((r for r in records if r.punch_type == PunchType.IN), key=lambda r: r.timestamp)
    if not ins:
        return None, None
    clock_in = ins[0]
    outs = sorted(
        (r for r in records if r.punch_type == PunchType.OUT and r.timestamp > clock_in.timestamp),
        key=lambda r: r.timestamp,
    )
    return clock_in, (outs[0] if outs else None)


class SummaryService:
    def __init__(
        self,
        summaries: SummaryRepository,
        attendance: AttendanceRepository,
        *,
        calculator: WorkTimeCalculator,
        clock: Clock,
        thresholds: OvertimeThresholds | None = None,
        transaction: Callable[[], ContextManager] | None = None,
        batch_size: int = DEFAULT_RECONCILE_BATCH_SIZE,
    ):
        self._summaries = summaries
        self._attendance = attendance
        self._calculator = calculator
        self._clock = clock
        self._thresholds = thresholds or OvertimeThresholds()
        self._transaction = transaction or nullcontext
        self._batch_size = int(batch_size)

    def daily_summary(self, user_id: int, work_date: date) -> DailySummary:
        """Derive one user-day from its punches; completed days are persisted."""

        user_id = int(user_id)
        records = self._attendance.list_for_user_and_date(user_id, work_date)
        clock_in, clock_out = pair_punches(records)

        if clock_in is None:
            return self._daily(user_id, work_date, DayStatus.NONE, WorkHours())
        if clock_out is None:
            return self._daily(user_id, work_date, DayStatus.IN_PROGRESS, WorkHours(), clock_in=clock_in)

        hours = self._calculator.calculate(clock_in.timestamp, clock_out.timestamp)
        self._summaries.upsert(
            user_id=user_id,
            target_date=work_date,
            summary_type=SummaryType.DAILY,
            hours=hours,
            created_at=self._clock.now(),
        )
        logger.info(
            "Daily summary stored: user_id=%s date=%s total=%s overtime=%s late_night=%s holiday=%s",
            user_id,
            work_date,
            hours.total,
            hours.overtime,
            hours.late_night,
            hours.holiday,
        )
        return self._daily(user_id, work_date, DayStatus.COMPLETED, hours, clock_in=clock_in, clock_out=clock_out)

    @staticmethod
    def _daily(
        user_id: int,
        work_date: date,
        status: DayStatus,
        hours: WorkHours,
        *,
        clock_in: AttendanceRecord | None = None,
        clock_out: AttendanceRecord | None = None,
    ) -> DailySummary:
        return DailySummary(
            user_id=user_id,
            work_date=work_date,
            status=status,
            total_hours=hours.total,
            overtime_hours=hours.overtime,
            late_night_hours=hours.late_night,
            holiday_hours=hours.holiday,
            clock_in=clock_in,
            clock_out=clock_out,
        )

    def monthly_summary(self, user_id: int, year: int, month: int) -> AttendanceSummary:
        """Sum the month's stored daily rows into the monthly row (keyed to day 1)."""

        user_id = int(user_id)
        start, end = month_bounds(int(year), int(month))
        with self._transaction():
            dailies = self._summaries.list_for_user_in_range(
                user_id=user_id,
                summary_type=SummaryType.DAILY,
                start_date=start,
                end_date=end,
            )
            hours = sum((d.hours for d in dailies), WorkHours())
            summary = self._summaries.upsert(
                user_id=user_id,
                target_date=start,
                summary_type=SummaryType.MONTHLY,
                hours=hours,
                created_at=self._clock.now(),
            )
        logger.info("Monthly summary stored: user_id=%s month=%s days=%s total=%s", user_id, start, len(dailies), hours.total)
        return summary

    def daily_rows(self, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceSummary]:
        return self._summaries.list_for_user_in_range(
            user_id=int(user_id),
            summary_type=SummaryType.DAILY,
            start_date=start_date,
            end_date=end_date,
        )

    def assess_overtime(self, user_id: int, year: int, month: int) -> OvertimeAssessment:
        summary = self.monthly_summary(user_id, year, month)
        hours = summary.hours
        status = self._thresholds.classify(hours)
        logger.info("Overtime assessed: user_id=%s month=%s status=%s", summary.user_id, summary.target_date, status.value)
        return OvertimeAssessment(
            user_id=summary.user_id,
            month_start=summary.target_date,
            overtime_hours=hours.overtime,
            late_night_hours=hours.late_night,
            holiday_hours=hours.holiday,
            status=status,
        )

    def on_clocked_out(self, event: ClockedOut) -> None:
        """Event handler: refresh the day that just closed, then its month."""

        with self._transaction():
            daily = self.daily_summary(event.user_id, event.work_date)
            touched = [r.record_id for r in (daily.clock_in, daily.clock_out) if r is not None]
            if touched:
                self._attendance.mark_processed(touched)
        self.monthly_summary(event.user_id, event.work_date.year, event.work_date.month)

    def reconcile_unprocessed(self, limit: int | None = None) -> int:
        """Recompute every user-day that still has unprocessed punches.

        Each user-day runs in its own unit of work; the affected months are
        re-summed afterwards. Returns the number of user-days processed.
        """

        records = self._attendance.list_unprocessed(limit=int(limit or self._batch_size))
        groups: Dict[Tuple[int, date], List[int]] = OrderedDict()
        for r in records:
            groups.setdefault((r.user_id, r.work_date), []).append(r.record_id)

        logger.info("Reconciliation started: punches=%s user_days=%s", len(records), len(groups))

        months = OrderedDict()
        for (user_id, work_date), record_ids in groups.items():
            with self._transaction():
                self.daily_summary(user_id, work_date)
                self._attendance.mark_processed(record_ids)
            months[(user_id, work_date.year, work_date.month)] = True

        for user_id, year, month in months:
            self.monthly_summary(user_id, year, month)

        logger.info("Reconciliation finished: user_days=%s months=%s", len(groups), len(months))
        return len(groups)
