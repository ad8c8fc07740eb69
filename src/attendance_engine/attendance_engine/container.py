from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from functools import partial
from typing import Any, Optional

from .attendance.events import EventDispatcher
from .attendance.guard import PunchGuard
from .attendance.model import ClockedOut
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, SystemClock
from .core import constants
from .corrections.mysql_correction_repository import MySQLTimeCorrectionRepository
from .corrections.service import TimeCorrectionService
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_base import transaction
from .holidays.mysql_holiday_repository import MySQLHolidayCalendar
from .leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from .leaves.service import LeaveService
from .sites.mysql_site_repository import MySQLSiteDirectory
from .summary.calculator.standard_calculator import StandardWorkTimeCalculator
from .summary.mysql_summary_repository import MySQLSummaryRepository
from .summary.overtime import OvertimeThresholds
from .summary.service import SummaryService
from .users.mysql_user_repository import MySQLEmployeeDirectory


@dataclass(frozen=True)
class Container:
    clock: Clock
    events: EventDispatcher

    attendance_service: AttendanceService
    summary_service: SummaryService
    correction_service: TimeCorrectionService
    leave_service: LeaveService

    conn: Optional[DatabaseConnection] = None


def wire_events(events: EventDispatcher, summary_service: SummaryService) -> None:
    events.subscribe(ClockedOut, summary_service.on_clocked_out)


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    """Wire MySQL repositories and services from a settings module."""

    def setting(name: str, default):
        return getattr(settings, name, default) if settings is not None else default

    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    clock = SystemClock(setting("TIMEZONE", constants.DEFAULT_TIMEZONE))
    unit_of_work = partial(transaction, conn)

    users = MySQLEmployeeDirectory(conn)
    sites = MySQLSiteDirectory(conn)
    holidays = MySQLHolidayCalendar(conn, weekends_are_holidays=bool(setting("WEEKENDS_ARE_HOLIDAYS", True)))
    attendance_repo = MySQLAttendanceRepository(conn, tz=clock.tz)
    summary_repo = MySQLSummaryRepository(conn, tz=clock.tz)
    corrections_repo = MySQLTimeCorrectionRepository(conn, tz=clock.tz)
    leaves_repo = MySQLLeaveRequestRepository(conn, tz=clock.tz)

    events = EventDispatcher()
    attendance_service = AttendanceService(
        attendance_repo,
        users,
        sites,
        clock=clock,
        guard=PunchGuard(
            cooldown=timedelta(minutes=int(setting("PUNCH_COOLDOWN_MINUTES", constants.DEFAULT_PUNCH_COOLDOWN_MINUTES)))
        ),
        events=events,
        transaction=unit_of_work,
    )
    summary_service = SummaryService(
        summary_repo,
        attendance_repo,
        calculator=StandardWorkTimeCalculator(
            holidays,
            standard_hours=Decimal(str(setting("STANDARD_WORK_HOURS", constants.DEFAULT_STANDARD_WORK_HOURS))),
        ),
        clock=clock,
        thresholds=OvertimeThresholds(
            overtime=Decimal(str(setting("OVERTIME_THRESHOLD_HOURS", constants.DEFAULT_OVERTIME_THRESHOLD_HOURS))),
            late_night=Decimal(str(setting("LATE_NIGHT_THRESHOLD_HOURS", constants.DEFAULT_LATE_NIGHT_THRESHOLD_HOURS))),
            holiday=Decimal(str(setting("HOLIDAY_THRESHOLD_HOURS", constants.DEFAULT_HOLIDAY_THRESHOLD_HOURS))),
        ),
        transaction=unit_of_work,
    )
    correction_service = TimeCorrectionService(
        corrections_repo,
        attendance_repo,
        users,
        clock=clock,
        transaction=unit_of_work,
    )
    leave_service = LeaveService(
        leaves_repo,
        users,
        clock=clock,
        transaction=unit_of_work,
        max_days=int(setting("MAX_LEAVE_DAYS", constants.DEFAULT_MAX_LEAVE_DAYS)),
    )
    wire_events(events, summary_service)

    return Container(
        clock=clock,
        events=events,
        attendance_service=attendance_service,
        summary_service=summary_service,
        correction_service=correction_service,
        leave_service=leave_service,
        conn=conn,
    )
