from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.attendance_engine.attendance_engine.attendance.events import EventDispatcher
from src.attendance_engine.attendance_engine.attendance.service import AttendanceService
from src.attendance_engine.attendance_engine.container import Container, wire_events
from src.attendance_engine.attendance_engine.core.enums import LocationType, Role
from src.attendance_engine.attendance_engine.corrections.service import TimeCorrectionService
from src.attendance_engine.attendance_engine.leaves.service import LeaveService
from src.attendance_engine.attendance_engine.summary.calculator.standard_calculator import StandardWorkTimeCalculator
from src.attendance_engine.attendance_engine.summary.service import SummaryService

from tests.support import (
    CLIENT_SITE,
    OFFICE,
    CountingTransaction,
    FixedClock,
    InMemoryAttendanceRepository,
    InMemoryCorrectionRepository,
    InMemoryEmployeeDirectory,
    InMemoryLeaveRepository,
    InMemorySiteDirectory,
    InMemorySummaryRepository,
    SetHolidayCalendar,
    at,
    employee,
)


@pytest.fixture
def clock():
    # Wednesday morning
    return FixedClock(at(2025, 1, 15, 9, 0))


@pytest.fixture
def world(clock):
    """Services wired on in-memory repositories, the way build_container wires MySQL ones."""

    users = InMemoryEmployeeDirectory(
        employee(1),
        employee(2),
        employee(3, location_type=LocationType.CLIENT),
        employee(4, skip=True),
        employee(9, role=Role.MANAGER),
    )
    sites = InMemorySiteDirectory(OFFICE, CLIENT_SITE)
    holidays = SetHolidayCalendar(weekends=True)
    attendance_repo = InMemoryAttendanceRepository()
    summary_repo = InMemorySummaryRepository()
    corrections_repo = InMemoryCorrectionRepository()
    leaves_repo = InMemoryLeaveRepository()
    tx = CountingTransaction()
    events = EventDispatcher()

    attendance = AttendanceService(attendance_repo, users, sites, clock=clock, events=events, transaction=tx)
    summary = SummaryService(
        summary_repo,
        attendance_repo,
        calculator=StandardWorkTimeCalculator(holidays),
        clock=clock,
        transaction=tx,
    )
    corrections = TimeCorrectionService(corrections_repo, attendance_repo, users, clock=clock, transaction=tx)
    leaves = LeaveService(leaves_repo, users, clock=clock, transaction=tx)
    wire_events(events, summary)

    return SimpleNamespace(
        clock=clock,
        users=users,
        sites=sites,
        holidays=holidays,
        attendance_repo=attendance_repo,
        summary_repo=summary_repo,
        corrections_repo=corrections_repo,
        leaves_repo=leaves_repo,
        tx=tx,
        events=events,
        attendance=attendance,
        summary=summary,
        corrections=corrections,
        leaves=leaves,
        container=Container(
            clock=clock,
            events=events,
            attendance_service=attendance,
            summary_service=summary,
            correction_service=corrections,
            leave_service=leaves,
        ),
    )
