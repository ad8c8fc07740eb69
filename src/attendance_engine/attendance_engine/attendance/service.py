from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date, datetime
from typing import Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import Clock
from ..core.enums import AttendanceStatus, PunchType
from ..core.exceptions import AlreadyClockedIn, AlreadyClockedOut, OutOfGeofence, UniqueViolation, UserNotFound
from ..geo.validator import GeoPoint, first_matching_site, validate_coordinates
from ..sites.repository import SiteDirectory
from ..users.model import Employee
from ..users.repository import EmployeeDirectory
from .events import EventDispatcher
from .guard import PunchGuard
from .model import AttendanceRecord, ClockedOut
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Records punches: coordinates, geofence, sequencing, then persistence.

    A successful clock-out publishes ``ClockedOut`` on the event dispatcher
    once the punch is committed; summary recomputation hangs off that event.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: EmployeeDirectory,
        sites: SiteDirectory,
        *,
        clock: Clock,
        guard: PunchGuard | None = None,
        events: EventDispatcher | None = None,
        transaction: Callable[[], ContextManager] | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._sites = sites
        self._clock = clock
        self._guard = guard or PunchGuard()
        self._events = events or EventDispatcher()
        self._transaction = transaction or nullcontext

    def clock_in(self, user_id: int, latitude, longitude, *, now: datetime | None = None) -> AttendanceRecord:
        return self._punch(PunchType.IN, int(user_id), latitude, longitude, now)

    def clock_out(self, user_id: int, latitude, longitude, *, now: datetime | None = None) -> AttendanceRecord:
        record = self._punch(PunchType.OUT, int(user_id), latitude, longitude, now)
        self._events.publish(ClockedOut(user_id=record.user_id, work_date=record.work_date, record_id=record.record_id))
        return record

    def _now(self, now: datetime | None) -> datetime:
        now = now or self._clock.now()
        if now.tzinfo is None:
            return now.replace(tzinfo=self._clock.tz)
        return now.astimezone(self._clock.tz)

    def _punch(self, punch_type: PunchType, user_id: int, latitude, longitude, now: datetime | None) -> AttendanceRecord:
        now = self._now(now)
        logger.info("Punch started: user_id=%s type=%s lat=%s lon=%s", user_id, punch_type.value, latitude, longitude)

        point = validate_coordinates(latitude, longitude)

        with self._transaction():
            employee = self._users.get_by_id(user_id)
            if not employee:
                raise UserNotFound(user_id)

            self._check_location(employee, point)

            today = self._attendance.list_for_user_and_date(user_id, now.date())
            recent = self._attendance.list_recent_by_type(
                user_id=user_id,
                punch_type=punch_type,
                since=now - self._guard.cooldown,
            )
            self._guard.check(punch_type=punch_type, now=now, today=today, recent=recent)

            try:
                record = self._attendance.insert(
                    user_id=user_id,
                    punch_type=punch_type,
                    timestamp=now,
                    latitude=point.latitude,
                    longitude=point.longitude,
                )
            except UniqueViolation:
                # Lost a concurrent punch race for the same user-day.
                logger.warning("Concurrent punch rejected: user_id=%s type=%s", user_id, punch_type.value)
                raise AlreadyClockedIn() if punch_type == PunchType.IN else AlreadyClockedOut()

        logger.info("Punch recorded: record_id=%s user_id=%s type=%s", record.record_id, user_id, punch_type.value)
        return record

    def _check_location(self, employee: Employee, point: GeoPoint) -> None:
        if employee.skip_location_check:
            logger.info("Location check skipped: user_id=%s", employee.user_id)
            return

        sites = self._sites.sites_for_type(employee.location_type)
        site = first_matching_site(point, sites)
        if site is None:
            raise OutOfGeofence(
                f"Punch at ({point.latitude}, {point.longitude}) is outside every {employee.location_type.value} site"
            )
        logger.debug("Punch matched site: user_id=%s site=%s", employee.user_id, site.name)

    def current_status(self, user_id: int, *, now: datetime | None = None) -> AttendanceStatus:
        today = self._attendance.list_for_user_and_date(int(user_id), self._now(now).date())
        if not today:
            return AttendanceStatus.NONE
        latest = max(today, key=lambda r: r.timestamp)
        return AttendanceStatus(latest.punch_type.value)

    def today_records(self, user_id: int, *, now: datetime | None = None) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user_and_date(int(user_id), self._now(now).date())

    def records_for_date(self, user_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user_and_date(int(user_id), work_date)

    def records_in_range(self, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user_in_range(user_id=int(user_id), start_date=start_date, end_date=end_date)

    def latest_record(self, user_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_latest_for_user(int(user_id))
