"""In-memory fakes shared by the test modules."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from src.attendance_engine.attendance_engine.attendance.model import AttendanceRecord
from src.attendance_engine.attendance_engine.core.enums import LocationType, RequestStatus, Role
from src.attendance_engine.attendance_engine.core.exceptions import UniqueViolation
from src.attendance_engine.attendance_engine.corrections.model import TimeCorrection
from src.attendance_engine.attendance_engine.leaves.model import LeaveRequest
from src.attendance_engine.attendance_engine.sites.model import WorkLocation
from src.attendance_engine.attendance_engine.summary.model import AttendanceSummary
from src.attendance_engine.attendance_engine.users.model import Employee

TOKYO = ZoneInfo("Asia/Tokyo")

# Roughly 1 metre expressed in degrees of latitude.
DEG_PER_METER = 1 / 111_195

OFFICE = WorkLocation(
    location_id=1,
    name="HQ",
    location_type=LocationType.OFFICE,
    latitude=35.681236,
    longitude=139.767125,
    radius_meters=200,
)
CLIENT_SITE = WorkLocation(
    location_id=2,
    name="Client A",
    location_type=LocationType.CLIENT,
    latitude=34.702485,
    longitude=135.495951,
    radius_meters=300,
)


def at(year, month, day, hour=0, minute=0, second=0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=TOKYO)


def north_of(site: WorkLocation, meters: float) -> tuple[float, float]:
    return site.latitude + meters * DEG_PER_METER, site.longitude


class FixedClock:
    def __init__(self, now: datetime, tz=TOKYO):
        self._now = now
        self._tz = tz

    @property
    def tz(self):
        return self._tz

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now


class CountingTransaction:
    """Stand-in unit of work: counts how often a block was opened."""

    def __init__(self):
        self.opened = 0

    @contextmanager
    def __call__(self):
        self.opened += 1
        yield


def employee(user_id=1, *, location_type=LocationType.OFFICE, hire_date=date(2018, 1, 1), role=Role.EMPLOYEE, skip=False):
    return Employee(
        user_id=user_id,
        full_name=f"User {user_id}",
        location_type=location_type,
        hire_date=hire_date,
        role=role,
        skip_location_check=skip,
    )


class InMemoryEmployeeDirectory:
    def __init__(self, *employees: Employee):
        self._by_id = {e.user_id: e for e in employees}

    def add(self, e: Employee) -> None:
        self._by_id[e.user_id] = e

    def get_by_id(self, user_id):
        return self._by_id.get(int(user_id))


class InMemorySiteDirectory:
    def __init__(self, *sites: WorkLocation):
        self._sites = list(sites)

    def sites_for_type(self, location_type):
        return [s for s in self._sites if s.location_type == location_type]


class SetHolidayCalendar:
    def __init__(self, *days: date, weekends: bool = False):
        self._days = set(days)
        self._weekends = weekends

    def is_holiday(self, day: date) -> bool:
        if self._weekends and day.weekday() >= 5:
            return True
        return day in self._days


class InMemoryAttendanceRepository:
    def __init__(self):
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}

    def get_by_id(self, record_id):
        return self.records.get(int(record_id))

    def list_for_user_and_date(self, user_id, work_date):
        rows = [r for r in self.records.values() if r.user_id == int(user_id) and r.work_date == work_date]
        return sorted(rows, key=lambda r: r.timestamp)

    def list_recent_by_type(self, *, user_id, punch_type, since):
        return [
            r
            for r in self.records.values()
            if r.user_id == int(user_id) and r.punch_type == punch_type and r.timestamp >= since
        ]

    def list_for_user_in_range(self, *, user_id, start_date, end_date):
        rows = [r for r in self.records.values() if r.user_id == int(user_id) and start_date <= r.work_date <= end_date]
        return sorted(rows, key=lambda r: r.timestamp)

    def get_latest_for_user(self, user_id):
        rows = [r for r in self.records.values() if r.user_id == int(user_id)]
        return max(rows, key=lambda r: r.timestamp) if rows else None

    def insert(self, *, user_id, punch_type, timestamp, latitude, longitude):
        for r in self.records.values():
            if r.user_id == int(user_id) and r.punch_type == punch_type and r.work_date == timestamp.date():
                raise UniqueViolation("Duplicate entry for uq_attendance_user_day_type")
        record = AttendanceRecord(
            record_id=self._next_id,
            user_id=int(user_id),
            punch_type=punch_type,
            timestamp=timestamp,
            latitude=float(latitude),
            longitude=float(longitude),
        )
        self.records[record.record_id] = record
        self._next_id += 1
        return record

    def list_unprocessed(self, *, limit):
        rows = sorted((r for r in self.records.values() if not r.processed), key=lambda r: r.record_id)
        return rows[: int(limit)]

    def mark_processed(self, record_ids):
        count = 0
        for rid in record_ids:
            r = self.records.get(int(rid))
            if r and not r.processed:
                self.records[r.record_id] = replace(r, processed=True)
                count += 1
        return count


class InMemorySummaryRepository:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[tuple, AttendanceSummary] = {}

    def get(self, *, user_id, target_date, summary_type):
        return self.rows.get((int(user_id), target_date, summary_type))

    def upsert(self, *, user_id, target_date, summary_type, hours, created_at):
        key = (int(user_id), target_date, summary_type)
        existing = self.rows.get(key)
        row = AttendanceSummary(
            summary_id=existing.summary_id if existing else self._next_id,
            user_id=int(user_id),
            target_date=target_date,
            summary_type=summary_type,
            total_hours=hours.total,
            overtime_hours=hours.overtime,
            late_night_hours=hours.late_night,
            holiday_hours=hours.holiday,
            created_at=existing.created_at if existing else created_at,
        )
        if not existing:
            self._next_id += 1
        self.rows[key] = row
        return row

    def list_for_user_in_range(self, *, user_id, summary_type, start_date, end_date):
        rows = [
            r
            for (uid, day, kind), r in self.rows.items()
            if uid == int(user_id) and kind == summary_type and start_date <= day <= end_date
        ]
        return sorted(rows, key=lambda r: r.target_date)


class InMemoryCorrectionRepository:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, TimeCorrection] = {}

    def get_by_id(self, correction_id):
        return self.rows.get(int(correction_id))

    def insert(self, **fields):
        row = TimeCorrection(correction_id=self._next_id, status=RequestStatus.PENDING, **fields)
        self.rows[row.correction_id] = row
        self._next_id += 1
        return row

    def decide(self, *, correction_id, status, approver_id, approved_at):
        row = self.rows.get(int(correction_id))
        if not row or row.status != RequestStatus.PENDING:
            return False
        self.rows[row.correction_id] = replace(row, status=status, approver_id=approver_id, approved_at=approved_at)
        return True

    def list_for_user(self, user_id, *, limit):
        return [r for r in self.rows.values() if r.user_id == int(user_id)][:limit]

    def list_by_status(self, status, *, limit):
        return [r for r in self.rows.values() if r.status == status][:limit]

    def count_by_status(self, status, *, user_id=None):
        return sum(1 for r in self.rows.values() if r.status == status and (user_id is None or r.user_id == user_id))


class InMemoryLeaveRepository:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, LeaveRequest] = {}

    def get_by_id(self, request_id):
        return self.rows.get(int(request_id))

    def insert(self, *, user_id, leave_type, start_date, end_date, reason, created_at):
        row = LeaveRequest(
            request_id=self._next_id,
            user_id=int(user_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
        )
        self.rows[row.request_id] = row
        self._next_id += 1
        return row

    def update(self, *, request_id, leave_type, start_date, end_date, reason, updated_at):
        row = self.rows.get(int(request_id))
        if not row or row.status != RequestStatus.PENDING:
            return False
        self.rows[row.request_id] = replace(
            row,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            updated_at=updated_at,
        )
        return True

    def delete(self, request_id):
        return self.rows.pop(int(request_id), None) is not None

    def find_overlapping(self, *, user_id, start_date, end_date, exclude_id=None):
        return [
            r
            for r in self.rows.values()
            if r.user_id == int(user_id)
            and r.status in {RequestStatus.PENDING, RequestStatus.APPROVED}
            and r.request_id != exclude_id
            and r.overlaps(start_date, end_date)
        ]

    def decide(self, *, request_id, status, approver_id, approved_at):
        row = self.rows.get(int(request_id))
        if not row or row.status != RequestStatus.PENDING:
            return False
        self.rows[row.request_id] = replace(row, status=status, approver_id=approver_id, approved_at=approved_at)
        return True

    def list_for_user(self, user_id, *, limit):
        return [r for r in self.rows.values() if r.user_id == int(user_id)][:limit]

    def list_by_status(self, status, *, limit):
        return [r for r in self.rows.values() if r.status == status][:limit]

    def approved_days(self, *, user_id, start_date, end_date, leave_type=None):
        total = 0
        for r in self.rows.values():
            if r.user_id != int(user_id) or r.status != RequestStatus.APPROVED:
                continue
            if leave_type is not None and r.leave_type != leave_type:
                continue
            lo = max(r.start_date, start_date)
            hi = min(r.end_date, end_date)
            if lo <= hi:
                total += (hi - lo).days + 1
        return total
