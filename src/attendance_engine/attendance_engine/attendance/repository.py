from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchType
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        """Punches of one user-day, oldest first."""

        raise NotImplementedError

    def list_recent_by_type(
        self,
        *,
        user_id: int,
        punch_type: PunchType,
        since: datetime,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_in_range(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def insert(
        self,
        *,
        user_id: int,
        punch_type: PunchType,
        timestamp: datetime,
        latitude: float,
        longitude: float,
    ) -> AttendanceRecord:
        """Persist a punch.

        Must raise UniqueViolation when the user already has a punch of the
        same type on the same work date.
        """

        raise NotImplementedError

    def list_unprocessed(self, *, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def mark_processed(self, record_ids: Sequence[int]) -> int:
        raise NotImplementedError
