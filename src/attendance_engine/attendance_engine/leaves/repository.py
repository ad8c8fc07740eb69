from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def insert(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
        created_at: datetime,
    ) -> LeaveRequest:
        raise NotImplementedError

    def update(
        self,
        *,
        request_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
        updated_at: datetime,
    ) -> bool:
        """Rewrite a pending request; False if it is no longer pending."""

        raise NotImplementedError

    def delete(self, request_id: int) -> bool:
        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        """Pending or approved requests of the user sharing at least one day with the range."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approver_id: int,
        approved_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_by_status(self, status: RequestStatus, *, limit: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def approved_days(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: Optional[LeaveType] = None,
    ) -> int:
        """Approved leave days of the user falling inside [start_date, end_date]."""

        raise NotImplementedError
