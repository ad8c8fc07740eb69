from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date
from typing import Callable, ContextManager, Optional, Sequence

from ..common.datetime_utils import Clock
from ..common.validators import parse_choice
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_MAX_LEAVE_DAYS
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import (
    AlreadyApproved,
    AlreadyRejected,
    InvalidDateRange,
    InvalidType,
    MissingField,
    NotOwnedByUser,
    NotPending,
    OverlappingRequest,
    PastDateNotAllowed,
    RangeTooLong,
    RecordNotFound,
    UserNotFound,
)
from ..users.repository import EmployeeDirectory
from .accrual import entitlement_days
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave request workflow: pending -> approved | rejected.

    No two pending/approved requests of one user may share a day. The
    check runs before the insert and again after it has been committed; a
    request that loses a concurrent race is removed again and reported as
    an overlap.
    """

    def __init__(
        self,
        leaves: LeaveRequestRepository,
        users: EmployeeDirectory,
        *,
        clock: Clock,
        transaction: Callable[[], ContextManager] | None = None,
        max_days: int = DEFAULT_MAX_LEAVE_DAYS,
    ):
        self._leaves = leaves
        self._users = users
        self._clock = clock
        self._transaction = transaction or nullcontext
        self._max_days = int(max_days)

    def _validate(self, leave_type, start_date: date | None, end_date: date | None) -> LeaveType:
        if leave_type is None or not str(leave_type).strip():
            raise MissingField("leave_type")
        kind = parse_choice(LeaveType, leave_type, InvalidType)

        if start_date is None:
            raise MissingField("start_date")
        if end_date is None:
            raise MissingField("end_date")
        if end_date < start_date:
            raise InvalidDateRange()
        if start_date < self._clock.now().date():
            raise PastDateNotAllowed()

        days = (end_date - start_date).days + 1
        if days > self._max_days:
            raise RangeTooLong(f"Leave period of {days} days exceeds the maximum of {self._max_days}")
        return kind

    def _ensure_no_overlap(self, user_id: int, start_date: date, end_date: date, exclude_id: int | None = None) -> None:
        clashes = self._leaves.find_overlapping(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            exclude_id=exclude_id,
        )
        if clashes:
            ids = ", ".join(str(c.request_id) for c in clashes)
            raise OverlappingRequest(f"Period {start_date}..{end_date} overlaps request(s) {ids}")

    def create(self, user_id: int, leave_type, start_date: date, end_date: date, reason: str = "") -> LeaveRequest:
        user_id = int(user_id)
        logger.info(
            "Leave request started: user_id=%s type=%s start=%s end=%s", user_id, leave_type, start_date, end_date
        )

        with self._transaction():
            if not self._users.get_by_id(user_id):
                raise UserNotFound(user_id)
            kind = self._validate(leave_type, start_date, end_date)
            self._ensure_no_overlap(user_id, start_date, end_date)

            created = self._leaves.insert(
                user_id=user_id,
                leave_type=kind,
                start_date=start_date,
                end_date=end_date,
                reason=(reason or "").strip(),
                created_at=self._clock.now(),
            )

        # Re-check against rows committed concurrently.
        with self._transaction():
            clashes = self._leaves.find_overlapping(
                user_id=user_id,
                start_date=start_date,
                end_date=end_date,
                exclude_id=created.request_id,
            )
            if clashes:
                self._leaves.delete(created.request_id)

        if clashes:
            logger.warning("Leave request withdrawn after concurrent overlap: request_id=%s", created.request_id)
            raise OverlappingRequest()

        logger.info("Leave request created: request_id=%s days=%s", created.request_id, created.days)
        return created

    def _editable(self, request_id: int, user_id: int | None) -> LeaveRequest:
        existing = self._leaves.get_by_id(int(request_id))
        if not existing:
            raise RecordNotFound(f"Leave request not found: {request_id}")
        if user_id is not None and existing.user_id != int(user_id):
            raise NotOwnedByUser()
        if existing.status == RequestStatus.APPROVED:
            raise AlreadyApproved()
        if existing.status == RequestStatus.REJECTED:
            raise AlreadyRejected()
        return existing

    def update(
        self,
        request_id: int,
        leave_type,
        start_date: date,
        end_date: date,
        reason: str = "",
        user_id: int | None = None,
    ) -> LeaveRequest:
        logger.info("Leave update started: request_id=%s start=%s end=%s", request_id, start_date, end_date)

        with self._transaction():
            existing = self._editable(request_id, user_id)
            kind = self._validate(leave_type, start_date, end_date)
            self._ensure_no_overlap(existing.user_id, start_date, end_date, exclude_id=existing.request_id)

            if not self._leaves.update(
                request_id=existing.request_id,
                leave_type=kind,
                start_date=start_date,
                end_date=end_date,
                reason=(reason or "").strip(),
                updated_at=self._clock.now(),
            ):
                raise NotPending()
            updated = self._leaves.get_by_id(existing.request_id)

        logger.info("Leave update finished: request_id=%s days=%s", updated.request_id, updated.days)
        return updated

    def delete(self, request_id: int, user_id: int | None = None) -> None:
        logger.info("Leave delete started: request_id=%s", request_id)
        with self._transaction():
            existing = self._editable(request_id, user_id)
            self._leaves.delete(existing.request_id)
        logger.info("Leave delete finished: request_id=%s", request_id)

    def approve(self, request_id: int, approver_id: int) -> LeaveRequest:
        return self._decide(int(request_id), int(approver_id), RequestStatus.APPROVED)

    def reject(self, request_id: int, approver_id: int) -> LeaveRequest:
        return self._decide(int(request_id), int(approver_id), RequestStatus.REJECTED)

    def _decide(self, request_id: int, approver_id: int, status: RequestStatus) -> LeaveRequest:
        logger.info("Leave decision started: request_id=%s approver_id=%s status=%s", request_id, approver_id, status.value)

        with self._transaction():
            existing = self._leaves.get_by_id(request_id)
            if not existing:
                raise RecordNotFound(f"Leave request not found: {request_id}")
            if existing.status.is_terminal:
                raise NotPending(f"Leave request is already {existing.status.value}")
            if not self._users.get_by_id(approver_id):
                raise UserNotFound(approver_id)

            if not self._leaves.decide(
                request_id=request_id,
                status=status,
                approver_id=approver_id,
                approved_at=self._clock.now(),
            ):
                raise NotPending()
            decided = self._leaves.get_by_id(request_id)

        logger.info("Leave decided: request_id=%s status=%s", request_id, status.value)
        return decided

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        return self._leaves.get_by_id(int(request_id))

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(int(user_id), limit=int(limit))

    def list_pending(self, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[LeaveRequest]:
        return self._leaves.list_by_status(RequestStatus.PENDING, limit=int(limit))

    def approved_days(
        self,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: LeaveType | None = None,
    ) -> int:
        return self._leaves.approved_days(
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
        )

    def remaining_leave_days(self, user_id: int, as_of: date | None = None) -> int:
        """Paid-leave entitlement minus approved paid days in the calendar year of ``as_of``."""

        user_id = int(user_id)
        as_of = as_of or self._clock.now().date()
        employee = self._users.get_by_id(user_id)
        if not employee:
            raise UserNotFound(user_id)

        granted = entitlement_days(employee.hire_date, as_of)
        used = self.approved_days(user_id, date(as_of.year, 1, 1), date(as_of.year, 12, 31), LeaveType.PAID)
        return max(granted - used, 0)
