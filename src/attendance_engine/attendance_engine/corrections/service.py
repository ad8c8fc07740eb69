from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import datetime
from typing import Callable, ContextManager, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock
from ..common.validators import parse_choice, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import CorrectionType, PunchType, RequestStatus
from ..core.exceptions import InvalidRequestType, MissingField, NotOwnedByUser, NotPending, RecordNotFound, UserNotFound
from ..users.repository import EmployeeDirectory
from .model import TimeCorrection
from .repository import TimeCorrectionRepository

logger = logging.getLogger(__name__)


class TimeCorrectionService:
    """Approval workflow for punch corrections.

    Approval only records the decision; the referenced punch is left as it
    was written.
    """

    def __init__(
        self,
        corrections: TimeCorrectionRepository,
        attendance: AttendanceRepository,
        users: EmployeeDirectory,
        *,
        clock: Clock,
        transaction: Callable[[], ContextManager] | None = None,
    ):
        self._corrections = corrections
        self._attendance = attendance
        self._users = users
        self._clock = clock
        self._transaction = transaction or nullcontext

    def create(
        self,
        user_id: int,
        attendance_id: int,
        request_type,
        reason: str,
        requested_time: datetime | None = None,
        requested_type=None,
    ) -> TimeCorrection:
        user_id = int(user_id)
        logger.info("Correction request started: user_id=%s attendance_id=%s type=%s", user_id, attendance_id, request_type)

        with self._transaction():
            if not self._users.get_by_id(user_id):
                raise UserNotFound(user_id)

            record = self._attendance.get_by_id(int(attendance_id))
            if not record:
                raise RecordNotFound(f"Attendance record not found: {attendance_id}")
            if record.user_id != user_id:
                raise NotOwnedByUser()

            kind = parse_choice(CorrectionType, request_type, InvalidRequestType)
            reason = require_non_empty(reason, "reason")
            requested_time, requested_type = self._requested_values(kind, requested_time, requested_type)

            correction = self._corrections.insert(
                user_id=user_id,
                attendance_id=record.record_id,
                request_type=kind,
                before_time=record.timestamp,
                current_type=record.punch_type,
                requested_time=requested_time,
                requested_type=requested_type,
                reason=reason,
                created_at=self._clock.now(),
            )

        logger.info("Correction request created: correction_id=%s", correction.correction_id)
        return correction

    def _requested_values(
        self,
        kind: CorrectionType,
        requested_time: datetime | None,
        requested_type,
    ) -> tuple[Optional[datetime], Optional[PunchType]]:
        needs_time = kind in {CorrectionType.TIME, CorrectionType.BOTH}
        needs_type = kind in {CorrectionType.TYPE, CorrectionType.BOTH}

        if needs_time and requested_time is None:
            raise MissingField("requested_time", f"requested_time is required for a '{kind.value}' correction")
        if needs_type and (requested_type is None or not str(requested_type).strip()):
            raise MissingField("requested_type", f"requested_type is required for a '{kind.value}' correction")

        if requested_time is not None and requested_time.tzinfo is None:
            requested_time = requested_time.replace(tzinfo=self._clock.tz)
        punch_type = None
        if requested_type is not None and str(requested_type).strip():
            punch_type = parse_choice(PunchType, requested_type, InvalidRequestType)
        return requested_time, punch_type

    def approve(self, correction_id: int, approver_id: int) -> TimeCorrection:
        return self._decide(int(correction_id), int(approver_id), RequestStatus.APPROVED)

    def reject(self, correction_id: int, approver_id: int) -> TimeCorrection:
        return self._decide(int(correction_id), int(approver_id), RequestStatus.REJECTED)

    def _decide(self, correction_id: int, approver_id: int, status: RequestStatus) -> TimeCorrection:
        logger.info("Correction decision started: correction_id=%s approver_id=%s status=%s", correction_id, approver_id, status.value)

        with self._transaction():
            correction = self._corrections.get_by_id(correction_id)
            if not correction:
                raise RecordNotFound(f"Correction not found: {correction_id}")
            if correction.status.is_terminal:
                raise NotPending()
            if not self._users.get_by_id(approver_id):
                raise UserNotFound(approver_id)

            decided = self._corrections.decide(
                correction_id=correction_id,
                status=status,
                approver_id=approver_id,
                approved_at=self._clock.now(),
            )
            if not decided:
                # Another approver got there first.
                raise NotPending()
            updated = self._corrections.get_by_id(correction_id)

        logger.info("Correction decided: correction_id=%s status=%s", correction_id, status.value)
        return updated

    def get(self, correction_id: int) -> Optional[TimeCorrection]:
        return self._corrections.get_by_id(int(correction_id))

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[TimeCorrection]:
        return self._corrections.list_for_user(int(user_id), limit=int(limit))

    def list_pending(self, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[TimeCorrection]:
        return self._corrections.list_by_status(RequestStatus.PENDING, limit=int(limit))

    def pending_count(self, user_id: int | None = None) -> int:
        return self._corrections.count_by_status(
            RequestStatus.PENDING,
            user_id=int(user_id) if user_id is not None else None,
        )
