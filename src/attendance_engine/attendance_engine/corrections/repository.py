from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CorrectionType, PunchType, RequestStatus
from .model import TimeCorrection


class TimeCorrectionRepository(Protocol):
    def get_by_id(self, correction_id: int) -> Optional[TimeCorrection]:
        raise NotImplementedError

    def insert(
        self,
        *,
        user_id: int,
        attendance_id: int,
        request_type: CorrectionType,
        before_time: datetime,
        current_type: PunchType,
        requested_time: Optional[datetime],
        requested_type: Optional[PunchType],
        reason: str,
        created_at: datetime,
    ) -> TimeCorrection:
        raise NotImplementedError

    def decide(
        self,
        *,
        correction_id: int,
        status: RequestStatus,
        approver_id: int,
        approved_at: datetime,
    ) -> bool:
        """Move a pending correction to ``status``; False if it was not pending."""

        raise NotImplementedError

    def list_for_user(self, user_id: int, *, limit: int) -> Sequence[TimeCorrection]:
        raise NotImplementedError

    def list_by_status(self, status: RequestStatus, *, limit: int) -> Sequence[TimeCorrection]:
        raise NotImplementedError

    def count_by_status(self, status: RequestStatus, *, user_id: Optional[int] = None) -> int:
        raise NotImplementedError
