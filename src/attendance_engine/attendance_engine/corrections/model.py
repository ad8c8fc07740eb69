from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CorrectionType, PunchType, RequestStatus


@dataclass(frozen=True)
class TimeCorrection:
    """A request to fix one punch.

    ``before_time`` and ``current_type`` are copied from the punch when the
    request is filed, so the request keeps its context even if the punch is
    looked at much later.
    """

    correction_id: int
    user_id: int
    attendance_id: int
    request_type: CorrectionType
    before_time: datetime
    current_type: PunchType
    reason: str
    status: RequestStatus
    created_at: datetime
    requested_time: Optional[datetime] = None
    requested_type: Optional[PunchType] = None
    approver_id: Optional[int] = None
    approved_at: Optional[datetime] = None
