from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SummaryType
from .model import AttendanceSummary, WorkHours


class SummaryRepository(Protocol):
    def get(self, *, user_id: int, target_date: date, summary_type: SummaryType) -> Optional[AttendanceSummary]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        user_id: int,
        target_date: date,
        summary_type: SummaryType,
        hours: WorkHours,
        created_at: datetime,
    ) -> AttendanceSummary:
        """Insert or replace the row keyed by (user_id, target_date, summary_type)."""

        raise NotImplementedError

    def list_for_user_in_range(
        self,
        *,
        user_id: int,
        summary_type: SummaryType,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceSummary]:
        raise NotImplementedError
