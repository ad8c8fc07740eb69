from __future__ import annotations

from datetime import date
from typing import Protocol


class HolidayCalendar(Protocol):
    """Read-only holiday lookup used for holiday-hour decomposition."""

    def is_holiday(self, day: date) -> bool:
        raise NotImplementedError
