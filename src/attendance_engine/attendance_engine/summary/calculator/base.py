from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ..model import WorkHours


class WorkTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for work-hour decomposition)."""

    @abstractmethod
    def calculate(self, clock_in: datetime, clock_out: datetime) -> WorkHours:
        raise NotImplementedError
