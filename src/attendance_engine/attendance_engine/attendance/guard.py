from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from ..core.constants import DEFAULT_PUNCH_COOLDOWN_MINUTES
from ..core.enums import PunchType
from ..core.exceptions import AlreadyClockedIn, AlreadyClockedOut, DuplicatePunch, NoClockInYet
from .model import AttendanceRecord


@dataclass(frozen=True)
class PunchGuard:
    """Punch sequencing rules for one user.

    The per-day sequence rules run first; the cooldown then catches a
    same-type punch that landed just before midnight.
    """

    cooldown: timedelta = timedelta(minutes=DEFAULT_PUNCH_COOLDOWN_MINUTES)

    def check(
        self,
        *,
        punch_type: PunchType,
        now: datetime,
        today: Sequence[AttendanceRecord],
        recent: Iterable[AttendanceRecord] = (),
    ) -> None:
        has_in = any(r.punch_type == PunchType.IN for r in today)
        has_out = any(r.punch_type == PunchType.OUT for r in today)

        if punch_type == PunchType.IN:
            if has_in:
                raise AlreadyClockedIn()
        elif not has_in:
            raise NoClockInYet()
        elif has_out:
            raise AlreadyClockedOut()

        window_start = now - self.cooldown
        for r in (*today, *recent):
            if r.punch_type == punch_type and window_start <= r.timestamp <= now:
                raise DuplicatePunch(f"A '{punch_type.value}' punch was recorded within the last {self._cooldown_label()}")

    def _cooldown_label(self) -> str:
        minutes = int(self.cooldown.total_seconds() // 60)
        return f"{minutes} minutes" if minutes != 1 else "minute"
