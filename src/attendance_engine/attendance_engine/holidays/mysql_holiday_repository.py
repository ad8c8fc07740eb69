from __future__ import annotations

from datetime import date

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .repository import HolidayCalendar


class MySQLHolidayCalendar(HolidayCalendar):
    """Holidays table lookup; Saturdays and Sundays count as holidays when enabled."""

    def __init__(self, conn_factory: DatabaseConnection, *, weekends_are_holidays: bool = True):
        self._conn_factory = conn_factory
        self._weekends_are_holidays = bool(weekends_are_holidays)

    def is_holiday(self, day: date) -> bool:
        if self._weekends_are_holidays and day.weekday() >= 5:
            return True

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM holidays WHERE holiday_date=%s", (day,))
            return fetchone(cur) is not None
