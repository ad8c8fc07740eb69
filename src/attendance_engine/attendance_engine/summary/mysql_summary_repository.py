from __future__ import annotations

from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import SummaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_aware, as_naive, db_cursor, fetchall, fetchone
from .model import AttendanceSummary, WorkHours
from .repository import SummaryRepository

_COLUMNS = (
    "summary_id, user_id, target_date, summary_type, total_hours, overtime_hours, "
    "late_night_hours, holiday_hours, created_at"
)


class MySQLSummaryRepository(SummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_summary(self, r: dict) -> AttendanceSummary:
        return AttendanceSummary(
            summary_id=int(r["summary_id"]),
            user_id=int(r["user_id"]),
            target_date=r["target_date"],
            summary_type=SummaryType(r["summary_type"]),
            total_hours=Decimal(r["total_hours"]),
            overtime_hours=Decimal(r["overtime_hours"]),
            late_night_hours=Decimal(r["late_night_hours"]),
            holiday_hours=Decimal(r["holiday_hours"]),
            created_at=as_aware(r["created_at"], self._tz),
        )

    def get(self, *, user_id: int, target_date: date, summary_type: SummaryType) -> Optional[AttendanceSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_summaries
                WHERE user_id=%s AND target_date=%s AND summary_type=%s
                """,
                (int(user_id), target_date, summary_type.value),
            )
            r = fetchone(cur)
            return self._to_summary(r) if r else None

    def upsert(
        self,
        *,
        user_id: int,
        target_date: date,
        summary_type: SummaryType,
        hours: WorkHours,
        created_at: datetime,
    ) -> AttendanceSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_summaries(
                    user_id, target_date, summary_type,
                    total_hours, overtime_hours, late_night_hours, holiday_hours, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    total_hours=VALUES(total_hours),
                    overtime_hours=VALUES(overtime_hours),
                    late_night_hours=VALUES(late_night_hours),
                    holiday_hours=VALUES(holiday_hours)
                """,
                (
                    int(user_id),
                    target_date,
                    summary_type.value,
                    hours.total,
                    hours.overtime,
                    hours.late_night,
                    hours.holiday,
                    as_naive(created_at, self._tz),
                ),
            )
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_summaries
                WHERE user_id=%s AND target_date=%s AND summary_type=%s
                """,
                (int(user_id), target_date, summary_type.value),
            )
            return self._to_summary(fetchone(cur))

    def list_for_user_in_range(
        self,
        *,
        user_id: int,
        summary_type: SummaryType,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_summaries
                WHERE user_id=%s AND summary_type=%s AND target_date BETWEEN %s AND %s
                ORDER BY target_date ASC
                """,
                (int(user_id), summary_type.value, start_date, end_date),
            )
            return [self._to_summary(r) for r in fetchall(cur)]
