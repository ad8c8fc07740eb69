from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional, Sequence

from ..core.enums import PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_aware, as_naive, db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, user_id, punch_type, punched_at, latitude, longitude, processed"


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_record(self, r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=int(r["record_id"]),
            user_id=int(r["user_id"]),
            punch_type=PunchType(r["punch_type"]),
            timestamp=as_aware(r["punched_at"], self._tz),
            latitude=float(r["latitude"]),
            longitude=float(r["longitude"]),
            processed=bool(r["processed"]),
        )

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def list_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                ORDER BY punched_at ASC
                """,
                (int(user_id), work_date),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def list_recent_by_type(
        self,
        *,
        user_id: int,
        punch_type: PunchType,
        since: datetime,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND punch_type=%s AND punched_at >= %s
                ORDER BY punched_at ASC
                """,
                (int(user_id), punch_type.value, as_naive(since, self._tz)),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def list_for_user_in_range(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY punched_at ASC
                """,
                (int(user_id), start_date, end_date),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def get_latest_for_user(self, user_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY punched_at DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def insert(
        self,
        *,
        user_id: int,
        punch_type: PunchType,
        timestamp: datetime,
        latitude: float,
        longitude: float,
    ) -> AttendanceRecord:
        local = timestamp.astimezone(self._tz)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, punch_type, punched_at, work_date, latitude, longitude, processed)
                VALUES(%s,%s,%s,%s,%s,%s,0)
                """,
                (int(user_id), punch_type.value, local.replace(tzinfo=None), local.date(), latitude, longitude),
            )
            record_id = int(cur.lastrowid)

        return AttendanceRecord(
            record_id=record_id,
            user_id=int(user_id),
            punch_type=punch_type,
            timestamp=local,
            latitude=latitude,
            longitude=longitude,
            processed=False,
        )

    def list_unprocessed(self, *, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE processed=0
                ORDER BY user_id ASC, punched_at ASC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [self._to_record(r) for r in fetchall(cur)]

    def mark_processed(self, record_ids: Sequence[int]) -> int:
        ids = [int(i) for i in record_ids]
        if not ids:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET processed=1 WHERE record_id IN ({placeholders})",
                tuple(ids),
            )
            return int(cur.rowcount)
