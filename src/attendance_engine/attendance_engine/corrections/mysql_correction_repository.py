from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..core.enums import CorrectionType, PunchType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_aware, as_naive, db_cursor, fetchall, fetchone
from .model import TimeCorrection
from .repository import TimeCorrectionRepository

_COLUMNS = (
    "correction_id, user_id, attendance_id, request_type, before_time, current_type, "
    "requested_time, requested_type, reason, status, approver_id, created_at, approved_at"
)


class MySQLTimeCorrectionRepository(TimeCorrectionRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_correction(self, r: dict) -> TimeCorrection:
        return TimeCorrection(
            correction_id=int(r["correction_id"]),
            user_id=int(r["user_id"]),
            attendance_id=int(r["attendance_id"]),
            request_type=CorrectionType(r["request_type"]),
            before_time=as_aware(r["before_time"], self._tz),
            current_type=PunchType(r["current_type"]),
            requested_time=as_aware(r.get("requested_time"), self._tz),
            requested_type=PunchType(r["requested_type"]) if r.get("requested_type") else None,
            reason=r["reason"],
            status=RequestStatus(r["status"]),
            approver_id=int(r["approver_id"]) if r.get("approver_id") is not None else None,
            created_at=as_aware(r["created_at"], self._tz),
            approved_at=as_aware(r.get("approved_at"), self._tz),
        )

    def get_by_id(self, correction_id: int) -> Optional[TimeCorrection]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_corrections WHERE correction_id=%s",
                (int(correction_id),),
            )
            r = fetchone(cur)
            return self._to_correction(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_corrections(
                    user_id, attendance_id, request_type, before_time, current_type,
                    requested_time, requested_type, reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(attendance_id),
                    request_type.value,
                    as_naive(before_time, self._tz),
                    current_type.value,
                    as_naive(requested_time, self._tz),
                    requested_type.value if requested_type else None,
                    reason,
                    RequestStatus.PENDING.value,
                    as_naive(created_at, self._tz),
                ),
            )
            correction_id = int(cur.lastrowid)

        return TimeCorrection(
            correction_id=correction_id,
            user_id=int(user_id),
            attendance_id=int(attendance_id),
            request_type=request_type,
            before_time=before_time,
            current_type=current_type,
            requested_time=requested_time,
            requested_type=requested_type,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=created_at,
        )

    def decide(
        self,
        *,
        correction_id: int,
        status: RequestStatus,
        approver_id: int,
        approved_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_corrections
                SET status=%s, approver_id=%s, approved_at=%s
                WHERE correction_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(approver_id),
                    as_naive(approved_at, self._tz),
                    int(correction_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_user(self, user_id: int, *, limit: int) -> Sequence[TimeCorrection]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_corrections
                WHERE user_id=%s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [self._to_correction(r) for r in fetchall(cur)]

    def list_by_status(self, status: RequestStatus, *, limit: int) -> Sequence[TimeCorrection]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_corrections
                WHERE status=%s
                ORDER BY created_at ASC
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [self._to_correction(r) for r in fetchall(cur)]

    def count_by_status(self, status: RequestStatus, *, user_id: Optional[int] = None) -> int:
        sql = "SELECT COUNT(*) FROM time_corrections WHERE status=%s"
        params: list = [status.value]
        if user_id is not None:
            sql += " AND user_id=%s"
            params.append(int(user_id))
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute(sql, tuple(params))
            row = cur.fetchone()
            return int(row[0]) if row else 0
