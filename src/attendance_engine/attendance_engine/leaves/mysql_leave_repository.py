from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_aware, as_naive, db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = (
    "request_id, user_id, leave_type, start_date, end_date, reason, status, "
    "approver_id, created_at, updated_at, approved_at"
)


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: tzinfo):
        self._conn_factory = conn_factory
        self._tz = tz

    def _to_request(self, r: dict) -> LeaveRequest:
        return LeaveRequest(
            request_id=int(r["request_id"]),
            user_id=int(r["user_id"]),
            leave_type=LeaveType(r["leave_type"]),
            start_date=r["start_date"],
            end_date=r["end_date"],
            reason=r.get("reason") or "",
            status=RequestStatus(r["status"]),
            approver_id=int(r["approver_id"]) if r.get("approver_id") is not None else None,
            created_at=as_aware(r["created_at"], self._tz),
            updated_at=as_aware(r["updated_at"], self._tz),
            approved_at=as_aware(r.get("approved_at"), self._tz),
        )

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return self._to_request(r) if r else None

    def insert(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
        created_at: datetime,
    ) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    user_id, leave_type, start_date, end_date, reason, status, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    RequestStatus.PENDING.value,
                    as_naive(created_at, self._tz),
                    as_naive(created_at, self._tz),
                ),
            )
            request_id = int(cur.lastrowid)

        return LeaveRequest(
            request_id=request_id,
            user_id=int(user_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=created_at,
            updated_at=created_at,
        )

    def update(
        self,
        *,
        request_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
        updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET leave_type=%s, start_date=%s, end_date=%s, reason=%s, updated_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    as_naive(updated_at, self._tz),
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0

    def find_overlapping(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        sql = f"""
            SELECT {_COLUMNS}
            FROM leave_requests
            WHERE user_id=%s
              AND status IN (%s, %s)
              AND start_date <= %s
              AND end_date >= %s
        """
        params: list = [
            int(user_id),
            RequestStatus.PENDING.value,
            RequestStatus.APPROVED.value,
            end_date,
            start_date,
        ]
        if exclude_id is not None:
            sql += " AND request_id <> %s"
            params.append(int(exclude_id))
        sql += " ORDER BY start_date ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [self._to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        approver_id: int,
        approved_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approver_id=%s, approved_at=%s, updated_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(approver_id),
                    as_naive(approved_at, self._tz),
                    as_naive(approved_at, self._tz),
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_user(self, user_id: int, *, limit: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s
                ORDER BY start_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [self._to_request(r) for r in fetchall(cur)]

    def list_by_status(self, status: RequestStatus, *, limit: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE status=%s
                ORDER BY created_at ASC
                LIMIT %s
                """,
                (status.value, int(limit)),
            )
            return [self._to_request(r) for r in fetchall(cur)]

    def approved_days(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: Optional[LeaveType] = None,
    ) -> int:
        # Requests straddling the range only count their days inside it.
        sql = """
            SELECT COALESCE(SUM(DATEDIFF(LEAST(end_date, %s), GREATEST(start_date, %s)) + 1), 0)
            FROM leave_requests
            WHERE user_id=%s
              AND status=%s
              AND start_date <= %s
              AND end_date >= %s
        """
        params: list = [
            end_date,
            start_date,
            int(user_id),
            RequestStatus.APPROVED.value,
            end_date,
            start_date,
        ]
        if leave_type is not None:
            sql += " AND leave_type=%s"
            params.append(leave_type.value)

        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute(sql, tuple(params))
            row = cur.fetchone()
            return int(row[0]) if row and row[0] is not None else 0
