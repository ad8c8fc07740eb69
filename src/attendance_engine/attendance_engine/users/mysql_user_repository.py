from __future__ import annotations

from typing import Optional

from ..core.enums import LocationType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Employee
from .repository import EmployeeDirectory


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, role, location_type, skip_location_check, hire_date, is_active
                FROM users
                WHERE user_id=%s AND is_active=1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Employee(
                user_id=int(r["user_id"]),
                full_name=r["full_name"],
                role=Role(r["role"]),
                location_type=LocationType(r["location_type"]),
                skip_location_check=bool(r["skip_location_check"]),
                hire_date=r["hire_date"],
                is_active=bool(r["is_active"]),
            )
