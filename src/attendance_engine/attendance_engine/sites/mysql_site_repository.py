from __future__ import annotations

from typing import Sequence

from ..core.enums import LocationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import WorkLocation
from .repository import SiteDirectory


class MySQLSiteDirectory(SiteDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def sites_for_type(self, location_type: LocationType) -> Sequence[WorkLocation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, name, location_type, latitude, longitude, radius_meters
                FROM work_locations
                WHERE location_type=%s
                ORDER BY location_id
                """,
                (location_type.value,),
            )
            rows = fetchall(cur)
            return [
                WorkLocation(
                    location_id=int(r["location_id"]),
                    name=r["name"],
                    location_type=LocationType(r["location_type"]),
                    latitude=float(r["latitude"]),
                    longitude=float(r["longitude"]),
                    radius_meters=float(r["radius_meters"]),
                )
                for r in rows
            ]
