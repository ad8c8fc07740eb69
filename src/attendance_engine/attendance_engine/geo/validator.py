"""Geofence checks for punch locations.

Pure functions: no I/O, no clock. Distances use the haversine formula on a
spherical Earth.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import InvalidCoordinates
from ..sites.model import WorkLocation


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


def validate_coordinates(latitude, longitude) -> GeoPoint:
    """Return a GeoPoint or raise InvalidCoordinates (missing, NaN, out of range)."""

    if latitude is None or longitude is None:
        raise InvalidCoordinates("Location is required")
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise InvalidCoordinates(f"Coordinates are not numbers: {latitude!r}, {longitude!r}")

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinates("Coordinates must be finite numbers")
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise InvalidCoordinates(f"Coordinates out of range: {lat}, {lon}")
    return GeoPoint(lat, lon)


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    for lat, lon in ((lat1, lon1), (lat2, lon2)):
        validate_coordinates(lat, lon)

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = math.sin(delta_lat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def is_within_site(point: GeoPoint, site: WorkLocation) -> bool:
    return distance_meters(point.latitude, point.longitude, site.latitude, site.longitude) <= site.radius_meters


def first_matching_site(point: GeoPoint, sites: Iterable[WorkLocation]) -> Optional[WorkLocation]:
    for site in sites:
        if is_within_site(point, site):
            return site
    return None
