from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import LocationType


@dataclass(frozen=True)
class WorkLocation:
    """Work site master data: a center point and the allowed punch radius."""

    location_id: int
    name: str
    location_type: LocationType
    latitude: float
    longitude: float
    radius_meters: float
