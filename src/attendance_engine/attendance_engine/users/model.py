from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import LocationType, Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: the slice of user master data the engine reads.

    Note: Plain data object, no DB access code here.
    """

    user_id: int
    full_name: str
    location_type: LocationType
    hire_date: date
    role: Role = Role.EMPLOYEE
    skip_location_check: bool = False
    is_active: bool = True
