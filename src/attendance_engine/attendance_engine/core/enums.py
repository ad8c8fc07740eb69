from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used by the HTTP layer to gate approvals."""

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class LocationType(str, Enum):
    """Which work-site list an employee punches against."""

    OFFICE = "office"
    CLIENT = "client"


class PunchType(str, Enum):
    IN = "in"
    OUT = "out"


class AttendanceStatus(str, Enum):
    """Current punch state of a user for today."""

    NONE = "none"
    IN = "in"
    OUT = "out"


class DayStatus(str, Enum):
    NONE = "none"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SummaryType(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class RequestStatus(str, Enum):
    """Approval workflow state (time corrections and leave requests)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


class CorrectionType(str, Enum):
    TIME = "time"
    TYPE = "type"
    BOTH = "both"


class LeaveType(str, Enum):
    PAID = "paid"
    SICK = "sick"
    SPECIAL = "special"


class OvertimeStatus(str, Enum):
    """Monthly overtime classification.

    APPROVED: no overtime, late-night or holiday work at all.
    DRAFT: some extra hours, all under the monitoring thresholds.
    CONFIRMED: at least one threshold exceeded, needs review.
    """

    APPROVED = "approved"
    DRAFT = "draft"
    CONFIRMED = "confirmed"
