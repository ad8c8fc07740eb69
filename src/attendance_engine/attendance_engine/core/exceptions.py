from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations.

    Every concrete error carries a stable ``code`` so callers (controllers,
    batch jobs) can react on the kind of failure instead of the message.
    """

    code = "domain_error"
    default_message = "Business rule violated"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"
    default_message = "Invalid input"


class InvalidCoordinates(ValidationError):
    code = "invalid_coordinates"
    default_message = "Latitude/longitude are missing or out of range"


class MissingField(ValidationError):
    code = "missing_field"

    def __init__(self, field_name: str, message: str | None = None):
        self.field_name = field_name
        super().__init__(message or f"{field_name} is required")


class InvalidRequestType(ValidationError):
    code = "invalid_request_type"
    default_message = "Unknown correction request type"


class InvalidType(ValidationError):
    code = "invalid_type"
    default_message = "Unknown leave type"


class InvalidDateRange(ValidationError):
    code = "invalid_date_range"
    default_message = "End date must be on or after start date"


class PastDateNotAllowed(ValidationError):
    code = "past_date_not_allowed"
    default_message = "Leave cannot start in the past"


class RangeTooLong(ValidationError):
    code = "range_too_long"
    default_message = "Leave period is too long"


class GeofenceError(DomainError):
    code = "geofence_error"


class OutOfGeofence(GeofenceError):
    code = "out_of_geofence"
    default_message = "Punch location is outside every allowed work site"


class PunchError(DomainError):
    """Punch sequencing violations."""

    code = "punch_error"


class AlreadyClockedIn(PunchError):
    code = "already_clocked_in"
    default_message = "Already clocked in today"


class AlreadyClockedOut(PunchError):
    code = "already_clocked_out"
    default_message = "Already clocked out today"


class NoClockInYet(PunchError):
    code = "no_clock_in_yet"
    default_message = "No clock-in recorded today"


class DuplicatePunch(PunchError):
    code = "duplicate_punch"
    default_message = "A punch of the same type was recorded moments ago"


class NotFoundError(DomainError):
    code = "not_found"


class UserNotFound(NotFoundError):
    code = "user_not_found"

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class RecordNotFound(NotFoundError):
    code = "record_not_found"
    default_message = "Record not found"


class AuthorizationError(DomainError):
    """Raised when a user acts on something they do not own."""

    code = "forbidden"


class NotOwnedByUser(AuthorizationError):
    code = "not_owned_by_user"
    default_message = "The record belongs to another user"


class StateError(DomainError):
    """Raised when a workflow transition is not allowed from the current state."""

    code = "invalid_state"


class NotPending(StateError):
    code = "not_pending"
    default_message = "Request has already been processed"


class AlreadyApproved(StateError):
    code = "already_approved"
    default_message = "Approved requests cannot be changed"


class AlreadyRejected(StateError):
    code = "already_rejected"
    default_message = "Rejected requests cannot be changed"


class ConflictError(DomainError):
    code = "conflict"


class OverlappingRequest(ConflictError):
    code = "overlapping_request"
    default_message = "Another request already covers part of this period"


class StorageError(Exception):
    """Persistence/infrastructure failure. Never a business error."""

    code = "storage_error"


class UniqueViolation(StorageError):
    """A uniqueness constraint rejected a write (lost a concurrent race)."""

    code = "unique_violation"
