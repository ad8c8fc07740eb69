"""Shared pieces of the JSON HTTP surface.

The session (``user_id``, ``role``) is issued by the login layer in front
of this app; controllers only read it.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    GeofenceError,
    MissingField,
    NotFoundError,
    PunchError,
    StateError,
    StorageError,
    ValidationError,
)
from .datetime_utils import parse_iso_date, parse_iso_datetime
from .serializers import to_json

logger = logging.getLogger(__name__)

APPROVER_ROLES = {Role.ADMIN.value, Role.MANAGER.value}

# Most specific family first.
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (PunchError, 409),
    (StateError, 409),
    (ConflictError, 409),
    (GeofenceError, 422),
)


def status_for(error: DomainError) -> int:
    for family, status in _STATUS_BY_ERROR:
        if isinstance(error, family):
            return status
    return 400


def ok(data: Any = None, status: int = 200, **extra):
    body = {"success": True, "data": to_json(data)}
    body.update({k: to_json(v) for k, v in extra.items()})
    return jsonify(body), status


def fail(message: str, status: int, code: str):
    return jsonify({"success": False, "code": code, "message": message}), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Login required", 401, "unauthenticated")
        return view(*args, **kwargs)

    return wrapper


def approver_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Login required", 401, "unauthenticated")
        if session.get("role") not in APPROVER_ROLES:
            return fail("Only admins and managers can decide requests", 403, "forbidden")
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def date_arg(value: Optional[str], field_name: str) -> Optional[date]:
    if value is None or not str(value).strip():
        return None
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def required_date_arg(value: Optional[str], field_name: str) -> date:
    parsed = date_arg(value, field_name)
    if parsed is None:
        raise MissingField(field_name)
    return parsed


def datetime_arg(value: Optional[str], field_name: str) -> Optional[datetime]:
    if value is None or not str(value).strip():
        return None
    try:
        return parse_iso_datetime(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO-8601 timestamp")


def register_error_handlers(app: Flask) -> None:
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        logger.info("Request rejected: %s %s -> %s (%s)", request.method, request.path, status, e.code)
        return fail(str(e), status, e.code)

    def handle_storage_error(e: StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.path, e)
        return fail("Internal storage error", 500, e.code)

    app.register_error_handler(DomainError, handle_domain_error)
    app.register_error_handler(StorageError, handle_storage_error)
