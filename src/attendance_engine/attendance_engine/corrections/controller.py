from __future__ import annotations

from flask import Flask, session

from ..common.http import (
    APPROVER_ROLES,
    approver_required,
    current_user_id,
    datetime_arg,
    json_body,
    login_required,
    ok,
)
from ..container import Container
from ..core.exceptions import MissingField, NotOwnedByUser, RecordNotFound


def register(app: Flask, container: Container) -> None:
    service = container.correction_service

    @app.route("/api/corrections", methods=["POST"], endpoint="api_create_correction")
    @login_required
    def create_correction():
        data = json_body()
        if data.get("attendance_id") is None:
            raise MissingField("attendance_id")
        correction = service.create(
            current_user_id(),
            int(data["attendance_id"]),
            data.get("request_type"),
            data.get("reason"),
            requested_time=datetime_arg(data.get("requested_time"), "requested_time"),
            requested_type=data.get("requested_type"),
        )
        return ok(correction, 201)

    @app.route("/api/corrections", methods=["GET"], endpoint="api_my_corrections")
    @login_required
    def my_corrections():
        user_id = current_user_id()
        return ok(list(service.list_for_user(user_id)), pending_count=service.pending_count(user_id))

    @app.route("/api/corrections/pending", methods=["GET"], endpoint="api_pending_corrections")
    @approver_required
    def pending_corrections():
        return ok(list(service.list_pending()), pending_count=service.pending_count())

    @app.route("/api/corrections/<int:correction_id>", methods=["GET"], endpoint="api_get_correction")
    @login_required
    def get_correction(correction_id: int):
        correction = service.get(correction_id)
        if not correction:
            raise RecordNotFound(f"Correction not found: {correction_id}")
        if correction.user_id != current_user_id() and session.get("role") not in APPROVER_ROLES:
            raise NotOwnedByUser()
        return ok(correction)

    @app.route("/api/corrections/<int:correction_id>/approve", methods=["POST"], endpoint="api_approve_correction")
    @approver_required
    def approve_correction(correction_id: int):
        return ok(service.approve(correction_id, current_user_id()))

    @app.route("/api/corrections/<int:correction_id>/reject", methods=["POST"], endpoint="api_reject_correction")
    @approver_required
    def reject_correction(correction_id: int):
        return ok(service.reject(correction_id, current_user_id()))
