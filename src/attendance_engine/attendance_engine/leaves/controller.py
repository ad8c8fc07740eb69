from __future__ import annotations

from flask import Flask, request, session

from ..common.http import (
    APPROVER_ROLES,
    approver_required,
    current_user_id,
    date_arg,
    json_body,
    login_required,
    ok,
)
from ..container import Container
from ..core.exceptions import NotOwnedByUser, RecordNotFound


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="api_create_leave")
    @login_required
    def create_leave():
        data = json_body()
        leave = service.create(
            current_user_id(),
            data.get("leave_type"),
            date_arg(data.get("start_date"), "start_date"),
            date_arg(data.get("end_date"), "end_date"),
            data.get("reason", ""),
        )
        return ok(leave, 201)

    @app.route("/api/leaves", methods=["GET"], endpoint="api_my_leaves")
    @login_required
    def my_leaves():
        return ok(list(service.list_for_user(current_user_id())))

    @app.route("/api/leaves/pending", methods=["GET"], endpoint="api_pending_leaves")
    @approver_required
    def pending_leaves():
        return ok(list(service.list_pending()))

    @app.route("/api/leaves/remaining", methods=["GET"], endpoint="api_remaining_leave")
    @login_required
    def remaining_leave():
        as_of = date_arg(request.args.get("as_of"), "as_of")
        return ok({"remaining_days": service.remaining_leave_days(current_user_id(), as_of)})

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="api_get_leave")
    @login_required
    def get_leave(request_id: int):
        leave = service.get(request_id)
        if not leave:
            raise RecordNotFound(f"Leave request not found: {request_id}")
        if leave.user_id != current_user_id() and session.get("role") not in APPROVER_ROLES:
            raise NotOwnedByUser()
        return ok(leave)

    @app.route("/api/leaves/<int:request_id>", methods=["PUT"], endpoint="api_update_leave")
    @login_required
    def update_leave(request_id: int):
        data = json_body()
        leave = service.update(
            request_id,
            data.get("leave_type"),
            date_arg(data.get("start_date"), "start_date"),
            date_arg(data.get("end_date"), "end_date"),
            data.get("reason", ""),
            user_id=current_user_id(),
        )
        return ok(leave)

    @app.route("/api/leaves/<int:request_id>", methods=["DELETE"], endpoint="api_delete_leave")
    @login_required
    def delete_leave(request_id: int):
        service.delete(request_id, user_id=current_user_id())
        return ok({"request_id": request_id})

    @app.route("/api/leaves/<int:request_id>/approve", methods=["POST"], endpoint="api_approve_leave")
    @approver_required
    def approve_leave(request_id: int):
        return ok(service.approve(request_id, current_user_id()))

    @app.route("/api/leaves/<int:request_id>/reject", methods=["POST"], endpoint="api_reject_leave")
    @approver_required
    def reject_leave(request_id: int):
        return ok(service.reject(request_id, current_user_id()))
