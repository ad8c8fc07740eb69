from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_bounds
from ..common.http import current_user_id, date_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    @login_required
    def clock_in():
        data = json_body()
        record = container.attendance_service.clock_in(current_user_id(), data.get("latitude"), data.get("longitude"))
        return ok(record, 201)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_clock_out")
    @login_required
    def clock_out():
        data = json_body()
        record = container.attendance_service.clock_out(current_user_id(), data.get("latitude"), data.get("longitude"))
        return ok(record, 201)

    @app.route("/api/attendance/status", methods=["GET"], endpoint="api_attendance_status")
    @login_required
    def status():
        user_id = current_user_id()
        return ok(
            {
                "status": container.attendance_service.current_status(user_id),
                "latest": container.attendance_service.latest_record(user_id),
            }
        )

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    def today():
        return ok(list(container.attendance_service.today_records(current_user_id())))

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    def history():
        today = container.clock.now().date()
        default_start, default_end = month_bounds(today.year, today.month)
        start = date_arg(request.args.get("start"), "start") or default_start
        end = date_arg(request.args.get("end"), "end") or default_end
        return ok(list(container.attendance_service.records_in_range(current_user_id(), start, end)))
