from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_bounds, parse_year_month
from ..common.http import approver_required, current_user_id, date_arg, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _month_arg() -> tuple[int, int]:
        raw = (request.args.get("month") or "").strip()
        if not raw:
            today = container.clock.now().date()
            return today.year, today.month
        try:
            return parse_year_month(raw)
        except ValueError:
            raise ValidationError("month must be YYYY-MM")

    @app.route("/api/summary/daily", methods=["GET"], endpoint="api_summary_daily")
    @login_required
    def daily():
        day = date_arg(request.args.get("date"), "date") or container.clock.now().date()
        return ok(container.summary_service.daily_summary(current_user_id(), day))

    @app.route("/api/summary/daily-rows", methods=["GET"], endpoint="api_summary_daily_rows")
    @login_required
    def daily_rows():
        year, month = _month_arg()
        start, end = month_bounds(year, month)
        return ok(list(container.summary_service.daily_rows(current_user_id(), start, end)))

    @app.route("/api/summary/monthly", methods=["GET"], endpoint="api_summary_monthly")
    @login_required
    def monthly():
        year, month = _month_arg()
        return ok(container.summary_service.monthly_summary(current_user_id(), year, month))

    @app.route("/api/summary/overtime", methods=["GET"], endpoint="api_summary_overtime")
    @login_required
    def overtime():
        year, month = _month_arg()
        return ok(container.summary_service.assess_overtime(current_user_id(), year, month))

    @app.route("/api/summary/reconcile", methods=["POST"], endpoint="api_summary_reconcile")
    @approver_required
    def reconcile():
        limit = json_body().get("limit")
        processed = container.summary_service.reconcile_unprocessed(int(limit) if limit else None)
        return ok({"user_days": processed})
