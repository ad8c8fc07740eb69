"""Example: use the service layer directly (no Flask).

Controllers stay thin; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_engine.attendance_engine.common.serializers import to_json
from src.attendance_engine.attendance_engine.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    print(container.attendance_service.current_status(user_id=1))
    today = container.clock.now().date()
    print(to_json(container.summary_service.daily_summary(user_id=1, work_date=today)))
    print(to_json(container.summary_service.assess_overtime(user_id=1, year=today.year, month=today.month)))
    print("remaining paid leave:", container.leave_service.remaining_leave_days(user_id=1))


if __name__ == "__main__":
    main()
