from datetime import date
from decimal import Decimal

import pytest

from src.attendance_engine.attendance_engine.core.enums import DayStatus, OvertimeStatus, PunchType, SummaryType
from src.attendance_engine.attendance_engine.summary.model import WorkHours
from src.attendance_engine.attendance_engine.summary.overtime import OvertimeThresholds

from tests.support import OFFICE, at, north_of

DAY = date(2025, 1, 15)


def _punch(world, punch_type, ts, user_id=1):
    lat, lon = north_of(OFFICE, 0)
    return world.attendance_repo.insert(user_id=user_id, punch_type=punch_type, timestamp=ts, latitude=lat, longitude=lon)


def _store_daily(world, day, total, overtime="0", late_night="0", holiday="0", user_id=1):
    world.summary_repo.upsert(
        user_id=user_id,
        target_date=day,
        summary_type=SummaryType.DAILY,
        hours=WorkHours(Decimal(total), Decimal(overtime), Decimal(late_night), Decimal(holiday)),
        created_at=at(2025, 1, 31, 23, 0),
    )


def test_day_without_punches(world):
    daily = world.summary.daily_summary(1, DAY)

    assert daily.status == DayStatus.NONE
    assert daily.total_hours == Decimal("0.00")
    assert world.summary_repo.rows == {}


def test_day_in_progress_is_not_stored(world):
    _punch(world, PunchType.IN, at(2025, 1, 15, 9, 0))

    daily = world.summary.daily_summary(1, DAY)

    assert daily.status == DayStatus.IN_PROGRESS
    assert daily.clock_in is not None and daily.clock_out is None
    assert world.summary_repo.rows == {}


def test_clock_out_before_clock_in_is_ignored(world):
    _punch(world, PunchType.OUT, at(2025, 1, 15, 8, 0))
    _punch(world, PunchType.IN, at(2025, 1, 15, 9, 0))

    assert world.summary.daily_summary(1, DAY).status == DayStatus.IN_PROGRESS


def test_completed_day_is_upserted(world):
    _punch(world, PunchType.IN, at(2025, 1, 15, 9, 0))
    _punch(world, PunchType.OUT, at(2025, 1, 15, 18, 0))

    first = world.summary.daily_summary(1, DAY)
    world.summary.daily_summary(1, DAY)

    assert first.status == DayStatus.COMPLETED
    assert (first.total_hours, first.overtime_hours, first.late_night_hours) == (
        Decimal("9.00"),
        Decimal("1.00"),
        Decimal("0.00"),
    )
    rows = world.summary_repo.list_for_user_in_range(
        user_id=1, summary_type=SummaryType.DAILY, start_date=DAY, end_date=DAY
    )
    assert len(rows) == 1
    assert rows[0].total_hours == Decimal("9.00")


def test_monthly_sums_daily_rows_and_is_keyed_to_first_of_month(world):
    _store_daily(world, date(2025, 1, 6), "9.00", "1.00")
    _store_daily(world, date(2025, 1, 7), "10.50", "2.50", "0.50")
    _store_daily(world, date(2025, 2, 3), "8.00")
    _store_daily(world, date(2025, 1, 8), "12.00", "4.00", user_id=2)

    monthly = world.summary.monthly_summary(1, 2025, 1)

    assert monthly.target_date == date(2025, 1, 1)
    assert monthly.summary_type == SummaryType.MONTHLY
    assert monthly.total_hours == Decimal("19.50")
    assert monthly.overtime_hours == Decimal("3.50")
    assert monthly.late_night_hours == Decimal("0.50")

    # recomputation replaces the same row
    _store_daily(world, date(2025, 1, 9), "1.00")
    again = world.summary.monthly_summary(1, 2025, 1)
    assert again.summary_id == monthly.summary_id
    assert again.total_hours == Decimal("20.50")


def test_empty_month_is_stored_as_zero(world):
    monthly = world.summary.monthly_summary(1, 2025, 3)

    assert monthly.hours == WorkHours()


@pytest.mark.parametrize(
    "overtime, late_night, holiday, expected",
    [
        ("0", "0", "0", OvertimeStatus.APPROVED),
        ("10", "0", "0", OvertimeStatus.DRAFT),
        ("0", "0", "15", OvertimeStatus.DRAFT),
        ("45.01", "0", "0", OvertimeStatus.CONFIRMED),
        ("0", "20.50", "0", OvertimeStatus.CONFIRMED),
        ("0", "0", "15.25", OvertimeStatus.CONFIRMED),
    ],
)
def test_overtime_classification(overtime, late_night, holiday, expected):
    hours = WorkHours(Decimal("100"), Decimal(overtime), Decimal(late_night), Decimal(holiday))

    assert OvertimeThresholds().classify(hours) == expected


def test_assess_overtime_uses_the_monthly_figures(world):
    _store_daily(world, date(2025, 1, 6), "30.00", "22.00")
    _store_daily(world, date(2025, 1, 7), "30.00", "24.00")

    assessment = world.summary.assess_overtime(1, 2025, 1)

    assert assessment.month_start == date(2025, 1, 1)
    assert assessment.overtime_hours == Decimal("46.00")
    assert assessment.status == OvertimeStatus.CONFIRMED


def test_clock_out_refreshes_day_and_month(world):
    world.attendance.clock_in(1, *north_of(OFFICE, 0))
    world.clock.set(at(2025, 1, 15, 18, 30))
    world.attendance.clock_out(1, *north_of(OFFICE, 0))

    daily = world.summary_repo.get(user_id=1, target_date=DAY, summary_type=SummaryType.DAILY)
    monthly = world.summary_repo.get(user_id=1, target_date=date(2025, 1, 1), summary_type=SummaryType.MONTHLY)

    assert daily.total_hours == Decimal("9.50")
    assert monthly.total_hours == Decimal("9.50")
    assert all(r.processed for r in world.attendance_repo.records.values())
    assert world.attendance_repo.list_unprocessed(limit=10) == []


def test_reconcile_picks_up_unprocessed_punches(world):
    _punch(world, PunchType.IN, at(2025, 1, 15, 9, 0))
    _punch(world, PunchType.OUT, at(2025, 1, 15, 17, 0))
    _punch(world, PunchType.IN, at(2025, 1, 16, 9, 0))
    _punch(world, PunchType.IN, at(2025, 1, 15, 10, 0), user_id=2)
    _punch(world, PunchType.OUT, at(2025, 1, 15, 20, 0), user_id=2)

    processed = world.summary.reconcile_unprocessed()

    assert processed == 3
    assert world.attendance_repo.list_unprocessed(limit=10) == []
    assert world.summary_repo.get(user_id=1, target_date=DAY, summary_type=SummaryType.DAILY).total_hours == Decimal("8.00")
    assert world.summary_repo.get(user_id=2, target_date=DAY, summary_type=SummaryType.DAILY).overtime_hours == Decimal("2.00")
    assert world.summary_repo.get(user_id=1, target_date=date(2025, 1, 16), summary_type=SummaryType.DAILY) is None
    assert world.summary_repo.get(user_id=2, target_date=date(2025, 1, 1), summary_type=SummaryType.MONTHLY) is not None


def test_reconcile_respects_limit(world):
    _punch(world, PunchType.IN, at(2025, 1, 15, 9, 0))
    _punch(world, PunchType.OUT, at(2025, 1, 15, 17, 0))
    _punch(world, PunchType.IN, at(2025, 1, 16, 9, 0))

    assert world.summary.reconcile_unprocessed(limit=2) == 1
    assert len(world.attendance_repo.list_unprocessed(limit=10)) == 1
