"""Statutory paid-leave entitlement by length of service."""

from __future__ import annotations

from datetime import date

from ..common.datetime_utils import completed_months

# (minimum completed years of service, days granted); checked top-down.
_ENTITLEMENT_BY_YEARS = (
    (6, 15),
    (5, 14),
    (4, 13),
    (3, 12),
    (2, 11),
)
_FIRST_GRANT_MONTHS = 6
_FIRST_GRANT_DAYS = 10


def entitlement_days(hire_date: date, as_of: date) -> int:
    """Days of paid leave the employee is entitled to on ``as_of``.

    Less than 6 completed months of service grants nothing; from 6 months
    up to 2 years grants 10 days, then one more day per year up to 15
    days at 6 years. A hire date after ``as_of`` grants nothing.
    """
    months = completed_months(hire_date, as_of)
    if months < _FIRST_GRANT_MONTHS:
        return 0

    years = months // 12
    for min_years, days in _ENTITLEMENT_BY_YEARS:
        if years >= min_years:
            return days
    return _FIRST_GRANT_DAYS
