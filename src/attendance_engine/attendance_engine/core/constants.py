"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time
from decimal import Decimal

EARTH_RADIUS_METERS = 6_371_000

DEFAULT_TIMEZONE = "Asia/Tokyo"
DEFAULT_PUNCH_COOLDOWN_MINUTES = 5
DEFAULT_STANDARD_WORK_HOURS = Decimal("8")
DEFAULT_MAX_LEAVE_DAYS = 30
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_RECONCILE_BATCH_SIZE = 500

LATE_NIGHT_START = time(22, 0)
LATE_NIGHT_END = time(5, 0)

DEFAULT_OVERTIME_THRESHOLD_HOURS = Decimal("45")
DEFAULT_LATE_NIGHT_THRESHOLD_HOURS = Decimal("20")
DEFAULT_HOLIDAY_THRESHOLD_HOURS = Decimal("15")

HOURS_QUANTUM = Decimal("0.01")
