"""Engine tunables shared by every environment, overridable from the environment."""

import os

TIMEZONE = os.getenv("TIMEZONE", "Asia/Tokyo")

PUNCH_COOLDOWN_MINUTES = int(os.getenv("PUNCH_COOLDOWN_MINUTES", "5"))
STANDARD_WORK_HOURS = os.getenv("STANDARD_WORK_HOURS", "8")
MAX_LEAVE_DAYS = int(os.getenv("MAX_LEAVE_DAYS", "30"))
WEEKENDS_ARE_HOLIDAYS = bool(int(os.getenv("WEEKENDS_ARE_HOLIDAYS", "1")))

# Monthly overtime monitoring thresholds (hours)
OVERTIME_THRESHOLD_HOURS = os.getenv("OVERTIME_THRESHOLD_HOURS", "45")
LATE_NIGHT_THRESHOLD_HOURS = os.getenv("LATE_NIGHT_THRESHOLD_HOURS", "20")
HOLIDAY_THRESHOLD_HOURS = os.getenv("HOLIDAY_THRESHOLD_HOURS", "15")
