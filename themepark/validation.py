"""
Checks on raw user input, done before any core operation is called.
Each helper raises ValueError with a message meant for the user.
"""

from datetime import datetime, timedelta

from themepark.bookings.booking import TIME_FORMAT
from themepark.core import Clock


def require_text(value, field: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{field} cannot be blank")
    return str(value).strip()


def require_int_range(value, lo: int, hi: int, field: str) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValueError(f"{field} must be a whole number between {lo} and {hi}") from None
    if not lo <= number <= hi:
        raise ValueError(f"{field} must be a whole number between {lo} and {hi}")
    return number


def parse_booking_time(text, clock: Clock, min_advance_minutes: int = 10) -> datetime:
    """Parse 'YYYY-MM-DD HH:MM' and require it to be at least min_advance_minutes ahead."""
    text = require_text(text, "Booking time")
    try:
        when = datetime.strptime(text, TIME_FORMAT)
    except ValueError:
        raise ValueError("Booking time must look like 2025-12-01 14:30") from None

    now = clock.now()
    if when < now:
        raise ValueError(f"Booking time cannot be in the past (now: {now.strftime(TIME_FORMAT)})")
    if when < now + timedelta(minutes=min_advance_minutes):
        raise ValueError(f"Bookings must be made at least {min_advance_minutes} minutes ahead")
    return when
