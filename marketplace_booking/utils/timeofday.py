# marketplace_booking/utils/timeofday.py
"""
Wall-clock helpers for the HH:MM / HH:MM:SS and YYYY-MM-DD wire formats.
No timezone is carried anywhere; values are local to the resource.
"""
from datetime import date, datetime, time
from typing import Union

TIME_FORMATS = ("%H:%M:%S", "%H:%M")


def parse_time_of_day(value: Union[str, time]) -> time:
    """Parse "HH:MM" or "HH:MM:SS" (24h) into a time"""
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)
    if not isinstance(value, str):
        raise ValueError(f"Invalid time of day {value!r}, expected HH:MM or HH:MM:SS")

    text = value.strip()
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid time of day '{value}', expected HH:MM or HH:MM:SS")


def format_time_of_day(value: time) -> str:
    """Render as HH:MM, or HH:MM:SS when seconds are set"""
    if value.second:
        return value.strftime("%H:%M:%S")
    return value.strftime("%H:%M")


def parse_date(value: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD calendar date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")


def day_of_week(value: date) -> int:
    """Weekday number with Sunday = 0 ... Saturday = 6"""
    return (value.weekday() + 1) % 7


def seconds_since_midnight(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def time_from_seconds(seconds: int) -> time:
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return time(hours, minutes, secs)
