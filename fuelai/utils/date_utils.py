"""
Calendar date helpers.

Calendar dates travel as plain ``YYYY-MM-DD`` strings and are only ever
turned into ``datetime.date`` values from their integer components, so the
weekday of a date never depends on the process timezone.
"""
import re
from datetime import date, datetime
from typing import Any, Optional

from fuelai.core.exceptions import ValidationError
from fuelai.models.meal_plan import DayOfWeek, DAYS_OF_WEEK

CALENDAR_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
# Date prefix of an ISO datetime; the time and offset that follow are ignored
ISO_DATETIME_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})[T ]")


def parse_calendar_date(value: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` string into a date.

    Raises:
        ValidationError: If the string is not a valid calendar date.
    """
    match = CALENDAR_DATE_PATTERN.match(value or "")
    if not match:
        raise ValidationError(f"Invalid calendar date '{value}', expected YYYY-MM-DD")

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        raise ValidationError(f"Invalid calendar date '{value}'")


def day_of_week_for(calendar_date: date) -> DayOfWeek:
    """Weekday of a date in the proleptic Gregorian calendar."""
    return DAYS_OF_WEEK[calendar_date.weekday()]


def coerce_calendar_date(value: Any) -> Optional[date]:
    """
    Reduce a deadline value to its calendar date.

    Accepts dates, ``YYYY-MM-DD`` strings and ISO datetime strings. For
    datetimes only the written date is kept; neither the time of day nor the
    UTC offset shifts it.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value = value.strip()
        prefix = ISO_DATETIME_PREFIX.match(value)
        if prefix:
            value = value[:10]
        return parse_calendar_date(value)
    raise ValidationError(f"Invalid calendar date '{value}'")
