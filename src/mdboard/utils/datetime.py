"""Utilities for date handling in tags and gather rules."""

import re
from datetime import date

# @2025-01-17, @2025-1-7
ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
# @17-01-2025 (day first)
DMY_DATE_PATTERN = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")

WEEKDAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
MONTH_NAMES = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")


def today_local() -> date:
    """Get today's date in the local calendar."""
    return date.today()


def is_date_value(value: str) -> bool:
    """True if value matches the tag date grammar (valid day or not)."""
    return bool(ISO_DATE_PATTERN.match(value) or DMY_DATE_PATTERN.match(value))


def parse_tag_date(value: str) -> date | None:
    """Parse a tag date (``YYYY-M-D`` or ``D-M-YYYY``).

    Returns None for strings outside the grammar and for impossible days.
    """
    match = ISO_DATE_PATTERN.match(value)
    if match:
        year, month, day = (int(part) for part in match.groups())
    else:
        match = DMY_DATE_PATTERN.match(value)
        if not match:
            return None
        day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None
