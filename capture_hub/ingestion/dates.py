"""
Date Parsing Module
===================

Turns the ad hoc date strings found in scraped captures into
``YYYY-MM-DD`` form. Parsing is best-effort: anything that cannot be
interpreted is reported as ``None`` (or returned verbatim by
``normalize_date``) rather than raising.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

MONTHS: dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

# Abbreviated or full month name, e.g. "Jun", "June", "Sept."
_MONTH = r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# "Jun 11(Wed)-Jun 13(Fri)", "Jun 11 (Wed) - Jun 13 (Fri)", "Dec 30 – Jan 2"
RANGE_PATTERN = re.compile(
    _MONTH + r"\s+(\d{1,2})(?:\s*\([^)]*\))?\s*[-–—]\s*" + _MONTH + r"\s+(\d{1,2})(?:\s*\([^)]*\))?",
    re.I,
)

# "Jan 1-3, 2023" or "Jan 1, 2023"
YEAR_PATTERN = re.compile(_MONTH + r"\s+(\d{1,2})(?:\s*[-–]\s*(\d{1,2}))?,\s*(\d{4})", re.I)

# "Jan 1"
SIMPLE_PATTERN = re.compile(_MONTH + r"\s+(\d{1,2})\b", re.I)

# "MAY SAT 24", "May 24", "MAY24"
LOOSE_PATTERN = re.compile(
    r"(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?"
    r"(?:\s+(?:mon|tue|wed|thu|fri|sat|sun)[a-z]*\.?)?\s*(\d{1,2})(?!\d)",
    re.I,
)


@dataclass(frozen=True)
class DateRange:
    """Start and end of an event in ``YYYY-MM-DD`` form."""

    start_date: str
    end_date: str

    @property
    def is_range(self) -> bool:
        """True when the event spans more than one day."""
        return self.start_date != self.end_date


def current_year() -> int:
    """Year assumed for date strings that do not carry one."""
    return date.today().year


def is_iso_date(value: object) -> bool:
    """Check whether a value is already a ``YYYY-MM-DD`` string."""
    return isinstance(value, str) and bool(ISO_DATE_PATTERN.match(value))


def month_number(name: str) -> int | None:
    """Map a month name or abbreviation to 1-12."""
    return MONTHS.get(name[:3].lower())


def _to_date(month: str, day: str, year: int) -> date | None:
    number = month_number(month)
    if number is None:
        return None
    try:
        return date(year, number, int(day))
    except ValueError:
        return None


def _date_range(start: date, end: date) -> DateRange:
    # A range such as "Dec 30 - Jan 2" crosses into the next year
    if end < start:
        try:
            end = end.replace(year=end.year + 1)
        except ValueError:
            end = start
    return DateRange(start.isoformat(), end.isoformat())


def parse_event_date(value: str | None) -> DateRange | None:
    """
    Parse an event date string into a start/end pair.

    Supported formats, tried in order:
    - "Jun 11(Wed)-Jun 13(Fri)" (explicit range, optional day-of-week)
    - "Jan 1-3, 2023" / "Jan 1, 2023" (explicit year)
    - "Jan 1" (current year)

    Args:
        value: Raw date string

    Returns:
        DateRange, or None if no supported format matched
    """
    if not value or not isinstance(value, str):
        return None

    cleaned = re.sub(r"\s+", " ", value).strip()
    year = current_year()

    match = RANGE_PATTERN.search(cleaned)
    if match:
        start = _to_date(match.group(1), match.group(2), year)
        end = _to_date(match.group(3), match.group(4), year)
        if start and end:
            return _date_range(start, end)

    match = YEAR_PATTERN.search(cleaned)
    if match:
        explicit_year = int(match.group(4))
        start = _to_date(match.group(1), match.group(2), explicit_year)
        if start:
            if match.group(3):
                end = _to_date(match.group(1), match.group(3), explicit_year)
                if end:
                    return _date_range(start, end)
            return DateRange(start.isoformat(), start.isoformat())

    match = SIMPLE_PATTERN.search(cleaned)
    if match:
        start = _to_date(match.group(1), match.group(2), year)
        if start:
            return DateRange(start.isoformat(), start.isoformat())

    return None


def normalize_date(value: str) -> str:
    """
    Best-effort conversion of a loose date string to ``YYYY-MM-DD``.

    Already-canonical strings are returned unchanged; strings that cannot
    be parsed are returned verbatim.
    """
    if not value or is_iso_date(value):
        return value

    match = LOOSE_PATTERN.search(value.strip())
    if not match:
        return value

    parsed = _to_date(match.group(1), match.group(2), current_year())
    return parsed.isoformat() if parsed else value
