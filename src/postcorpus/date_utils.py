"""Utility helpers for parsing frontmatter dates."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime

from dateutil import parser as date_parser

# Two defaults that differ in every calendar field. A component missing from
# the input shows up as a disagreement between the two parses.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))  # noqa: DTZ001
_ISO_CALENDAR_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def parse_post_date(value: object) -> date | None:
    """Coerce a frontmatter ``date`` value to a calendar date.

    YAML already turns bare ``2026-02-08`` values into ``date`` objects;
    quoted strings go through ``dateutil``, ISO-8601 first and a lenient
    parse second. Aware datetimes are converted to UTC before truncation.
    Strings must name a year, month and day; partial dates such as
    ``"March 2026"`` are rejected rather than completed.

    Returns:
        The parsed date, or ``None`` when the value cannot be interpreted.

    """
    if isinstance(value, datetime):
        return _to_utc_date(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if _ISO_CALENDAR_DATE.match(normalized):
        try:
            return _to_utc_date(date_parser.isoparse(normalized))
        except (ValueError, OverflowError, TypeError):
            pass

    try:
        first, second = (date_parser.parse(normalized, default=default) for default in _FILL_DEFAULTS)
    except (ValueError, OverflowError, TypeError):
        return None
    if first.date() != second.date():
        return None
    return _to_utc_date(first)


def _to_utc_date(parsed: datetime) -> date:
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC)
    return parsed.date()


def days_between(first: date, second: date) -> int:
    """Absolute number of days separating two dates."""
    return abs((first - second).days)
