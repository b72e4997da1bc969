"""Conversions between backend date strings and form input values.

The backend speaks ISO-8601 instants (``2025-01-31T00:00:00.000Z``) while the
forms work on calendar days (``2025-01-31``). All conversions happen in UTC so
that a day survives the round trip unchanged.
"""
from datetime import date, datetime, timezone
from typing import Any, Optional

import pandas as pd

INPUT_FORMAT = "%Y-%m-%d"
LABEL_FORMAT = "%d %b %Y"

# pandas resolves these against the wall clock
RELATIVE_KEYWORDS = ("now", "today")


def parse_instant(value: Any) -> Optional[datetime]:
    """Parse a date-like value into a timezone-aware UTC datetime, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None
    if value.strip().lower() in RELATIVE_KEYWORDS:
        return None
    try:
        ts = pd.to_datetime(value.strip(), utc=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts.to_pydatetime()


def to_date_input_value(value: Any) -> str:
    """Convert a backend date to ``YYYY-MM-DD`` for date inputs."""
    if value is None or value == "":
        return ""
    instant = parse_instant(value)
    if instant is None:
        return str(value)
    return instant.strftime(INPUT_FORMAT)


def to_iso_string(value: Any) -> str:
    """Convert ``YYYY-MM-DD`` (or any parsable date) to a backend ISO instant."""
    if value is None or value == "":
        return ""
    instant = parse_instant(value)
    if instant is None:
        return str(value)
    millis = instant.microsecond // 1000
    return instant.strftime("%Y-%m-%dT%H:%M:%S") + f".{millis:03d}Z"


def format_date_label(value: Any) -> str:
    instant = parse_instant(value)
    if instant is None:
        return ""
    return instant.strftime(LABEL_FORMAT)
