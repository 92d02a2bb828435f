"""
Date normaliser — turns whatever the ingestion side hands us into a calendar date.

Accepted shapes, in order of precedence:
  1. date / datetime objects            → used as-is (datetime truncated to its date)
  2. pure-digit strings                 → re-read as numbers
  3. |n| < 100 000                      → spreadsheet day-serial from 1899-12-30
  4. |n| < 100 000 000 000              → Unix epoch seconds
  5. anything larger                    → Unix epoch milliseconds
  6. "YYYY-MM-DD"                       → local calendar date (no UTC shift)
  7. other text                         → ISO-8601 date-time, then DD/MM/YYYY variants

Anything that cannot be turned into a valid date returns None; normalize_date
never raises.
"""
from __future__ import annotations

import logging
import math
import numbers
import re
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Optional

from crew_readiness.config import (
    EPOCH_SECONDS_MAX,
    FALLBACK_DATE_FORMATS,
    SPREADSHEET_EPOCH_ISO,
    SPREADSHEET_SERIAL_MAX,
)

logger = logging.getLogger("crew-readiness.dates")

_SPREADSHEET_EPOCH = date.fromisoformat(SPREADSHEET_EPOCH_ISO)
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_DIGITS_RE = re.compile(r"^-?\d+$")


def normalize_date(value: Any) -> Optional[date]:
    """Return the calendar date represented by ``value`` or None if unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return _from_number(value)
    if isinstance(value, (numbers.Real, Decimal)):
        # numpy / Decimal cells from spreadsheet readers
        try:
            return _from_number(float(value))
        except (TypeError, ValueError, OverflowError):
            logger.debug(f"Numeric date {value!r} not convertible")
            return None
    if isinstance(value, str):
        return _from_text(value)
    logger.debug(f"Unsupported date value type: {type(value).__name__}")
    return None


def resolve_today(today: Any = None) -> date:
    """
    Reference date for a classification.

    Only reads the clock when ``today`` is omitted. A supplied value that
    cannot be parsed is a caller error and raises ValueError.
    """
    if today is None:
        return date.today()
    ref = normalize_date(today)
    if ref is None:
        logger.debug(f"Unparseable reference date: {today!r}")
        raise ValueError(f"Invalid reference date {today!r}")
    return ref


def days_between(later: date, earlier: date) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (negative if reversed)."""
    return (later - earlier).days


def _from_number(n: float) -> Optional[date]:
    try:
        if not math.isfinite(n):
            return None
        magnitude = abs(n)
        if magnitude < SPREADSHEET_SERIAL_MAX:
            # Fractional part is time-of-day; day granularity only
            return _SPREADSHEET_EPOCH + timedelta(days=math.floor(n))
        if magnitude < EPOCH_SECONDS_MAX:
            return datetime.fromtimestamp(n, tz=timezone.utc).date()
        return datetime.fromtimestamp(n / 1000.0, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as e:
        logger.debug(f"Numeric date out of range: {e}")
        return None


def _from_text(text: str) -> Optional[date]:
    text = text.strip()
    if not text:
        return None

    if _DIGITS_RE.match(text):
        try:
            n = int(text)
        except ValueError:
            # Past the interpreter's int string-conversion limit
            logger.debug(f"Digit string too long for a date ({len(text)} chars)")
            return None
        return _from_number(n)

    m = _ISO_DATE_RE.match(text)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            logger.debug(f"Invalid calendar date: {text!r}")
            return None

    return _parse_generic(text)


def _parse_generic(text: str) -> Optional[date]:
    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        # Calendar date as written; an offset never shifts the day
        return datetime.fromisoformat(iso).date()
    except ValueError:
        pass

    for fmt in FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparseable date text: {text!r}")
    return None
