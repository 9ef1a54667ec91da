from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current organization wall-clock time (naive).

    Note: Wrapped so tests can inject a fixed clock instead.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def parse_instant(value: str, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Parse an ISO-8601 timestamp with offset into organization wall-clock time.

    Naive strings are rejected: without an offset the instant is ambiguous.
    """
    if not value or not value.strip():
        raise ValidationError("Timestamp is required")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid ISO-8601 timestamp: {value!r}") from None
    if parsed.tzinfo is None:
        raise ValidationError("Timestamp must include a UTC offset")
    return parsed.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)


def to_instant(value: datetime | None, tz_name: str = DEFAULT_TIMEZONE) -> str | None:
    """Format an organization wall-clock value as ISO-8601 with offset."""
    if value is None:
        return None
    return value.replace(tzinfo=ZoneInfo(tz_name)).isoformat()
