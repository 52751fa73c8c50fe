"""Due/start date normalization to epoch milliseconds.

Callers may send a calendar string ("2024-01-15", "2024-01-15T09:30:00+08:00")
or a number they already converted to epoch millis. Values without a UTC
offset are read as UTC, so "2024-01-15" is 1705276800000 on every machine.
Anything that cannot be parsed is unresolved and leaves the field untouched.
"""
from datetime import datetime, timezone
from typing import Any, Optional, Union

from .field_catalog import NOT_REQUESTED, Lookup, Resolution


# Accepted in addition to ISO-8601
EXTRA_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
)


def _parse_calendar(text: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in EXTRA_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def resolve_date(value: Any) -> Lookup:
    """Three-state date normalization."""
    if value is None:
        return NOT_REQUESTED

    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        return Lookup(Resolution.UNRESOLVED, requested=value)

    if isinstance(value, (int, float)):
        return Lookup(Resolution.RESOLVED, value=value, requested=value)

    if isinstance(value, str):
        text = value.strip()
        if text.isascii() and text.isdigit():
            return Lookup(Resolution.RESOLVED, value=int(text), requested=value)
        moment = _parse_calendar(text) if text else None
        if moment is not None:
            return Lookup(Resolution.RESOLVED, value=_to_millis(moment), requested=value)

    return Lookup(Resolution.UNRESOLVED, requested=value)


def normalize_date(value: Any) -> Optional[Union[int, float]]:
    """Epoch millis for ``value``, or None when absent or unparseable."""
    return resolve_date(value).value_or_none()
