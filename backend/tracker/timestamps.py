"""
Timestamp and number normalization for stored workout documents.

Workout documents were written by several client versions, so a single
`date` field can hold a native datetime, a BSON/Firestore style timestamp,
a `{seconds, nanoseconds}` mapping, an ISO string or epoch seconds/millis.
Every reader goes through `normalize_timestamp` and `coerce_number` instead
of checking shapes at the use site.
"""

import math
from dataclasses import dataclass
from datetime import datetime, date, timezone
from typing import Any, Optional
from dateutil import parser

# below this magnitude a number is epoch seconds, otherwise epoch millis
EPOCH_SECONDS_LIMIT = 10_000_000_000


@dataclass(frozen=True)
class NormalizedTimestamp:
    """Best-effort instant plus where it came from."""
    value: datetime
    source: str
    is_fallback: bool = False


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _from_epoch_millis(millis: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _native_conversion(raw: Any) -> Optional[datetime]:
    for method_name in ("as_datetime", "to_datetime", "toDate"):
        method = getattr(raw, method_name, None)
        if callable(method):
            converted = method()
            if isinstance(converted, datetime):
                return _as_utc(converted)
    return None


def _seconds_field(raw: Any):
    if isinstance(raw, dict):
        if "seconds" not in raw:
            return None
        return raw.get("seconds"), raw.get("nanoseconds")
    if hasattr(raw, "seconds") and hasattr(raw, "nanoseconds"):
        return raw.seconds, raw.nanoseconds
    return None


# two defaults that differ in year, month and day
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _parse_full_date(raw: str) -> Optional[datetime]:
    """
    Non-ISO strings such as "Tue, 20 Oct 2026 09:00:00 GMT".

    Strings that leave the year, month or day to the parser ("Monday", "10")
    are rejected instead of being completed from the clock.
    """
    try:
        first, second = (parser.parse(raw, default=d) for d in _PARSE_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first


def normalize_timestamp(raw: Any, now: Optional[datetime] = None) -> NormalizedTimestamp:
    """
    Convert any stored timestamp shape into a UTC-aware datetime.

    Never raises: input that cannot be interpreted resolves to `now`
    (the current time when not given) with `is_fallback=True`.
    """
    try:
        if raw is not None and not isinstance(raw, (str, int, float, datetime, date, dict)):
            converted = _native_conversion(raw)
            if converted is not None:
                return NormalizedTimestamp(converted, "native")

        if isinstance(raw, datetime):
            return NormalizedTimestamp(_as_utc(raw), "datetime")
        if isinstance(raw, date):
            return NormalizedTimestamp(
                datetime(raw.year, raw.month, raw.day, tzinfo=timezone.utc), "date"
            )

        seconds_field = _seconds_field(raw)
        if seconds_field is not None:
            seconds, nanos = seconds_field
            millis = coerce_number(seconds) * 1000 + coerce_number(nanos) / 1_000_000
            converted = _from_epoch_millis(millis)
            if converted is not None:
                return NormalizedTimestamp(converted, "seconds")

        if isinstance(raw, str) and raw.strip():
            try:
                return NormalizedTimestamp(_as_utc(parser.isoparse(raw.strip())), "string")
            except (ValueError, OverflowError):
                parsed = _parse_full_date(raw)
                if parsed is not None:
                    return NormalizedTimestamp(_as_utc(parsed), "string")

        if isinstance(raw, (int, float)) and not isinstance(raw, bool) and math.isfinite(raw):
            millis = raw * 1000 if abs(raw) < EPOCH_SECONDS_LIMIT else raw
            converted = _from_epoch_millis(millis)
            if converted is not None:
                return NormalizedTimestamp(converted, "epoch")
    except (TypeError, ValueError, OverflowError, AttributeError):
        pass

    return NormalizedTimestamp(_as_utc(now) if now else utc_now(), "fallback", True)


def to_datetime(raw: Any, now: Optional[datetime] = None) -> datetime:
    return normalize_timestamp(raw, now).value


def coerce_number(value: Any) -> float:
    """Finite-or-zero numeric coercion for loosely typed set fields."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    elif not isinstance(value, (int, float)):
        to_decimal = getattr(value, "to_decimal", None)
        if callable(to_decimal):
            value = to_decimal()
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0
