"""Conversion of stored date values into one canonical datetime type.

Documents coming back from the store carry dates in whatever shape the backend
produced: ISO strings, native datetimes, epoch milliseconds, or timestamp
objects such as ``{"seconds": ..., "nanoseconds": ...}``. Everything downstream
(chronological ordering, improvement deltas) works on timezone-aware UTC
datetimes only, so coercion happens once, here.

Unparseable input degrades to the current time with a warning instead of
failing the whole history.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Optional

from loguru import logger


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are assumed to already be UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_epoch_seconds(seconds: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if _is_number(value):
        return _from_epoch_seconds(value / 1000.0)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return _as_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        nanos = value.get("nanoseconds", value.get("_nanoseconds", 0))
        if _is_number(seconds) and _is_number(nanos):
            return _from_epoch_seconds(seconds + nanos / 1e9)
        return None
    for attr in ("to_datetime", "toDate"):
        convert = getattr(value, attr, None)
        if callable(convert):
            try:
                converted = convert()
            except Exception:
                logger.opt(exception=True).debug("{}() failed for {!r}", attr, value)
                return None
            if isinstance(converted, datetime):
                return _as_utc(converted)
    return None


def ensure_datetime(value: Any) -> datetime:
    """Coerce ``value`` to an aware UTC datetime, falling back to now."""

    parsed = _parse(value)
    if parsed is None:
        logger.warning("Could not parse date {!r}, using current time instead", value)
        return utcnow()
    return parsed


def format_date(value: Any) -> str:
    """Local-time display string for a stored date."""

    return ensure_datetime(value).astimezone().strftime("%Y-%m-%d %H:%M:%S")


__all__ = ["ensure_datetime", "format_date", "utcnow"]
