"""Conversions of dates and date-times to their stored numeric stamps."""

from __future__ import annotations

import datetime as _dt

from chtypes.sql_types import DateTimeType, SqlType

_UNIX_EPOCH_DAY = 719_163


def days_since_epoch(date: _dt.date) -> int:
    """Days from 1970-01-01 to ``date``, wrapped to an unsigned 16-bit value."""
    return (date.toordinal() - _UNIX_EPOCH_DAY) % (1 << 16)


def date_stamp(value: _dt.date) -> int:
    """The stored Date value for a date (a date-time counts by its date)."""
    if isinstance(value, _dt.datetime):
        value = value.date()
    if not isinstance(value, _dt.date):
        raise TypeError(f"expected a date, got {type(value).__name__}")
    return days_since_epoch(value)


def datetime_stamp(value: _dt.datetime) -> int:
    """The stored 32-bit DateTime value: Unix seconds, wrapped to unsigned."""
    if not isinstance(value, _dt.datetime):
        raise TypeError(f"expected a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("a DateTime value needs a timezone")
    return int(value.timestamp()) % (1 << 32)


def date_sql_type(kind: type) -> SqlType:
    """The column type used to store values of the Python type ``kind``."""
    if isinstance(kind, type) and issubclass(kind, _dt.datetime):
        return SqlType("DateTime", datetime=DateTimeType())
    if isinstance(kind, type) and issubclass(kind, _dt.date):
        return SqlType("Date")
    raise TypeError(f"no date column type for {kind!r}")