"""
Timestamp utilities for MediaWiki API values.

The API returns ISO 8601 strings, but mwclient listings convert them to
time.struct_time. Records carry a single normalized string form so that
reports are stable regardless of which path produced the record.
"""

import calendar
import time
from datetime import datetime, timezone

ISO8601_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def iso8601_from_dt(datetime_obj: datetime) -> str:
    """Return ISO8601 with 'Z'."""
    if datetime_obj.tzinfo is None:
        datetime_obj = datetime_obj.replace(tzinfo=timezone.utc)
    return datetime_obj.astimezone(timezone.utc).strftime(ISO8601_FORMAT)


def to_iso8601(timestamp_value) -> str:
    """
    Convert various timestamp representations to "YYYY-MM-DDTHH:MM:SSZ":
      - str in ISO8601 (validated and returned normalized)
      - time.struct_time (as returned by mwclient listings)
      - datetime (naive values are taken as UTC)
      - None (returned as an empty string)
    """
    if timestamp_value is None:
        return ""
    if isinstance(timestamp_value, str):
        datetime_obj = datetime.strptime(timestamp_value, ISO8601_FORMAT).replace(tzinfo=timezone.utc)
    elif isinstance(timestamp_value, time.struct_time):
        # struct_time is in UTC for MediaWiki API; use calendar.timegm
        datetime_obj = datetime.fromtimestamp(calendar.timegm(timestamp_value), tz=timezone.utc)
    elif isinstance(timestamp_value, datetime):
        datetime_obj = timestamp_value
    else:
        raise TypeError(f"Unsupported timestamp type: {type(timestamp_value)!r}")
    return iso8601_from_dt(datetime_obj)


__all__ = [
    'ISO8601_FORMAT',
    'iso8601_from_dt',
    'to_iso8601',
]
