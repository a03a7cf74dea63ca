"""Tests for timestamp.py normalization."""

import time
from datetime import datetime, timedelta, timezone

import pytest

from rcmonitor.timestamp import iso8601_from_dt, to_iso8601


class TestToIso8601:
    """Tests for converting API timestamp values."""

    def test_string_passthrough(self):
        assert to_iso8601("2024-05-01T12:00:00Z") == "2024-05-01T12:00:00Z"

    def test_struct_time(self):
        value = time.strptime("2024-05-01 12:00:00", "%Y-%m-%d %H:%M:%S")
        assert to_iso8601(value) == "2024-05-01T12:00:00Z"

    def test_naive_datetime_is_utc(self):
        assert to_iso8601(datetime(2024, 5, 1, 12, 0, 0)) == "2024-05-01T12:00:00Z"

    def test_aware_datetime_converted_to_utc(self):
        value = datetime(2024, 5, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso8601(value) == "2024-05-01T12:00:00Z"

    def test_none_is_empty(self):
        assert to_iso8601(None) == ""

    def test_invalid_string_raises(self):
        with pytest.raises(ValueError):
            to_iso8601("01 May 2024")

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError):
            to_iso8601(1714564800)


def test_iso8601_from_dt():
    assert iso8601_from_dt(datetime(2025, 8, 19, 19, 32, tzinfo=timezone.utc)) == "2025-08-19T19:32:00Z"
