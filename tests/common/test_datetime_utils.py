from __future__ import annotations

from datetime import datetime

import pytest

from src.school_attendance.school_attendance.common.datetime_utils import parse_iso_datetime


@pytest.mark.parametrize(
    "value",
    [
        "2026-02-02T00:05:00Z",
        "2026-02-02T00:05:00.000Z",
        "2026-02-02T00:05:00+00:00",
        "2026-02-02T07:05:00+07:00",
        "2026-02-02T09:05:00+09:00",
    ],
)
def test_offset_timestamps_are_converted_to_institution_time(value):
    assert parse_iso_datetime(value, "Asia/Jakarta") == datetime(2026, 2, 2, 7, 5)


def test_utc_conversion_can_cross_midnight():
    assert parse_iso_datetime("2026-02-01T23:30:00Z", "Asia/Jakarta") == datetime(2026, 2, 2, 6, 30)


def test_naive_timestamp_is_taken_as_local():
    assert parse_iso_datetime("2026-02-02T07:05:00", "Asia/Jakarta") == datetime(2026, 2, 2, 7, 5)
    assert parse_iso_datetime(" 2026-02-02T07:05:00 ") == datetime(2026, 2, 2, 7, 5)


def test_result_is_naive():
    assert parse_iso_datetime("2026-02-02T00:05:00Z", "Asia/Jakarta").tzinfo is None


def test_garbage_raises_value_error():
    with pytest.raises(ValueError):
        parse_iso_datetime("yesterday morning", "Asia/Jakarta")
