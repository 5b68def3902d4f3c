"""Tests for timestamp helpers."""

from datetime import datetime, timezone

import pytest

from formbuilder.utils import parse_dt, to_iso


def test_parse_dt_reads_naive_as_utc():
    assert parse_dt("2024-02-03T04:05:06") == datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone.utc)


def test_parse_dt_round_trips_to_iso():
    value = datetime(2024, 2, 3, 4, 5, 6, 789, tzinfo=timezone.utc)

    assert parse_dt(to_iso(value)) == value


@pytest.mark.parametrize("value", ["yesterday", "", None, 1700000000])
def test_parse_dt_rejects_corrupt_values(value):
    with pytest.raises(ValueError):
        parse_dt(value)
