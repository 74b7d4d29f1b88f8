"""Open-Interval Enforcement — verifies the current/end_date rule.

Tests:
    - current=True with an end_date is rejected
    - end_date before start_date is rejected
    - Merged update state is what gets checked
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from fedlink.core.enforce_intervals import as_utc, check_interval, merged_interval
from fedlink.core.errors import ValidationError

START = datetime(2020, 1, 1, tzinfo=timezone.utc)
END = datetime(2022, 6, 30, tzinfo=timezone.utc)


def test_open_interval_allowed():
    check_interval(START, None, True)
    check_interval(START, END, False)


def test_current_with_end_date_rejected():
    with pytest.raises(ValidationError) as exc:
        check_interval(START, END, True)
    assert exc.value.field == "end_date"
    assert exc.value.http_status == 400


def test_end_before_start_rejected():
    with pytest.raises(ValidationError):
        check_interval(END, START, False)


def test_merge_uses_patch_over_stored():
    stored = SimpleNamespace(start_date=START, end_date=END, current=False)
    assert merged_interval(stored, {"current": True}) == (START, END, True)
    assert merged_interval(stored, {"current": True, "end_date": None}) == (START, None, True)


def test_naive_datetimes_read_as_utc():
    assert as_utc(datetime(2021, 1, 1)).tzinfo == timezone.utc
