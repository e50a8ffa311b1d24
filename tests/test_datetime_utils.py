"""Tests for UTC datetime helpers."""

from datetime import datetime, timedelta, timezone

from tutorescrow.utils.datetime import now_utc, to_naive_utc


class TestNaiveUtc:
    """Test conversion to the stored naive-UTC form."""

    def test_now_utc_is_naive(self):
        assert now_utc().tzinfo is None

    def test_naive_input_unchanged(self):
        value = datetime(2026, 3, 2, 12, 0)
        assert to_naive_utc(value) is value

    def test_aware_input_converted(self):
        value = datetime(2026, 3, 2, 23, 30, tzinfo=timezone(timedelta(hours=-4)))
        assert to_naive_utc(value) == datetime(2026, 3, 3, 3, 30)

    def test_none_passes_through(self):
        assert to_naive_utc(None) is None
