"""Tests for utils/timezone.py - UTC-everywhere time handling."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from utils.timezone import DISPLAY_TIMEZONE, now_utc, parse_timestamp, to_local, to_utc


class TestNowUtc:
    """Tests for now_utc()."""

    def test_is_utc(self):
        result = now_utc()
        assert result.tzinfo == timezone.utc


class TestToUtc:
    """Tests for to_utc()."""

    def test_raises_on_naive(self):
        """Naive datetime must raise ValueError."""
        with pytest.raises(ValueError, match="naive"):
            to_utc(datetime(2024, 1, 1, 12, 0, 0))

    def test_converts_shop_time(self):
        """Sao Paulo 09:00 is UTC 12:00."""
        local = datetime(2024, 1, 1, 9, 0, 0, tzinfo=ZoneInfo("America/Sao_Paulo"))
        result = to_utc(local)
        assert result.tzinfo == timezone.utc
        assert result.hour == 12


class TestToLocal:
    """Tests for to_local()."""

    def test_defaults_to_shop_timezone(self):
        result = to_local(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))
        assert result.hour == 9
        assert str(result.tzinfo) == DISPLAY_TIMEZONE

    def test_other_timezone(self):
        """UTC 18:00 should become Chicago 12:00 in January."""
        result = to_local(datetime(2024, 1, 1, 18, 0, 0, tzinfo=timezone.utc), "America/Chicago")
        assert result.hour == 12

    def test_raises_on_naive(self):
        with pytest.raises(ValueError, match="naive"):
            to_local(datetime(2024, 1, 1, 12, 0, 0))

    def test_raises_on_invalid_timezone(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            to_local(now_utc(), "Not/A/Timezone")


class TestParseTimestamp:
    """Tests for parse_timestamp()."""

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_is_none(self, value):
        assert parse_timestamp(value) is None

    def test_handles_zulu(self):
        result = parse_timestamp("2024-01-01T12:00:00.000Z")
        assert result == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_handles_offset(self):
        """12:00-03:00 is 15:00 UTC."""
        result = parse_timestamp("2024-01-01T12:00:00-03:00")
        assert result.tzinfo == timezone.utc
        assert result.hour == 15

    def test_date_only_is_utc_midnight(self):
        assert parse_timestamp("2024-01-05") == datetime(2024, 1, 5, tzinfo=timezone.utc)

    def test_date_object(self):
        assert parse_timestamp(date(2024, 1, 5)) == datetime(2024, 1, 5, tzinfo=timezone.utc)

    def test_naive_assumed_utc(self):
        result = parse_timestamp("2024-01-01T12:00:00")
        assert result.tzinfo == timezone.utc
        assert result.hour == 12

    def test_aware_datetime_converted(self):
        aware = datetime(2024, 1, 1, 12, tzinfo=ZoneInfo("America/Sao_Paulo"))
        result = parse_timestamp(aware)
        assert result.tzinfo == timezone.utc
        assert result.hour == 15

    def test_raises_on_garbage(self):
        with pytest.raises(ValueError):
            parse_timestamp("05/01/2024")
