"""
Unit tests for dtresolve.datemath.

Tests grammar validation, unit arithmetic, rounding (calendar and fiscal)
and wall-clock behaviour across DST transitions.
"""
from datetime import datetime

import pytest

from dtresolve.config import config
from dtresolve.datemath import (
    evaluate,
    is_math_string,
    is_valid_expression,
    parse_date_math,
    round_to_fiscal,
)
from dtresolve.timezones import UTC, set_default_time_zone


def utc(*args):
    return datetime(*args, tzinfo=UTC)


class TestIsMathString:
    """Tests for the shape check."""

    @pytest.mark.parametrize("text", ["now", "now-1h", "2024-01-01||+1d"])
    def test_math_strings(self, text):
        """Test now-prefixed and anchored text."""
        assert is_math_string(text)

    @pytest.mark.parametrize("text", ["snow", "2024-01-01", "", None, 42])
    def test_other_values(self, text):
        """Test everything else."""
        assert not is_math_string(text)


class TestIsValidExpression:
    """Tests for grammar validation."""

    @pytest.mark.parametrize("text", [
        "now",
        "now-6h",
        "now-7d/d",
        "now+1y",
        "now/fQ",
        "now-1w/w",
        "now - 1 d",
        "now-1d-1d-1d",
        "2024-01-01",
        "2024-01-01||+1M",
    ])
    def test_valid(self, text):
        """Test well-formed expressions."""
        assert is_valid_expression(text)

    @pytest.mark.parametrize("text", [
        "nownownow",
        "now-",
        "now-5",
        "now/2d",
        "now*1d",
        "now-1x",
        "now/fd",
        "now-12345678901d",
        "now+9999999y",
        "now-1d-1d-1d-1d",
        "2024-01-01||+1x",
        "yesterday||-1d",
        "",
        None,
        42,
    ])
    def test_invalid(self, text):
        """Test malformed expressions and non-string input."""
        assert not is_valid_expression(text)

    def test_accepts_time_zone(self):
        """Test validation with an explicit zone."""
        assert is_valid_expression("now/d", "America/New_York")
        assert is_valid_expression("now/d", "Not/AZone")


class TestEvaluate:
    """Tests for evaluation against a pinned clock."""

    @pytest.mark.parametrize("text,expected", [
        ("now", utc(2024, 3, 15, 12, 20, 30, 123456)),
        ("now-6h", utc(2024, 3, 15, 6, 20, 30, 123456)),
        ("now+90m", utc(2024, 3, 15, 13, 50, 30, 123456)),
        ("now-30s", utc(2024, 3, 15, 12, 20, 0, 123456)),
        ("now - 1 d", utc(2024, 3, 14, 12, 20, 30, 123456)),
        ("now-2w", utc(2024, 3, 1, 12, 20, 30, 123456)),
        ("now+1Q", utc(2024, 6, 15, 12, 20, 30, 123456)),
        ("now-1fy", utc(2023, 3, 15, 12, 20, 30, 123456)),
        ("now-1d/d+8h", utc(2024, 3, 14, 8, 0)),
    ])
    def test_offsets(self, frozen_now, text, expected):
        """Test add and subtract steps."""
        assert evaluate(text, time_zone="UTC") == expected

    @pytest.mark.parametrize("text,start,end", [
        ("now/s", utc(2024, 3, 15, 12, 20, 30), utc(2024, 3, 15, 12, 20, 30, 999999)),
        ("now/m", utc(2024, 3, 15, 12, 20), utc(2024, 3, 15, 12, 20, 59, 999999)),
        ("now/h", utc(2024, 3, 15, 12, 0), utc(2024, 3, 15, 12, 59, 59, 999999)),
        ("now/d", utc(2024, 3, 15), utc(2024, 3, 15, 23, 59, 59, 999999)),
        ("now/w", utc(2024, 3, 10), utc(2024, 3, 16, 23, 59, 59, 999999)),
        ("now/M", utc(2024, 3, 1), utc(2024, 3, 31, 23, 59, 59, 999999)),
        ("now/Q", utc(2024, 1, 1), utc(2024, 3, 31, 23, 59, 59, 999999)),
        ("now/y", utc(2024, 1, 1), utc(2024, 12, 31, 23, 59, 59, 999999)),
    ])
    def test_rounding(self, frozen_now, text, start, end):
        """Test rounding down and up for every unit."""
        assert evaluate(text, round_up=False, time_zone="UTC") == start
        assert evaluate(text, round_up=True, time_zone="UTC") == end

    def test_week_start_from_config(self, frozen_now, monkeypatch):
        """Test weeks can start on Monday."""
        monkeypatch.setattr(config, "WEEK_START", "monday")
        assert evaluate("now/w", time_zone="UTC") == utc(2024, 3, 11)

    def test_month_end_clamping(self):
        """Test month arithmetic clamps to the last day of the month."""
        assert evaluate("2024-03-31||-1M", time_zone="UTC") == utc(2024, 2, 29)
        assert evaluate("2024-01-31||+1M", time_zone="UTC") == utc(2024, 2, 29)

    def test_anchor_without_math(self):
        """Test a bare ISO anchor evaluates to itself in the zone."""
        result = evaluate("2024-01-01", time_zone="Europe/Berlin")
        assert result.isoformat() == "2024-01-01T00:00:00+01:00"

    def test_anchor_with_offset_is_converted(self):
        """Test an anchor carrying an offset is converted before rounding."""
        result = evaluate("2024-03-01T00:00:00Z||/d", time_zone="America/New_York")
        assert result.isoformat() == "2024-02-29T00:00:00-05:00"

    def test_day_keeps_wall_clock_across_dst(self):
        """Test +1d keeps the time of day over the spring-forward night."""
        result = evaluate("2024-03-09T12:00:00||+1d", time_zone="America/New_York")
        assert result.isoformat() == "2024-03-10T12:00:00-04:00"

    def test_hours_move_absolute_time_across_dst(self):
        """Test +24h moves absolute time over the spring-forward night."""
        result = evaluate("2024-03-09T12:00:00||+24h", time_zone="America/New_York")
        assert result.isoformat() == "2024-03-10T13:00:00-04:00"

    def test_day_landing_in_dst_gap(self):
        """Test +1d onto a skipped wall time moves past the gap."""
        result = evaluate("2024-03-09T02:30:00||+1d", time_zone="America/New_York")
        assert result.isoformat() == "2024-03-10T03:30:00-04:00"

    def test_round_up_across_dst_end(self):
        """Test the end of a 25-hour day."""
        result = evaluate("2024-11-03T08:00:00||/d", round_up=True, time_zone="America/New_York")
        assert result.isoformat() == "2024-11-03T23:59:59.999999-05:00"

    def test_invalid_returns_none(self):
        """Test malformed text evaluates to None."""
        assert evaluate("nownownow", time_zone="UTC") is None
        assert evaluate(42) is None

    def test_instant_passes_through(self):
        """Test an aware datetime is returned as-is."""
        value = utc(2024, 1, 1)
        assert evaluate(value) is value

    def test_uses_default_zone(self, frozen_now):
        """Test evaluation without a zone uses the process default."""
        set_default_time_zone("Asia/Tokyo")
        assert evaluate("now/d").isoformat() == "2024-03-15T00:00:00+09:00"


class TestFiscalRounding:
    """Tests for fiscal year and quarter rounding."""

    def test_fiscal_year(self, frozen_now):
        """Test fiscal year starting in April."""
        assert evaluate("now/fy", time_zone="UTC", fiscal_year_start_month=3) == utc(2023, 4, 1)
        assert evaluate("now/fy", round_up=True, time_zone="UTC", fiscal_year_start_month=3) == \
            utc(2024, 3, 31, 23, 59, 59, 999999)

    def test_fiscal_quarter(self, frozen_now):
        """Test fiscal quarters for a year starting in February."""
        assert evaluate("now/fQ", time_zone="UTC", fiscal_year_start_month=1) == utc(2024, 2, 1)
        assert evaluate("now/fQ", round_up=True, time_zone="UTC", fiscal_year_start_month=1) == \
            utc(2024, 4, 30, 23, 59, 59, 999999)

    def test_calendar_fiscal_year(self, frozen_now):
        """Test a January fiscal year matches the calendar year."""
        assert evaluate("now/fy", time_zone="UTC", fiscal_year_start_month=0) == utc(2024, 1, 1)

    def test_fiscal_start_from_config(self, frozen_now, monkeypatch):
        """Test the configured fiscal start month is the default."""
        monkeypatch.setattr(config, "FISCAL_YEAR_START_MONTH", 3)
        assert evaluate("now/fy", time_zone="UTC") == utc(2023, 4, 1)

    def test_unsupported_unit(self):
        """Test only years and quarters have fiscal rounding."""
        assert round_to_fiscal(0, utc(2024, 3, 15), "d", False) is None


class TestParseDateMath:
    """Tests for applying a math suffix to an existing instant."""

    def test_applies_steps(self):
        """Test several steps in sequence."""
        assert parse_date_math("+1d/d-1h", utc(2024, 1, 1, 15)) == utc(2024, 1, 1, 23)

    def test_empty_suffix(self):
        """Test an empty suffix leaves the time alone."""
        assert parse_date_math("", utc(2024, 1, 1)) == utc(2024, 1, 1)

    @pytest.mark.parametrize("math", ["1d", "+1", "/3h", "+1z"])
    def test_malformed(self, math):
        """Test malformed suffixes."""
        assert parse_date_math(math, utc(2024, 1, 1)) is None
