"""Tests for date normalization to epoch milliseconds."""
import pytest

from leiga_mcp.dates import normalize_date, resolve_date
from leiga_mcp.field_catalog import Resolution


JAN_15_2024_UTC = 1_705_276_800_000


class TestNormalizeDate:

    def test_absent_input(self):
        assert normalize_date(None) is None

    def test_calendar_date_is_utc_midnight(self):
        assert normalize_date("2024-01-15") == JAN_15_2024_UTC

    def test_numbers_pass_through_unchanged(self):
        assert normalize_date(1700000000000) == 1700000000000
        assert normalize_date(1700000000000.5) == 1700000000000.5
        assert normalize_date(0) == 0

    def test_digit_string_is_epoch_millis(self):
        assert normalize_date("1700000000000") == 1700000000000

    @pytest.mark.parametrize("value,expected", [
        ("2024-01-15T00:00:00", JAN_15_2024_UTC),
        ("2024-01-15 10:30", JAN_15_2024_UTC + (10 * 60 + 30) * 60_000),
        ("2024-01-15T08:00:00+08:00", JAN_15_2024_UTC),
        ("2024-01-15T00:00:00Z", JAN_15_2024_UTC),
        ("2024/01/15", JAN_15_2024_UTC),
        ("  2024-01-15  ", JAN_15_2024_UTC),
    ])
    def test_accepted_formats(self, value, expected):
        assert normalize_date(value) == expected

    @pytest.mark.parametrize("value", ["not-a-date", "", "   ", "2024-13-45", "15/01/2024", "tomorrow", "²", "2²"])
    def test_unparseable_strings_are_absent(self, value):
        assert normalize_date(value) is None

    def test_non_date_types_are_absent(self):
        assert normalize_date(True) is None
        assert normalize_date(["2024-01-15"]) is None


class TestResolveDateStates:

    def test_not_requested(self):
        assert resolve_date(None).state is Resolution.NOT_REQUESTED

    def test_resolved(self):
        lookup = resolve_date("2024-01-15")
        assert lookup.state is Resolution.RESOLVED
        assert lookup.requested == "2024-01-15"

    def test_unresolved_keeps_request(self):
        lookup = resolve_date("not-a-date")
        assert lookup.state is Resolution.UNRESOLVED
        assert lookup.requested == "not-a-date"
