"""
Tests for input coercion and calendar keys (``ledger_kernel.domain.values``).

Covers:
- Numeric form input coerces to int / Decimal and never raises.
- Day keys step across month and year boundaries.
- Malformed day and month keys raise InvalidDateKeyError.
"""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.domain.values import (
    coerce_decimal,
    coerce_int,
    coerce_quantity,
    day_key,
    decimal_to_str,
    is_valid_pin,
    month_key,
    next_day_key,
    parse_day_key,
    parse_month_key,
    previous_day_key,
    validate_pin,
)
from ledger_kernel.exceptions import InvalidDateKeyError, PinFormatError


class TestCoercion:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("3", 3),
            ("", 0),
            ("abc", 0),
            (None, 0),
            ("12abc", 12),
            (" 7", 7),
            (4.9, 4),
            ("-2", -2),
            ("9" * 5000, 0),
        ],
    )
    def test_coerce_int(self, raw, expected):
        assert coerce_int(raw) == expected

    def test_quantity_clamps_negative_to_zero(self):
        assert coerce_quantity("-5") == 0
        assert coerce_quantity(-1) == 0
        assert coerce_quantity("2") == 2

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("100", Decimal("100")),
            ("12.50", Decimal("12.50")),
            ("", Decimal("0")),
            ("abc", Decimal("0")),
            (None, Decimal("0")),
            (0.1, Decimal("0.1")),
            ("NaN", Decimal("0")),
            (Decimal("Infinity"), Decimal("0")),
            ("-20", Decimal("-20")),
            ("1e30", Decimal("1E+30")),
            ("1e999999", Decimal("0")),
            ("1e-999999", Decimal("0")),
        ],
    )
    def test_coerce_decimal(self, raw, expected):
        assert coerce_decimal(raw) == expected

    def test_decimal_to_str_drops_exponent(self):
        assert decimal_to_str(Decimal("350")) == "350"
        assert decimal_to_str(Decimal("3.5E+2")) == "350"
        assert decimal_to_str(Decimal("12.50")) == "12.5"
        assert decimal_to_str(Decimal("0")) == "0"
        assert decimal_to_str(Decimal("-0.00")) == "0"
        assert decimal_to_str(Decimal("1.200E+1")) == "12"

    def test_decimal_to_str_beyond_context_precision(self):
        assert decimal_to_str(Decimal("1E+30")) == "1" + "0" * 30
        assert decimal_to_str(Decimal("12345678901234567890123456789")) == "12345678901234567890123456789"
        assert decimal_to_str(Decimal("12345678901234567890123456789.50")) == "12345678901234567890123456789.5"


class TestDayKeys:
    def test_round_trip(self):
        assert parse_day_key(day_key(date(2024, 3, 15))) == date(2024, 3, 15)

    def test_next_day_rolls_month_and_year(self):
        assert next_day_key("2024-01-31") == "2024-02-01"
        assert next_day_key("2024-02-28") == "2024-02-29"
        assert next_day_key("2023-12-31") == "2024-01-01"

    def test_previous_day_rolls_back(self):
        assert previous_day_key("2024-03-01") == "2024-02-29"
        assert previous_day_key("2024-01-01") == "2023-12-31"

    @pytest.mark.parametrize(
        "bad",
        [
            "2024-3-15",
            "2024-13-01",
            "2024-02-30",
            "yesterday",
            "",
            None,
            "2024-W11-5",
            "20240315",
            "2024-03-15 ",
            "2024-03-1 ",
            "2024-03-15\n",
            "２０２４-03-15",
        ],
    )
    def test_invalid_day_key(self, bad):
        with pytest.raises(InvalidDateKeyError) as exc_info:
            parse_day_key(bad)
        assert exc_info.value.code == "INVALID_DATE_KEY"

    def test_month_key(self):
        assert month_key("2024-03-15") == "2024-03"
        assert month_key(date(2024, 11, 2)) == "2024-11"

    def test_parse_month_key(self):
        assert parse_month_key("2024-03") == (2024, 3)

    @pytest.mark.parametrize("bad", ["2024-3", "2024-00", "2024-13", "2024-03-01", "2024-03\n"])
    def test_invalid_month_key(self, bad):
        with pytest.raises(InvalidDateKeyError) as exc_info:
            parse_month_key(bad)
        assert exc_info.value.expected == "YYYY-MM"


class TestPinFormat:
    def test_valid(self):
        assert is_valid_pin("0000")
        assert validate_pin("1234") == "1234"

    @pytest.mark.parametrize("bad", ["123", "12345", "12a4", "", "1234\n", "١٢٣٤", " 1234"])
    def test_invalid(self, bad):
        assert not is_valid_pin(bad)
        with pytest.raises(PinFormatError):
            validate_pin(bad)
