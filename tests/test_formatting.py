"""
Tests for money and date helpers.
"""

from datetime import date
from decimal import Decimal

import pytest

from foco_finance.formatting import (
    check_month,
    format_brl,
    in_month,
    month_key,
    month_label,
    parse_amount,
    round_currency,
)


class TestMoney:
    """Tests for currency formatting and parsing."""

    @pytest.mark.parametrize("value,expected", [
        (Decimal("1234.5"), "R$ 1.234,50"),
        (Decimal("0"), "R$ 0,00"),
        (Decimal("999.999"), "R$ 1.000,00"),
        (Decimal("1234567.891"), "R$ 1.234.567,89"),
        (Decimal("-10"), "-R$ 10,00"),
        (503, "R$ 503,00"),
    ])
    def test_format_brl(self, value, expected):
        """Test pt-BR currency formatting."""
        assert format_brl(value) == expected

    def test_round_currency_half_up(self):
        """Test rounding to cents, half-up."""
        assert round_currency(Decimal("2.345")) == Decimal("2.35")
        assert round_currency("2.344") == Decimal("2.34")

    @pytest.mark.parametrize("text,expected", [
        ("12.50", Decimal("12.50")),
        ("12,50", Decimal("12.50")),
        ("1.234,56", Decimal("1234.56")),
        ("R$ 99", Decimal("99")),
        ("-3", Decimal("-3")),
    ])
    def test_parse_amount(self, text, expected):
        """Test the accepted input spellings."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "nan", "1,2,3"])
    def test_parse_amount_rejects_garbage(self, text):
        """Test that non-numbers raise ValueError."""
        with pytest.raises(ValueError):
            parse_amount(text)


class TestDates:
    """Tests for month helpers."""

    def test_month_key(self):
        """Test month buckets from strings and dates."""
        assert month_key("2025-03-09") == "2025-03"
        assert month_key(date(2025, 12, 1)) == "2025-12"

    def test_in_month(self):
        """Test month membership."""
        assert in_month("2025-03-09", "2025-03")
        assert not in_month("2025-04-01", "2025-03")

    def test_in_month_needs_the_whole_month(self):
        """Test that a shorter prefix matches nothing."""
        assert not in_month("2025-10-05", "2025-1")
        assert not in_month("2025-10-05", "")

    def test_check_month(self):
        """Test YYYY-MM acceptance."""
        assert check_month("2025-12") == "2025-12"
        for bad in ["2025-1", "", "2025-13", "2025-01-01", None]:
            with pytest.raises(ValueError):
                check_month(bad)

    def test_month_label(self):
        """Test the Portuguese month label."""
        assert month_label("2025-01") == "janeiro de 2025"
        assert month_label("2024-03") == "março de 2024"
