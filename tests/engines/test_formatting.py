"""Tests for display formatting of amounts and the totals block."""

from decimal import Decimal

import pytest

from igv_engines.formatting import format_currency, format_rate, totals_summary
from igv_engines.igv import document_totals
from igv_kernel.domain import DocumentTotals, LineItem, TaxClassification, TaxPolicy
from igv_kernel.exceptions import InvalidAmountError, InvalidCurrencyError


class TestFormatCurrency:
    """Tests for format_currency (es-PE display format)."""

    def test_soles_default(self):
        assert format_currency(Decimal("236")) == "S/ 236.00"

    def test_thousands_separator(self):
        assert format_currency("1234.5") == "S/ 1,234.50"
        assert format_currency(Decimal("1234567.891")) == "S/ 1,234,567.89"

    def test_dollars(self):
        assert format_currency(Decimal("99.9"), "USD") == "US$ 99.90"

    def test_lowercase_code(self):
        assert format_currency(10, "pen") == "S/ 10.00"

    def test_negative_amount(self):
        assert format_currency(Decimal("-5"), "PEN") == "-S/ 5.00"
        assert format_currency(-5, "USD") == "-US$ 5.00"

    def test_negative_zero_has_no_sign(self):
        assert format_currency(Decimal("-0.001")) == "S/ 0.00"

    def test_currency_precision(self):
        assert format_currency(Decimal("1234.5"), "JPY") == "JPY 1,235"
        assert format_currency(Decimal("1.2345"), "KWD") == "KWD 1.235"

    def test_unknown_currency(self):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            format_currency(1, "XYZ")
        assert exc_info.value.currency == "XYZ"

    def test_non_finite_amount(self):
        with pytest.raises(InvalidAmountError):
            format_currency(float("nan"))


class TestTotalsSummary:
    """Tests for the totals block rows."""

    def test_rate_label(self):
        assert format_rate() == "IGV (18%)"
        assert format_rate(TaxPolicy(rate=Decimal("0.105"))) == "IGV (10.5%)"
        assert format_rate(TaxPolicy(rate=Decimal("0.10"))) == "IGV (10%)"

    def test_only_positive_buckets_are_listed(self):
        totals = document_totals([
            LineItem(quantity=1, unit_price="50.00", classification=TaxClassification.EXEMPT),
            LineItem(quantity=1, unit_price="100.00"),
        ])
        assert totals_summary(totals) == [
            ("Op. Gravadas", "S/ 100.00"),
            ("Op. Exoneradas", "S/ 50.00"),
            ("IGV (18%)", "S/ 18.00"),
            ("TOTAL", "S/ 168.00"),
        ]

    def test_empty_document(self):
        totals = document_totals([])
        assert totals_summary(totals) == [
            ("IGV (18%)", "S/ 0.00"),
            ("TOTAL", "S/ 0.00"),
        ]

    def test_explicit_currency(self):
        totals = DocumentTotals(
            total_taxed=Decimal("0.00"),
            total_exempt=Decimal("0.00"),
            total_unaffected=Decimal("1500.00"),
            total_tax=Decimal("0.00"),
            total_amount=Decimal("1500.00"),
        )
        assert totals_summary(totals, "USD") == [
            ("Op. Inafectas", "US$ 1,500.00"),
            ("IGV (18%)", "US$ 0.00"),
            ("TOTAL", "US$ 1,500.00"),
        ]

    def test_policy_currency_is_default(self):
        policy = TaxPolicy(currency="USD")
        totals = document_totals([LineItem(quantity=1, unit_price="10.00")], policy=policy)
        assert totals_summary(totals, policy=policy)[-1] == ("TOTAL", "US$ 11.80")
