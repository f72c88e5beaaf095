"""
Property-based tests for the IGV engine.

Properties checked over generated documents:
- Rounding is idempotent for decimals and floats of any finite magnitude
- Exempt and unaffected lines never carry tax
- A taxed line satisfies total == subtotal + round(subtotal * rate)
- Each bucket equals the sum of its lines' rounded subtotals
- The grand total equals the sum of the line totals
- Decoding the built emission payload gives the same totals
"""

from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from igv_engines.igv import calculate_line, document_totals, round_currency
from igv_engines.payload import build_payload_items
from igv_kernel.domain import (
    DEFAULT_POLICY,
    LineItem,
    TaxClassification,
    exact_product,
    exact_sum,
)

quantities = st.decimals(
    min_value=Decimal("0.001"),
    max_value=Decimal("10000"),
    places=3,
    allow_nan=False,
    allow_infinity=False,
)
prices = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("100000"),
    places=4,
    allow_nan=False,
    allow_infinity=False,
)
discounts = st.decimals(
    min_value=Decimal("0"),
    max_value=Decimal("500"),
    places=2,
    allow_nan=False,
    allow_infinity=False,
)
classifications = st.sampled_from(list(TaxClassification))


@composite
def line_items(draw, classification=classifications):
    return LineItem(
        quantity=draw(quantities),
        unit_price=draw(prices),
        classification=draw(classification),
        discount=draw(discounts),
        description=draw(st.text(max_size=20)),
    )


documents = st.lists(line_items(), min_size=0, max_size=25)

_settings = settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])


class TestRoundingProperties:

    @given(value=st.decimals(
        min_value=Decimal("-1E+40"),
        max_value=Decimal("1E+40"),
        allow_nan=False,
        allow_infinity=False,
    ))
    @_settings
    def test_decimal_rounding_is_idempotent(self, value):
        once = round_currency(value)
        assert round_currency(once) == once
        assert once.as_tuple().exponent == -2

    @given(value=st.floats(allow_nan=False, allow_infinity=False))
    @_settings
    def test_float_rounding_is_idempotent(self, value):
        once = round_currency(value)
        assert round_currency(once) == once

    @given(value=st.decimals(
        min_value=Decimal("0"),
        max_value=Decimal("1000000"),
        places=3,
        allow_nan=False,
        allow_infinity=False,
    ))
    @_settings
    def test_rounding_error_is_at_most_half_a_cent(self, value):
        assert abs(round_currency(value) - value) <= Decimal("0.005")


class TestLineProperties:

    @given(item=line_items(classification=st.sampled_from(
        [TaxClassification.EXEMPT, TaxClassification.UNAFFECTED]
    )))
    @_settings
    def test_untaxed_lines_have_zero_tax(self, item):
        result = calculate_line(item)
        assert result.tax == 0
        assert result.total == result.subtotal

    @given(item=line_items(classification=st.just(TaxClassification.TAXED)))
    @_settings
    def test_taxed_line_identity(self, item):
        result = calculate_line(item)
        assert result.tax == round_currency(result.subtotal * DEFAULT_POLICY.rate)
        assert result.total == result.subtotal + result.tax

    @given(
        quantity=st.integers(min_value=1, max_value=10**20),
        unit_price=st.decimals(min_value=Decimal("1E+10"), max_value=Decimal("1E+15"), places=4),
    )
    @_settings
    def test_large_lines_keep_every_digit(self, quantity, unit_price):
        result = calculate_line(LineItem(quantity=quantity, unit_price=unit_price))
        assert result.subtotal == round_currency(exact_product(Decimal(quantity), unit_price))
        assert result.total == exact_sum(result.subtotal, result.tax)


class TestDocumentProperties:

    @given(items=documents)
    @_settings
    def test_buckets_equal_sum_of_line_subtotals(self, items):
        totals = document_totals(items)
        results = [calculate_line(item) for item in items]

        for kind in TaxClassification:
            expected = sum(
                (r.subtotal for r in results if r.classification is kind),
                Decimal("0"),
            )
            assert totals.bucket(kind) == expected
        assert totals.total_tax == sum((r.tax for r in results), Decimal("0"))

    @given(items=documents)
    @_settings
    def test_grand_total_equals_sum_of_line_totals(self, items):
        totals = document_totals(items)
        expected = sum((calculate_line(item).total for item in items), Decimal("0"))

        assert totals.total_amount == expected
        assert totals.total_amount == totals.total_before_tax + totals.total_tax

    @given(items=documents)
    @_settings
    def test_order_does_not_matter(self, items):
        assert document_totals(items) == document_totals(list(reversed(items)))

    @given(items=documents)
    @_settings
    def test_payload_items_give_same_totals(self, items):
        payload_items = build_payload_items(items)
        assert document_totals(payload_items) == document_totals(items)
