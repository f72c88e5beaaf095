"""
IGV Engine - Line and document totals for Peruvian electronic invoices.

Computes, for each line item, subtotal (quantity x unit price - discount),
IGV and line total, and aggregates a whole document into the Gravadas /
Exoneradas / Inafectas buckets, total IGV and grand total.
Pure functions with no I/O - the tax policy is provided as a parameter.

Rounding contract:
    - Every line figure is rounded half-up to the currency precision.
    - Document buckets accumulate the rounded line figures unrounded and
      round once at the end; the grand total is rounded once more from
      the unrounded bucket sums.

Usage:
    from decimal import Decimal
    from igv_engines.igv import IgvCalculator, document_totals
    from igv_kernel.domain import LineItem, TaxClassification

    items = [LineItem(quantity=2, unit_price=Decimal("100.00"))]
    totals = document_totals(items)
    print(totals.total_tax)  # Decimal("36.00")
    print(totals.total_amount)  # Decimal("236.00")
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from igv_engines.payload import decode_classification, line_item_from_payload
from igv_engines.tracer import traced_engine
from igv_kernel.domain.currency import CurrencyRegistry
from igv_kernel.domain.dtos import DocumentTotals, LineItem, LineResult
from igv_kernel.domain.tax_policy import DEFAULT_POLICY, TaxClassification, TaxPolicy
from igv_kernel.domain.values import (
    AmountLike,
    ZERO,
    exact_product,
    exact_sum,
    quantize_amount,
    to_amount,
)
from igv_kernel.exceptions import NegativeSubtotalError
from igv_kernel.logging_config import get_logger

logger = get_logger("engines.igv")

CURRENCY_DECIMAL_PLACES = 2


def round_currency(value: AmountLike, decimal_places: int = CURRENCY_DECIMAL_PLACES) -> Decimal:
    """
    Round an amount half away from zero to ``decimal_places``.

    Idempotent: ``round_currency(round_currency(x)) == round_currency(x)``.

    Raises:
        InvalidAmountError: If the value is NaN, infinite or not numeric.
    """
    return quantize_amount(value, decimal_places)


class IgvCalculator:
    """
    Calculate IGV figures under a fixed tax policy.

    Pure - no I/O, no shared state. Two calculators built with equal
    policies produce identical results for identical input.
    """

    def __init__(self, policy: TaxPolicy | None = None):
        self.policy = policy or DEFAULT_POLICY
        self.decimal_places = CurrencyRegistry.get_decimal_places(self.policy.currency)

    def round(self, value: AmountLike) -> Decimal:
        return round_currency(value, self.decimal_places)

    def line_subtotal(
        self,
        quantity: AmountLike,
        unit_price: AmountLike,
        discount: AmountLike = ZERO,
    ) -> Decimal:
        """
        Rounded ``quantity * unit_price - discount``.

        A discount larger than the gross amount yields a negative subtotal,
        which is returned as-is unless the policy forbids it.

        Raises:
            InvalidAmountError: On non-finite input.
            NegativeSubtotalError: If negative and the policy disallows it.
        """
        gross = exact_product(
            to_amount(quantity, "quantity"), to_amount(unit_price, "unit_price")
        )
        discount_amount = to_amount(discount, "discount")
        subtotal = self.round(exact_sum(gross, discount_amount.copy_negate()))

        if subtotal < ZERO and not self.policy.allow_negative_subtotal:
            logger.error("line_subtotal_negative", extra={
                "gross": str(gross),
                "discount": str(discount_amount),
                "subtotal": str(subtotal),
            })
            raise NegativeSubtotalError(str(gross), str(discount_amount), str(subtotal))
        return subtotal

    def line_tax(
        self,
        subtotal: AmountLike,
        classification: TaxClassification | str,
    ) -> Decimal:
        """
        IGV for a line: ``round(subtotal * rate)`` when taxed, else zero.

        Raises:
            UnknownTaxClassificationError: If a wire code is not declared
                by the policy.
        """
        kind = decode_classification(classification, self.policy)
        if kind is not TaxClassification.TAXED:
            return self.round(ZERO)
        return self.round(exact_product(to_amount(subtotal, "subtotal"), self.policy.rate))

    def line_total(self, subtotal: AmountLike, tax: AmountLike) -> Decimal:
        """Rounded ``subtotal + tax``; pass already-rounded figures."""
        return self.round(exact_sum(to_amount(subtotal, "subtotal"), to_amount(tax, "tax")))

    def calculate_line(self, item: LineItem | Mapping[str, Any]) -> LineResult:
        """Subtotal, tax and total for a single line."""
        line = self._coerce_item(item)
        subtotal = self.line_subtotal(line.quantity, line.unit_price, line.discount)
        tax = self.line_tax(subtotal, line.classification)
        return LineResult(
            subtotal=subtotal,
            tax=tax,
            total=self.line_total(subtotal, tax),
            classification=line.classification,
        )

    def document_totals(self, items: Iterable[LineItem | Mapping[str, Any]]) -> DocumentTotals:
        """
        Aggregate all lines of a document.

        Each line's subtotal lands in exactly one classification bucket;
        every line's tax is added to the tax total.
        """
        buckets = {kind: ZERO for kind in TaxClassification}
        total_tax = ZERO
        line_count = 0

        for item in items:
            result = self.calculate_line(item)
            kind = result.classification
            buckets[kind] = exact_sum(buckets[kind], result.subtotal)
            total_tax = exact_sum(total_tax, result.tax)
            line_count += 1

        raw_total = exact_sum(*buckets.values(), total_tax)
        totals = DocumentTotals(
            total_taxed=self.round(buckets[TaxClassification.TAXED]),
            total_exempt=self.round(buckets[TaxClassification.EXEMPT]),
            total_unaffected=self.round(buckets[TaxClassification.UNAFFECTED]),
            total_tax=self.round(total_tax),
            total_amount=self.round(raw_total),
        )

        logger.info("document_totals_computed", extra={
            "line_count": line_count,
            "currency": self.policy.currency,
            "rate": str(self.policy.rate),
            "total_taxed": str(totals.total_taxed),
            "total_exempt": str(totals.total_exempt),
            "total_unaffected": str(totals.total_unaffected),
            "total_tax": str(totals.total_tax),
            "total_amount": str(totals.total_amount),
        })
        return totals

    def _coerce_item(self, item: LineItem | Mapping[str, Any]) -> LineItem:
        if isinstance(item, LineItem):
            return item
        return line_item_from_payload(item, policy=self.policy)


# Convenience functions bound to the default (or an explicit) policy

def line_subtotal(
    quantity: AmountLike,
    unit_price: AmountLike,
    discount: AmountLike = ZERO,
    *,
    policy: TaxPolicy | None = None,
) -> Decimal:
    """Rounded line subtotal. See ``IgvCalculator.line_subtotal``."""
    return IgvCalculator(policy).line_subtotal(quantity, unit_price, discount)


def line_tax(
    subtotal: AmountLike,
    classification: TaxClassification | str,
    *,
    policy: TaxPolicy | None = None,
) -> Decimal:
    """Line IGV. See ``IgvCalculator.line_tax``."""
    return IgvCalculator(policy).line_tax(subtotal, classification)


def line_total(
    subtotal: AmountLike,
    tax: AmountLike,
    *,
    policy: TaxPolicy | None = None,
) -> Decimal:
    """Rounded line total. See ``IgvCalculator.line_total``."""
    return IgvCalculator(policy).line_total(subtotal, tax)


def calculate_line(
    item: LineItem | Mapping[str, Any],
    *,
    policy: TaxPolicy | None = None,
) -> LineResult:
    return IgvCalculator(policy).calculate_line(item)


@traced_engine("igv", "1.0", fingerprint_fields=("items", "policy"))
def document_totals(
    items: Iterable[LineItem | Mapping[str, Any]],
    *,
    policy: TaxPolicy | None = None,
) -> DocumentTotals:
    """
    Document totals for a list of line items.

    Args:
        items: ``LineItem`` records or stored payload item mappings
            (``quantity``, ``unitPrice``, ``igvType``, ``discount``).
        policy: Tax policy; defaults to 18% IGV in PEN.

    Returns:
        DocumentTotals with every figure rounded to currency precision.
        An empty document yields all zeros.
    """
    return IgvCalculator(policy).document_totals(items)
