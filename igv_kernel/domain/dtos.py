"""
Data transfer objects for IGV calculations.

Plain immutable records passed into and returned from the engines. None
of them are persisted; each is derived on demand from a snapshot of the
document's line items.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from igv_kernel.domain.tax_policy import DEFAULT_POLICY, TaxClassification
from igv_kernel.domain.values import ZERO, exact_product, exact_sum, to_amount
from igv_kernel.exceptions import UnknownTaxClassificationError


@dataclass(frozen=True)
class LineItem:
    """
    One row of a document (invoice, receipt or note).

    Amounts are coerced to Decimal on construction. Business rules such
    as ``quantity > 0`` belong to the caller's validation layer.
    """

    quantity: Decimal
    unit_price: Decimal
    classification: TaxClassification = TaxClassification.TAXED
    discount: Decimal = ZERO

    # Descriptive fields, carried through to the emission payload only
    code: str = ""
    description: str = ""
    unit_code: str = "NIU"

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", to_amount(self.quantity, "quantity"))
        object.__setattr__(self, "unit_price", to_amount(self.unit_price, "unit_price"))
        object.__setattr__(self, "discount", to_amount(self.discount, "discount"))
        if not isinstance(self.classification, TaxClassification):
            object.__setattr__(
                self, "classification", _coerce_classification(self.classification)
            )

    @property
    def gross_amount(self) -> Decimal:
        """Quantity times unit price, before discount and rounding."""
        return exact_product(self.quantity, self.unit_price)


def _coerce_classification(value: object) -> TaxClassification:
    # Enum values ("taxed") or the default SUNAT wire codes ("10")
    if isinstance(value, str) and value.strip() in DEFAULT_POLICY.classification_rules:
        return DEFAULT_POLICY.classify(value)
    try:
        return TaxClassification(value)
    except ValueError as e:
        known = tuple(c.value for c in TaxClassification) + DEFAULT_POLICY.known_codes
        raise UnknownTaxClassificationError(value, known) from e


@dataclass(frozen=True)
class LineResult:
    """Calculated figures for a single line item."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal
    classification: TaxClassification


@dataclass(frozen=True)
class DocumentTotals:
    """Document-level aggregate of all line items."""

    total_taxed: Decimal
    total_exempt: Decimal
    total_unaffected: Decimal
    total_tax: Decimal
    total_amount: Decimal

    @property
    def total_before_tax(self) -> Decimal:
        """Sum of the three classification buckets."""
        return exact_sum(self.total_taxed, self.total_exempt, self.total_unaffected)

    def bucket(self, classification: TaxClassification) -> Decimal:
        """Bucket total for one classification."""
        if classification is TaxClassification.TAXED:
            return self.total_taxed
        if classification is TaxClassification.EXEMPT:
            return self.total_exempt
        return self.total_unaffected

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the emission API field names."""
        return {
            "totalGravadas": str(self.total_taxed),
            "totalExoneradas": str(self.total_exempt),
            "totalInafectas": str(self.total_unaffected),
            "totalIGV": str(self.total_tax),
            "totalAmount": str(self.total_amount),
        }


@dataclass(frozen=True)
class ValidationError:
    """
    One problem found in caller input.

    ``field`` is a path such as ``items[2].quantity``; ``index`` is the
    0-based item position when the problem belongs to a single item.
    """

    code: str
    message: str
    field: str | None = None
    index: int | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Zero or more ValidationErrors; truthy only when there are none."""

    errors: tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def for_item(self, index: int) -> tuple[ValidationError, ...]:
        """Errors attached to the item at ``index``."""
        return tuple(e for e in self.errors if e.index == index)

    def __bool__(self) -> bool:
        return self.is_valid
