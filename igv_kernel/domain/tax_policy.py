"""
Tax policy -- IGV rate and tax classification rules.

Responsibility:
    Holds the jurisdiction-wide parameters every IGV calculation depends
    on: the tax rate, the table that decodes external wire codes (SUNAT
    catalog 07 "tipo de afectacion del IGV") into a closed
    ``TaxClassification``, the document currency, and whether negative
    line subtotals are tolerated.

Architecture position:
    Kernel > Domain -- pure value objects, zero I/O.
    Built by ``igv_config.loader`` from YAML, or used directly through
    ``DEFAULT_POLICY``.

Invariants enforced:
    - ``rate`` is a Decimal within [0, 1].
    - Every wire code maps to exactly one classification; every
      classification has at least one wire code.
    - Unknown wire codes are an explicit error, never a silent default.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

from igv_kernel.domain.currency import CurrencyRegistry
from igv_kernel.domain.values import to_amount
from igv_kernel.exceptions import InvalidTaxPolicyError, UnknownTaxClassificationError


class TaxClassification(str, Enum):
    """Mutually exclusive IGV treatments for a line item."""

    TAXED = "taxed"  # Gravado
    EXEMPT = "exempt"  # Exonerado
    UNAFFECTED = "unaffected"  # Inafecto

    @property
    def label(self) -> str:
        """Spanish display label used on issued documents."""
        return _LABELS[self]


_LABELS = {
    TaxClassification.TAXED: "Gravado",
    TaxClassification.EXEMPT: "Exonerado",
    TaxClassification.UNAFFECTED: "Inafecto",
}

# Catalog 07 codes accepted by the emission API
SUNAT_CLASSIFICATION_CODES: Mapping[str, TaxClassification] = MappingProxyType({
    "10": TaxClassification.TAXED,
    "20": TaxClassification.EXEMPT,
    "30": TaxClassification.UNAFFECTED,
})


@dataclass(frozen=True)
class TaxPolicy:
    """
    Process-wide tax parameters, injectable per call.

    Immutable value object; two calculations made with equal policies
    always agree.
    """

    rate: Decimal = Decimal("0.18")
    classification_rules: Mapping[str, TaxClassification] = field(
        default_factory=lambda: SUNAT_CLASSIFICATION_CODES
    )
    currency: str = "PEN"
    tax_name: str = "IGV"
    allow_negative_subtotal: bool = True

    def __post_init__(self) -> None:
        rate = to_amount(self.rate, "rate")
        if rate < Decimal("0") or rate > Decimal("1"):
            raise InvalidTaxPolicyError(f"rate must be between 0 and 1, got {rate}")
        object.__setattr__(self, "rate", rate)

        if not self.classification_rules:
            raise InvalidTaxPolicyError("classification_rules must not be empty")
        try:
            rules = {
                str(code).strip(): TaxClassification(value)
                for code, value in self.classification_rules.items()
            }
        except ValueError as e:
            raise InvalidTaxPolicyError(str(e)) from e
        missing = [c.name for c in TaxClassification if c not in rules.values()]
        if missing:
            raise InvalidTaxPolicyError(
                f"no wire code declared for {', '.join(missing)}"
            )
        object.__setattr__(self, "classification_rules", MappingProxyType(rules))

        object.__setattr__(self, "currency", CurrencyRegistry.validate(self.currency))

    @property
    def rate_percent(self) -> Decimal:
        """Rate as percentage (e.g., 18 for 18%)."""
        percent = self.rate * Decimal("100")
        if percent == percent.to_integral_value():
            return percent.to_integral_value()
        return percent.normalize()

    @property
    def known_codes(self) -> tuple[str, ...]:
        return tuple(self.classification_rules)

    def classify(self, code: TaxClassification | str) -> TaxClassification:
        """
        Decode an external wire code into a TaxClassification.

        Enum members pass through unchanged.

        Raises:
            UnknownTaxClassificationError: If the code is not declared.
        """
        if isinstance(code, TaxClassification):
            return code
        if isinstance(code, str):
            found = self.classification_rules.get(code.strip())
            if found is not None:
                return found
        raise UnknownTaxClassificationError(code, self.known_codes)

    def code_for(self, classification: TaxClassification) -> str:
        """Canonical (first declared) wire code for a classification."""
        for code, value in self.classification_rules.items():
            if value is classification:
                return code
        raise UnknownTaxClassificationError(classification, self.known_codes)

    def __hash__(self) -> int:
        return hash((
            self.rate,
            tuple(sorted(self.classification_rules.items())),
            self.currency,
            self.tax_name,
            self.allow_negative_subtotal,
        ))


DEFAULT_POLICY = TaxPolicy()
