"""
Pure domain layer.

This module contains pure data transfer objects and domain logic
with NO dependencies on:
- HTTP / UI
- Time/clock
- I/O

All domain objects are immutable and deterministic.
"""

from igv_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from igv_kernel.domain.dtos import (
    DocumentTotals,
    LineItem,
    LineResult,
    ValidationError,
    ValidationResult,
)
from igv_kernel.domain.tax_policy import (
    DEFAULT_POLICY,
    SUNAT_CLASSIFICATION_CODES,
    TaxClassification,
    TaxPolicy,
)
from igv_kernel.domain.values import (
    ZERO,
    exact_product,
    exact_sum,
    quantize_amount,
    to_amount,
)

__all__ = [
    "DEFAULT_POLICY",
    "SUNAT_CLASSIFICATION_CODES",
    "ZERO",
    "CurrencyInfo",
    "CurrencyRegistry",
    "DocumentTotals",
    "LineItem",
    "LineResult",
    "TaxClassification",
    "TaxPolicy",
    "ValidationError",
    "ValidationResult",
    "exact_product",
    "exact_sum",
    "quantize_amount",
    "to_amount",
]
