"""
Typed Exception Hierarchy for the IGV Kernel.

Every error raised by the kernel, the engines or the configuration layer
is a typed subclass of ``IgvKernelError`` carrying:

  1. a ``code`` class attribute (machine-readable, API-safe)
  2. structured attributes describing the offending input

Callers catch by type and read attributes; they never parse messages.

    try:
        totals = document_totals(items)
    except UnknownTaxClassificationError as e:
        api_response(code=e.code, igv_type=e.tax_code)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    IgvKernelError (base)
    |
    +-- AmountError
    |   +-- InvalidAmountError
    |   +-- NegativeSubtotalError
    |
    +-- ClassificationError
    |   +-- UnknownTaxClassificationError
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |
    +-- PayloadError
    |   +-- PayloadFieldMissingError
    |
    +-- PolicyError
        +-- InvalidTaxPolicyError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Amount          | INVALID_AMOUNT              | NaN, Infinity or non-numeric amount
                | NEGATIVE_SUBTOTAL           | Discount exceeds gross and policy forbids it
----------------|-----------------------------|-----------------------------------------
Classification  | UNKNOWN_TAX_CLASSIFICATION  | Wire code not declared in the tax policy
----------------|-----------------------------|-----------------------------------------
Currency        | INVALID_CURRENCY            | Code not in the currency registry
----------------|-----------------------------|-----------------------------------------
Payload         | PAYLOAD_FIELD_MISSING       | Stored item lacks quantity/unitPrice/igvType
----------------|-----------------------------|-----------------------------------------
Policy          | INVALID_TAX_POLICY          | Rate out of range, empty or ambiguous rules
"""

from typing import Any


class IgvKernelError(Exception):
    """
    Base exception for all IGV kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "IGV_KERNEL_ERROR"


# Amount-related exceptions


class AmountError(IgvKernelError):
    """Base exception for amount-related errors."""

    code: str = "AMOUNT_ERROR"


class InvalidAmountError(AmountError):
    """Amount is not a finite number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, value: Any, field: str | None = None):
        self.value = repr(value)
        self.field = field
        where = f" for {field}" if field else ""
        super().__init__(f"Invalid amount{where}: {value!r}")


class NegativeSubtotalError(AmountError):
    """Line discount exceeds the gross amount and the policy forbids it."""

    code: str = "NEGATIVE_SUBTOTAL"

    def __init__(self, gross: str, discount: str, subtotal: str):
        self.gross = gross
        self.discount = discount
        self.subtotal = subtotal
        super().__init__(
            f"Negative line subtotal {subtotal}: discount {discount} exceeds gross {gross}"
        )


# Classification-related exceptions


class ClassificationError(IgvKernelError):
    """Base exception for tax classification errors."""

    code: str = "CLASSIFICATION_ERROR"


class UnknownTaxClassificationError(ClassificationError):
    """Tax classification wire code is not declared by the active policy."""

    code: str = "UNKNOWN_TAX_CLASSIFICATION"

    def __init__(self, tax_code: Any, known_codes: tuple[str, ...] = ()):
        self.tax_code = tax_code
        self.known_codes = known_codes
        super().__init__(
            f"Unknown tax classification code: {tax_code!r}"
            + (f" (expected one of {', '.join(known_codes)})" if known_codes else "")
        )


# Currency-related exceptions


class CurrencyError(IgvKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: Any):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: '{currency}'")


# Payload-related exceptions


class PayloadError(IgvKernelError):
    """Base exception for document payload errors."""

    code: str = "PAYLOAD_ERROR"


class PayloadFieldMissingError(PayloadError):
    """A stored payload item lacks a required field."""

    code: str = "PAYLOAD_FIELD_MISSING"

    def __init__(self, field: str, index: int | None = None):
        self.field = field
        self.index = index
        where = f" in item {index}" if index is not None else ""
        super().__init__(f"Missing payload field '{field}'{where}")


# Policy-related exceptions


class PolicyError(IgvKernelError):
    """Base exception for tax policy errors."""

    code: str = "POLICY_ERROR"


class InvalidTaxPolicyError(PolicyError):
    """Tax policy definition is invalid."""

    code: str = "INVALID_TAX_POLICY"

    def __init__(self, reason: str, source: str | None = None):
        self.reason = reason
        self.source = source
        where = f" ({source})" if source else ""
        super().__init__(f"Invalid tax policy{where}: {reason}")
