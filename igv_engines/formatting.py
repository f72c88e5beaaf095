"""Display formatting for amounts and the document totals block."""

from __future__ import annotations

from igv_kernel.domain.currency import CurrencyRegistry
from igv_kernel.domain.dtos import DocumentTotals
from igv_kernel.domain.tax_policy import DEFAULT_POLICY, TaxClassification, TaxPolicy
from igv_kernel.domain.values import AmountLike, ZERO, quantize_amount, to_amount

# Row labels as printed on the totals block of an issued document
BUCKET_LABELS = {
    TaxClassification.TAXED: "Op. Gravadas",
    TaxClassification.EXEMPT: "Op. Exoneradas",
    TaxClassification.UNAFFECTED: "Op. Inafectas",
}
TOTAL_LABEL = "TOTAL"


def format_currency(amount: AmountLike, currency: str = "PEN") -> str:
    """
    Format an amount for display in the es-PE locale.

        >>> format_currency("1234.5")
        'S/ 1,234.50'
        >>> format_currency(-5, "USD")
        '-US$ 5.00'

    Raises:
        InvalidCurrencyError: If the currency is not registered.
        InvalidAmountError: If the amount is not a finite number.
    """
    info = CurrencyRegistry.require(currency)
    value = quantize_amount(to_amount(amount, "amount"), info.decimal_places)
    sign = "-" if value < ZERO else ""
    return f"{sign}{info.display_symbol} {abs(value):,.{info.decimal_places}f}"


def format_rate(policy: TaxPolicy | None = None) -> str:
    """Tax row label, e.g. ``IGV (18%)``."""
    policy = policy or DEFAULT_POLICY
    return f"{policy.tax_name} ({policy.rate_percent}%)"


def totals_summary(
    totals: DocumentTotals,
    currency: str | None = None,
    *,
    policy: TaxPolicy | None = None,
) -> list[tuple[str, str]]:
    """
    Rows of the totals block, in display order.

    Classification buckets appear only when positive; the tax row and the
    grand total always appear.
    """
    policy = policy or DEFAULT_POLICY
    currency = currency or policy.currency

    rows: list[tuple[str, str]] = []
    for kind in TaxClassification:
        amount = totals.bucket(kind)
        if amount > ZERO:
            rows.append((BUCKET_LABELS[kind], format_currency(amount, currency)))
    rows.append((format_rate(policy), format_currency(totals.total_tax, currency)))
    rows.append((TOTAL_LABEL, format_currency(totals.total_amount, currency)))
    return rows
