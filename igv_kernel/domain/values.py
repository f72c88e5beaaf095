"""
Values -- Decimal coercion and rounding for monetary amounts.

Responsibility:
    Single boundary where caller-supplied numbers (Decimal, int, str or
    float from a UI form) become ``Decimal``. Every engine routes its
    inputs through ``to_amount`` so that all downstream arithmetic is
    exact decimal arithmetic.

Invariants enforced:
    - Amounts are always finite Decimals; NaN and Infinity are rejected
      with ``InvalidAmountError``.
    - Floats are converted through their shortest repr, never through
      their binary expansion, so ``0.1`` becomes ``Decimal("0.1")``.
    - Rounding is ROUND_HALF_UP (half away from zero) to a fixed number
      of decimal places.
    - Engine arithmetic goes through ``exact_sum`` and ``exact_product``,
      so large amounts keep every digit until they are rounded.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

from igv_kernel.exceptions import InvalidAmountError

ZERO = Decimal("0")

AmountLike = Decimal | int | float | str


def to_amount(value: AmountLike, field: str | None = None) -> Decimal:
    """
    Convert a caller-supplied number to a finite Decimal.

    Raises:
        InvalidAmountError: If the value is not numeric or not finite.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(value, field)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(repr(value))
        except InvalidOperation as e:
            raise InvalidAmountError(value, field) from e
    else:
        raise InvalidAmountError(value, field)

    if not amount.is_finite():
        raise InvalidAmountError(value, field)
    return amount


def _digits_needed(amount: Decimal, decimal_places: int) -> int:
    # Integer digits plus the requested fraction, with one guard digit
    return max(amount.adjusted(), 0) + decimal_places + 2


def exact_sum(*values: Decimal) -> Decimal:
    """
    Add Decimals without context rounding.

    The default context keeps 28 significant digits; sums of very large
    and very precise amounts would otherwise be silently rounded.
    """
    if not values:
        return ZERO
    top = max(v.adjusted() for v in values)
    bottom = min(v.as_tuple().exponent for v in values)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, top - bottom + len(values) + 1)
        return sum(values, ZERO)


def exact_product(left: Decimal, right: Decimal) -> Decimal:
    """Multiply two Decimals without context rounding."""
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(left.as_tuple().digits) + len(right.as_tuple().digits))
        return left * right


def quantize_amount(
    value: AmountLike,
    decimal_places: int = 2,
    rounding: str = ROUND_HALF_UP,
) -> Decimal:
    """
    Round to ``decimal_places`` using ``rounding`` (half-up by default).

    Works for any finite magnitude; precision is widened as needed.
    """
    amount = to_amount(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, _digits_needed(amount, decimal_places))
        try:
            return amount.quantize(Decimal(1).scaleb(-decimal_places), rounding=rounding)
        except InvalidOperation as e:
            # Exponent outside the context's Emin/Emax
            raise InvalidAmountError(value) from e
