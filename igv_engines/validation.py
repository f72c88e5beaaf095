"""
Item validation for documents about to be emitted.

The calculation engine accepts any finite numbers. Business rules for
what may actually be submitted live here, next to it, and are checked
before the payload is built:

    - at least one item
    - every item has a description
    - quantity > 0 and unit price > 0
    - discount >= 0

Validators return ``ValidationError`` records instead of raising, so a
form can show every problem at once. Messages are in Spanish, as shown
to the issuer; ``code`` and ``field`` are for programs.

Pure, no I/O.
"""

from __future__ import annotations

from collections.abc import Sequence

from igv_kernel.domain.dtos import LineItem, ValidationError, ValidationResult
from igv_kernel.domain.values import ZERO
from igv_kernel.logging_config import get_logger

logger = get_logger("engines.validation")

NO_ITEMS = "NO_ITEMS"
DESCRIPTION_REQUIRED = "DESCRIPTION_REQUIRED"
QUANTITY_NOT_POSITIVE = "QUANTITY_NOT_POSITIVE"
UNIT_PRICE_NOT_POSITIVE = "UNIT_PRICE_NOT_POSITIVE"
DISCOUNT_NEGATIVE = "DISCOUNT_NEGATIVE"


def validate_line_item(item: LineItem, index: int) -> list[ValidationError]:
    """Check one item; ``index`` is its 0-based position in the document."""
    position = index + 1
    errors: list[ValidationError] = []

    def error(code: str, name: str, message: str) -> None:
        errors.append(ValidationError(
            code=code,
            message=f"Item {position}: {message}",
            field=f"items[{index}].{name}",
            index=index,
        ))

    if not item.description.strip():
        error(DESCRIPTION_REQUIRED, "description", "la descripcion es obligatoria")
    if item.quantity <= ZERO:
        error(QUANTITY_NOT_POSITIVE, "quantity", "la cantidad debe ser mayor a 0")
    if item.unit_price <= ZERO:
        error(UNIT_PRICE_NOT_POSITIVE, "unitPrice", "el precio unitario debe ser mayor a 0")
    if item.discount < ZERO:
        error(DISCOUNT_NEGATIVE, "discount", "el descuento no puede ser negativo")
    return errors


def validate_items(items: Sequence[LineItem]) -> ValidationResult:
    """
    Check every item of a document.

    Returns a result listing all problems, ordered by item.
    """
    if not items:
        return ValidationResult(errors=(ValidationError(
            code=NO_ITEMS,
            message="Debe agregar al menos un item",
            field="items",
        ),))

    errors: list[ValidationError] = []
    for index, item in enumerate(items):
        errors.extend(validate_line_item(item, index))

    if errors:
        logger.info("items_validation_failed", extra={
            "item_count": len(items),
            "error_codes": [e.code for e in errors],
        })
    return ValidationResult(errors=tuple(errors))
