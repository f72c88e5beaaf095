"""
Module: igv_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for the
    emission wizard, the document detail view and the embeddable widget.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import igv_kernel (and sibling engine modules).
    MUST NOT import igv_config; callers pass the policy in.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted at the boundary.
    - Determinism: identical inputs and policy always produce identical
      outputs, whichever call site invokes the engine.

Usage:
    from igv_engines import document_totals, format_currency
    from igv_engines.igv import IgvCalculator
    from igv_engines.payload import build_payload_items
"""

from igv_engines.formatting import format_currency, format_rate, totals_summary
from igv_engines.igv import (
    IgvCalculator,
    calculate_line,
    document_totals,
    line_subtotal,
    line_tax,
    line_total,
    round_currency,
)
from igv_engines.payload import (
    build_payload_items,
    line_item_from_payload,
    line_items_from_payload,
)
from igv_engines.validation import validate_items, validate_line_item

__all__ = [
    "IgvCalculator",
    "build_payload_items",
    "calculate_line",
    "document_totals",
    "format_currency",
    "format_rate",
    "line_item_from_payload",
    "line_items_from_payload",
    "line_subtotal",
    "line_tax",
    "line_total",
    "round_currency",
    "totals_summary",
    "validate_items",
    "validate_line_item",
]
