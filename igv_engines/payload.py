"""
Payload mapping between emission API item dicts and ``LineItem`` records.

The emission API and the stored document payload carry items as
camelCase dicts::

    {"code": "ITEM-001", "description": "Consultoria", "quantity": 2,
     "unitCode": "ZZ", "unitPrice": "100.00", "igvType": "10",
     "discount": "5.00"}

``line_item_from_payload`` decodes one such dict (the detail view
recomputes totals from it); ``build_payload_items`` produces the list the
emission wizard submits.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from igv_kernel.domain.dtos import LineItem
from igv_kernel.domain.tax_policy import DEFAULT_POLICY, TaxClassification, TaxPolicy
from igv_kernel.domain.values import ZERO
from igv_kernel.exceptions import PayloadFieldMissingError, UnknownTaxClassificationError
from igv_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.payload")

_REQUIRED_FIELDS = ("quantity", "unitPrice", "igvType")

ITEM_CODE_PREFIX = "ITEM-"


def decode_classification(
    code: TaxClassification | str,
    policy: TaxPolicy | None = None,
) -> TaxClassification:
    """
    Decode an ``igvType`` wire code under ``policy``.

    Raises:
        UnknownTaxClassificationError: If the code is not declared; the
            failure is logged before it propagates.
    """
    policy = policy or DEFAULT_POLICY
    try:
        return policy.classify(code)
    except UnknownTaxClassificationError:
        logger.error("tax_code_not_found", extra={
            "tax_code": str(code),
            "known_codes": list(policy.known_codes),
        })
        raise


def line_item_from_payload(
    data: Mapping[str, Any],
    *,
    policy: TaxPolicy | None = None,
    index: int | None = None,
) -> LineItem:
    """
    Decode one payload item.

    Raises:
        PayloadFieldMissingError: If quantity, unitPrice or igvType is absent.
        UnknownTaxClassificationError: If igvType is not a declared code.
        InvalidAmountError: If a numeric field is not a finite number.
    """
    policy = policy or DEFAULT_POLICY
    for name in _REQUIRED_FIELDS:
        if data.get(name) is None:
            raise PayloadFieldMissingError(name, index)

    discount = data.get("discount")
    return LineItem(
        quantity=data["quantity"],
        unit_price=data["unitPrice"],
        classification=decode_classification(data["igvType"], policy),
        discount=ZERO if discount is None else discount,
        code=str(data.get("code") or ""),
        description=str(data.get("description") or ""),
        unit_code=str(data.get("unitCode") or "NIU"),
    )


def line_items_from_payload(
    payload: Mapping[str, Any],
    *,
    policy: TaxPolicy | None = None,
) -> list[LineItem]:
    """
    Decode the ``items`` array of a stored document payload.

    While decoding, log records carry the payload's ``SERIES-CORRELATIVE``
    as ``document_id``.
    """
    with LogContext.bind(document_id=payload_document_id(payload)):
        items = [
            line_item_from_payload(data, policy=policy, index=i)
            for i, data in enumerate(payload.get("items") or ())
        ]
        logger.debug("payload_items_decoded", extra={"item_count": len(items)})
    return items


def payload_document_id(payload: Mapping[str, Any]) -> str | None:
    """``F001-12`` from ``series`` and ``correlative``; None if either is absent."""
    series = payload.get("series")
    correlative = payload.get("correlative")
    if not series or correlative is None:
        return None
    return f"{series}-{correlative}"


def default_item_code(position: int) -> str:
    """Generated code for the item at 1-based ``position``: ITEM-001."""
    return f"{ITEM_CODE_PREFIX}{position:03d}"


def build_payload_items(
    items: Iterable[LineItem],
    *,
    policy: TaxPolicy | None = None,
) -> list[dict[str, Any]]:
    """
    Build the ``items`` array sent to the emission API.

    Blank codes get a generated ``ITEM-nnn`` code and the discount key is
    only present when the discount is positive. Decimals are serialized
    as strings.
    """
    policy = policy or DEFAULT_POLICY
    result: list[dict[str, Any]] = []
    for position, item in enumerate(items, start=1):
        entry: dict[str, Any] = {
            "code": item.code.strip() or default_item_code(position),
            "description": item.description,
            "quantity": str(item.quantity),
            "unitCode": item.unit_code,
            "unitPrice": str(item.unit_price),
            "igvType": policy.code_for(item.classification),
        }
        if item.discount > ZERO:
            entry["discount"] = str(item.discount)
        result.append(entry)
    return result
