"""
Configuration Loader (``igv_config.loader``).

Responsibility
--------------
Loads tax policy YAML files and parses them into
``igv_config.schema.PolicyDocument`` instances.  Runtime callers go
through ``igv_config.get_active_policy()`` instead of calling this
directly.

Invariants enforced
-------------------
* Required keys are never silently defaulted; a missing key raises
  ``InvalidTaxPolicyError`` naming the key and the source file.
* Wire codes are normalized to strings, so ``10`` and ``"10"`` in the
  same file are reported as a duplicate.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid content  -> ``InvalidTaxPolicyError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from igv_config.schema import PolicyDocument
from igv_kernel.domain.tax_policy import TaxClassification, TaxPolicy
from igv_kernel.exceptions import IgvKernelError, InvalidTaxPolicyError

_REQUIRED_KEYS = ("policy_id", "rate", "currency", "classification_rules")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_classification_rules(
    data: dict[Any, Any], source: str | None = None
) -> dict[str, TaxClassification]:
    """Parse the wire code -> classification table."""
    if not isinstance(data, dict):
        raise InvalidTaxPolicyError("classification_rules must be a mapping", source)

    rules: dict[str, TaxClassification] = {}
    for raw_code, raw_value in data.items():
        code = str(raw_code).strip()
        if code in rules:
            raise InvalidTaxPolicyError(f"duplicate classification code {code!r}", source)
        try:
            rules[code] = TaxClassification(str(raw_value).strip().lower())
        except ValueError as e:
            raise InvalidTaxPolicyError(
                f"unknown classification {raw_value!r} for code {code!r}", source
            ) from e
    return rules


def _parse_flag(data: dict[str, Any], key: str, default: bool, source: str | None) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise InvalidTaxPolicyError(f"{key} must be true or false, got {value!r}", source)
    return value


def parse_tax_policy(data: dict[str, Any], source: str | None = None) -> TaxPolicy:
    """Parse a ``TaxPolicy`` from a policy document dict."""
    for key in _REQUIRED_KEYS:
        if key not in data:
            raise InvalidTaxPolicyError(f"missing required key '{key}'", source)

    try:
        return TaxPolicy(
            rate=data["rate"],
            classification_rules=parse_classification_rules(
                data["classification_rules"], source
            ),
            currency=data["currency"],
            tax_name=data.get("tax_name", "IGV"),
            allow_negative_subtotal=_parse_flag(data, "allow_negative_subtotal", True, source),
        )
    except InvalidTaxPolicyError as e:
        if e.source is None and source is not None:
            raise InvalidTaxPolicyError(e.reason, source) from e
        raise
    except IgvKernelError as e:
        raise InvalidTaxPolicyError(str(e), source) from e


def parse_policy_document(data: dict[str, Any], source: str | None = None) -> PolicyDocument:
    """Parse a complete ``PolicyDocument``."""
    policy = parse_tax_policy(data, source)
    return PolicyDocument(
        policy_id=str(data["policy_id"]),
        version=int(data.get("version", 1)),
        jurisdiction=str(data.get("jurisdiction", "")),
        policy=policy,
        checksum=compute_checksum(data),
        source=source,
    )


def load_policy_document(path: Path) -> PolicyDocument:
    """Load and parse one policy YAML file."""
    return parse_policy_document(load_yaml_file(path), str(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(_string_keys(data), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def _string_keys(value: Any) -> Any:
    # YAML allows int keys (unquoted wire codes); JSON key sorting does not
    if isinstance(value, dict):
        return {str(k): _string_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_string_keys(v) for v in value]
    return value
