"""
Tax policy configuration schema.

``PolicyDocument`` is the parsed, human-authored source artifact; its
``policy`` field is the runtime ``TaxPolicy`` handed to the engines.
"""

from __future__ import annotations

from dataclasses import dataclass

from igv_kernel.domain.tax_policy import TaxPolicy


@dataclass(frozen=True)
class PolicyDocument:
    """A tax policy as loaded from one YAML file."""

    policy_id: str
    version: int
    jurisdiction: str
    policy: TaxPolicy
    checksum: str
    source: str | None = None
