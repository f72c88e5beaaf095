"""
igv_config -- single public entrypoint for tax policy configuration.

Responsibility:
    Provides the ONLY way to obtain a tax policy from configuration at
    runtime through ``get_active_policy()``.  Policies live as YAML files
    under ``igv_config/sets/``; a different directory may be supplied for
    tests or other deployments.

Architecture position:
    Configuration -- sits above ``igv_kernel`` and beside
    ``igv_engines``.  The kernel and engines MUST NEVER import from
    ``igv_config``; callers load a policy here and pass it in.

Failure modes:
    - ``FileNotFoundError`` -- no policy file with the requested name.
    - ``InvalidTaxPolicyError`` -- the file does not describe a valid
      policy.

Audit relevance:
    Every successful ``get_active_policy()`` call emits an
    ``IGV_CONFIG_TRACE`` log entry containing the policy id, version,
    checksum, rate and currency, tying computed totals back to the exact
    configuration that governed them.
"""

from __future__ import annotations

from pathlib import Path

from igv_config.loader import load_policy_document
from igv_config.schema import PolicyDocument
from igv_kernel.domain.tax_policy import TaxPolicy
from igv_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default policy sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

DEFAULT_POLICY_NAME = "peru_igv"


def get_policy_document(
    name: str = DEFAULT_POLICY_NAME,
    config_dir: Path | None = None,
) -> PolicyDocument:
    """Load the named policy document, emitting IGV_CONFIG_TRACE.

    Args:
        name: Policy file stem (``<name>.yaml``).
        config_dir: Override path to the policy sets directory.
            Defaults to igv_config/sets/.

    Raises:
        FileNotFoundError: If ``<config_dir>/<name>.yaml`` does not exist.
        InvalidTaxPolicyError: If the file content is invalid.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Tax policy not found: {path}")

    document = load_policy_document(path)

    _logger.info(
        "IGV_CONFIG_TRACE",
        extra={
            "trace_type": "IGV_CONFIG_TRACE",
            "policy_id": document.policy_id,
            "policy_version": document.version,
            "checksum": document.checksum,
            "jurisdiction": document.jurisdiction,
            "rate": str(document.policy.rate),
            "currency": document.policy.currency,
            "classification_codes": list(document.policy.known_codes),
        },
    )
    return document


def get_active_policy(
    name: str = DEFAULT_POLICY_NAME,
    config_dir: Path | None = None,
) -> TaxPolicy:
    """The public configuration entrypoint: the ``TaxPolicy`` for ``name``.

    Not cached; callers hold the returned policy for as long as they need.
    """
    return get_policy_document(name, config_dir).policy


__all__ = [
    "DEFAULT_POLICY_NAME",
    "PolicyDocument",
    "get_active_policy",
    "get_policy_document",
]
