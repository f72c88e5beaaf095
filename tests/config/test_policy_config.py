"""
Tests for YAML tax policy configuration.

Covers:
- The shipped Peru IGV policy
- Custom policy directories
- Parse errors (missing keys, duplicate or unknown codes, bad rate)
- IGV_CONFIG_TRACE emission and checksum determinism
"""

import logging
from decimal import Decimal
from pathlib import Path

import pytest

from igv_config import get_active_policy, get_policy_document
from igv_config.loader import compute_checksum, parse_tax_policy
from igv_engines.igv import document_totals
from igv_kernel.domain import LineItem, TaxClassification
from igv_kernel.exceptions import InvalidTaxPolicyError


def _write_policy(directory: Path, name: str, body: str) -> Path:
    path = directory / f"{name}.yaml"
    path.write_text(body, encoding="utf-8")
    return path


VALID_BODY = """\
policy_id: test_vat
version: 3
jurisdiction: XX
tax_name: VAT
rate: 0.10
currency: USD
allow_negative_subtotal: false
classification_rules:
  "10": taxed
  "11": taxed
  "20": exempt
  "30": unaffected
"""


class TestShippedPolicy:
    """The policy bundled under igv_config/sets."""

    def test_peru_igv(self):
        policy = get_active_policy()

        assert policy.rate == Decimal("0.18")
        assert policy.currency == "PEN"
        assert policy.tax_name == "IGV"
        assert policy.allow_negative_subtotal is True
        assert policy.classify("10") is TaxClassification.TAXED
        assert policy.classify("20") is TaxClassification.EXEMPT
        assert policy.classify("30") is TaxClassification.UNAFFECTED

    def test_shipped_policy_matches_default(self):
        items = [
            LineItem(quantity=2, unit_price="100.00"),
            LineItem(quantity=1, unit_price="50.00", classification=TaxClassification.EXEMPT),
        ]
        assert document_totals(items, policy=get_active_policy()) == document_totals(items)

    def test_document_metadata(self):
        document = get_policy_document()
        assert document.policy_id == "peru_igv"
        assert document.version == 1
        assert document.jurisdiction == "PE"
        assert len(document.checksum) == 64
        assert document.source.endswith("peru_igv.yaml")

    def test_checksum_is_deterministic(self):
        assert get_policy_document().checksum == get_policy_document().checksum

    def test_emits_config_trace(self, caplog):
        caplog.set_level(logging.INFO, logger="igv_kernel")
        get_active_policy()

        records = [r for r in caplog.records if r.getMessage() == "IGV_CONFIG_TRACE"]
        assert len(records) == 1
        assert records[0].policy_id == "peru_igv"
        assert records[0].rate == "0.18"
        assert records[0].classification_codes == ["10", "20", "30"]


class TestCustomPolicy:
    """Policies loaded from a caller-supplied directory."""

    def test_loads_custom_policy(self, tmp_path):
        _write_policy(tmp_path, "test_vat", VALID_BODY)
        document = get_policy_document("test_vat", config_dir=tmp_path)

        assert document.version == 3
        assert document.policy.rate == Decimal("0.1")
        assert document.policy.currency == "USD"
        assert document.policy.tax_name == "VAT"
        assert document.policy.allow_negative_subtotal is False
        assert document.policy.classify("11") is TaxClassification.TAXED

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_policy("nope", config_dir=tmp_path)

    def test_missing_required_key(self, tmp_path):
        _write_policy(tmp_path, "bad", "policy_id: bad\nrate: 0.18\ncurrency: PEN\n")
        with pytest.raises(InvalidTaxPolicyError) as exc_info:
            get_active_policy("bad", config_dir=tmp_path)
        assert "classification_rules" in exc_info.value.reason
        assert exc_info.value.source.endswith("bad.yaml")

    def test_duplicate_code(self, tmp_path):
        body = VALID_BODY.replace('  "11": taxed\n', '  10: exempt\n')
        _write_policy(tmp_path, "dup", body)
        with pytest.raises(InvalidTaxPolicyError, match="duplicate"):
            get_active_policy("dup", config_dir=tmp_path)

    def test_unknown_classification(self, tmp_path):
        body = VALID_BODY.replace('"11": taxed', '"11": zero_rated')
        _write_policy(tmp_path, "unknown", body)
        with pytest.raises(InvalidTaxPolicyError, match="zero_rated"):
            get_active_policy("unknown", config_dir=tmp_path)

    def test_rate_out_of_range_reports_source(self, tmp_path):
        _write_policy(tmp_path, "rate", VALID_BODY.replace("rate: 0.10", "rate: 18"))
        with pytest.raises(InvalidTaxPolicyError) as exc_info:
            get_active_policy("rate", config_dir=tmp_path)
        assert exc_info.value.source.endswith("rate.yaml")

    @pytest.mark.parametrize("flag", ['"false"', "0", "no_please"])
    def test_negative_subtotal_flag_must_be_boolean(self, tmp_path, flag):
        body = VALID_BODY.replace("allow_negative_subtotal: false", f"allow_negative_subtotal: {flag}")
        _write_policy(tmp_path, "flag", body)
        with pytest.raises(InvalidTaxPolicyError, match="allow_negative_subtotal") as exc_info:
            get_active_policy("flag", config_dir=tmp_path)
        assert exc_info.value.source.endswith("flag.yaml")

    def test_negative_subtotal_flag_defaults_to_true(self, tmp_path):
        _write_policy(tmp_path, "noflag", VALID_BODY.replace("allow_negative_subtotal: false\n", ""))
        assert get_active_policy("noflag", config_dir=tmp_path).allow_negative_subtotal is True

    def test_invalid_currency_is_a_policy_error(self, tmp_path):
        _write_policy(tmp_path, "cur", VALID_BODY.replace("currency: USD", "currency: XYZ"))
        with pytest.raises(InvalidTaxPolicyError, match="XYZ"):
            get_active_policy("cur", config_dir=tmp_path)


class TestParsing:

    def test_rules_must_be_mapping(self):
        with pytest.raises(InvalidTaxPolicyError, match="mapping"):
            parse_tax_policy({
                "policy_id": "x",
                "rate": "0.18",
                "currency": "PEN",
                "classification_rules": ["10", "20", "30"],
            })

    def test_unquoted_codes_become_strings(self):
        policy = parse_tax_policy({
            "policy_id": "x",
            "rate": "0.18",
            "currency": "PEN",
            "classification_rules": {10: "taxed", 20: "exempt", 30: "unaffected"},
        })
        assert policy.known_codes == ("10", "20", "30")

    def test_checksum_ignores_key_order(self):
        assert compute_checksum({"a": 1, "b": {10: "x"}}) == compute_checksum({"b": {"10": "x"}, "a": 1})
