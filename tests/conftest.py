"""
Pytest fixtures for the IGV engine test suite.

Provides:
- Logging and log context reset between tests
- The default tax policy and a small mixed document
"""

from decimal import Decimal

import pytest

from igv_kernel.domain import DEFAULT_POLICY, LineItem, TaxClassification, TaxPolicy
from igv_kernel.logging_config import LogContext, reset_logging


@pytest.fixture(autouse=True)
def _reset_logging_state():
    """Keep the igv_kernel logger propagating so caplog sees every record."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def default_policy() -> TaxPolicy:
    return DEFAULT_POLICY


@pytest.fixture
def mixed_items() -> list[LineItem]:
    """One line per classification: 2 x 100 taxed, 50 exempt, 30 unaffected."""
    return [
        LineItem(quantity=2, unit_price=Decimal("100.00"), code="P-001", description="Servicio"),
        LineItem(
            quantity=1,
            unit_price=Decimal("50.00"),
            classification=TaxClassification.EXEMPT,
            description="Libro",
        ),
        LineItem(
            quantity=1,
            unit_price=Decimal("30.00"),
            classification=TaxClassification.UNAFFECTED,
            description="Transporte",
        ),
    ]
