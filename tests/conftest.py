"""Shared test fixtures."""

from __future__ import annotations

import pytest

from optionsdesk.core.models import MarketSnapshot
from optionsdesk.strategies.registry import get_registry


@pytest.fixture(autouse=True)
def isolated_registry():
    """Load the built-in strategies and undo any registrations a test makes."""
    registry = get_registry()
    saved = registry.snapshot()
    yield registry
    registry.restore(saved)


@pytest.fixture
def snapshot() -> MarketSnapshot:
    return MarketSnapshot(current_price=185.0, implied_volatility=0.25, risk_free_rate=0.05)
