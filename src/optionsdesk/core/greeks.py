"""Position-scale Greeks."""

from __future__ import annotations

from optionsdesk.core.enums import OrderSide
from optionsdesk.core.models import Greeks


def position_greeks(
    per_share: Greeks,
    side: OrderSide,
    quantity: int,
    multiplier: int = 100,
) -> Greeks:
    """Scale per-share Greeks to a position; a short leg flips every sign."""
    return per_share.scaled(quantity * multiplier * side.sign)
