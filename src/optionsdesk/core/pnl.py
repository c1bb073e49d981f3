"""Mark-to-market P&L for single option legs and leg portfolios."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from optionsdesk.config import get_config
from optionsdesk.core.enums import OrderSide
from optionsdesk.core.greeks import position_greeks
from optionsdesk.core.models import Greeks, LegPnL, MarketSnapshot, PortfolioGreeks, StrategyLeg
from optionsdesk.core.pricing import bsm_price

logger = logging.getLogger(__name__)


def leg_pnl(leg: StrategyLeg, snapshot: MarketSnapshot) -> LegPnL:
    """Value one leg against a market snapshot.

    A long leg profits when the option gains value, a short leg when it
    loses value. The notional of a short leg is negative (a liability).
    """
    multiplier = get_config().contract_multiplier
    pricing = bsm_price(
        S=snapshot.current_price,
        K=leg.strike,
        T=leg.years_to_expiry,
        r=snapshot.risk_free_rate,
        sigma=snapshot.implied_volatility,
        option_type=leg.option_type,
    )
    current_value = pricing.price

    if leg.action == OrderSide.BUY:
        pnl_per_contract = current_value - leg.entry_price
        total_value = current_value * leg.quantity * multiplier
    else:
        pnl_per_contract = leg.entry_price - current_value
        total_value = -current_value * leg.quantity * multiplier

    return LegPnL(
        leg=leg,
        current_value=current_value,
        entry_price=leg.entry_price,
        pnl_per_contract=pnl_per_contract,
        total_pnl=pnl_per_contract * leg.quantity * multiplier,
        total_value=total_value,
        percent_change=(pnl_per_contract / leg.entry_price * 100) if leg.entry_price != 0 else 0.0,
        greeks=position_greeks(pricing.greeks, leg.action, leg.quantity, multiplier),
        intrinsic_value=pricing.intrinsic_value,
        time_value=pricing.time_value,
        days_to_expiry=leg.days_to_expiry,
    )


def estimate_entry_price(leg: StrategyLeg, snapshot: MarketSnapshot) -> float:
    """Fair value plus a simulated half-spread: sells fill higher, buys lower."""
    config = get_config()
    pricing = bsm_price(
        S=snapshot.current_price,
        K=leg.strike,
        T=leg.years_to_expiry,
        r=snapshot.risk_free_rate,
        sigma=snapshot.implied_volatility,
        option_type=leg.option_type,
    )
    adjustment = config.bid_ask_adjustment if leg.action == OrderSide.SELL else -config.bid_ask_adjustment
    return max(config.min_entry_price, pricing.price + adjustment)


def price_legs(legs: Sequence[StrategyLeg], snapshot: MarketSnapshot) -> list[StrategyLeg]:
    """Return copies of legs with an estimated entry price where none was set."""
    priced = []
    for leg in legs:
        if leg.entry_price > 0:
            priced.append(leg)
            continue
        estimate = estimate_entry_price(leg, snapshot)
        logger.debug(f"Estimated entry for {leg.label}: {estimate:.2f}")
        priced.append(leg.model_copy(update={"entry_price": estimate}))
    return priced


def portfolio_greeks(legs: Sequence[StrategyLeg], snapshot: MarketSnapshot) -> PortfolioGreeks:
    """Aggregate position Greeks with simple risk gauges."""
    total = Greeks()
    total_value = 0.0
    for leg in legs:
        pnl = leg_pnl(leg, snapshot)
        total = total + pnl.greeks
        total_value += pnl.total_value

    return PortfolioGreeks(
        delta=total.delta,
        gamma=total.gamma,
        theta=total.theta,
        vega=total.vega,
        total_value=total_value,
        delta_risk=abs(total.delta),
        gamma_risk=abs(total.gamma * snapshot.current_price * 0.01),
        theta_decay=total.theta,
        vega_risk=abs(total.vega * 0.01),
    )
