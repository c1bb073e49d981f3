"""Strategy-level P&L aggregation.

Sums leg P&L and Greeks, estimates breakevens, finds the expiration payoff
extremes and attaches a rough probability of profit.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

import numpy as np
import pandas as pd
from scipy.stats import norm

from optionsdesk.config import get_config
from optionsdesk.core.enums import OptionType, OrderSide
from optionsdesk.core.exceptions import InvalidInputError
from optionsdesk.core.models import (
    Greeks,
    MarketSnapshot,
    PayoffExtreme,
    ScenarioPoint,
    StrategyLeg,
    StrategyPnLReport,
)
from optionsdesk.core.pnl import leg_pnl
from optionsdesk.core.pricing import intrinsic_value
from optionsdesk.engine.models import ScenarioSpec

logger = logging.getLogger(__name__)


def _require_legs(legs: Sequence[StrategyLeg]) -> None:
    if not legs:
        raise InvalidInputError("a strategy needs at least one leg")


def net_premium(legs: Sequence[StrategyLeg]) -> float:
    """Cash flow at entry: premium paid is negative, premium received positive."""
    multiplier = get_config().contract_multiplier
    return sum(-leg.action.sign * leg.entry_price * leg.quantity * multiplier for leg in legs)


def net_premium_per_share(legs: Sequence[StrategyLeg]) -> float:
    return sum(-leg.action.sign * leg.entry_price for leg in legs)


def expiration_pnl(legs: Sequence[StrategyLeg], price: float) -> float:
    """Total P&L if the underlying settles at ``price`` at expiration."""
    multiplier = get_config().contract_multiplier
    total = 0.0
    for leg in legs:
        payoff = intrinsic_value(price, leg.strike, leg.option_type)
        total += leg.action.sign * (payoff - leg.entry_price) * leg.quantity * multiplier
    return total


def calculate_breakevens(legs: Sequence[StrategyLeg]) -> list[float]:
    """Estimate breakevens from the strike set and net premium per share.

    Four-leg strategies with two calls and two puts use the inner strikes;
    otherwise a long call adds lowest strike + premium and a long put adds
    highest strike - premium. Non-positive results are dropped.
    """
    _require_legs(legs)
    strikes = sorted(leg.strike for leg in legs)
    premium = abs(net_premium_per_share(legs))
    calls = sorted(leg.strike for leg in legs if leg.option_type == OptionType.CALL)
    puts = sorted(leg.strike for leg in legs if leg.option_type == OptionType.PUT)

    breakevens: list[float] = []
    if len(legs) >= 4 and len(calls) >= 2 and len(puts) >= 2:
        breakevens.append(puts[1] - premium)
        breakevens.append(calls[0] + premium)
    else:
        if any(leg.option_type == OptionType.CALL and leg.action == OrderSide.BUY for leg in legs):
            breakevens.append(strikes[0] + premium)
        if any(leg.option_type == OptionType.PUT and leg.action == OrderSide.BUY for leg in legs):
            breakevens.append(strikes[-1] - premium)

    return sorted({round(be, 10) for be in breakevens if be > 0})


def expected_move(snapshot: MarketSnapshot, days_to_expiry: int) -> float:
    return snapshot.current_price * snapshot.implied_volatility * math.sqrt(days_to_expiry / 365.0)


def _horizon_days(legs: Sequence[StrategyLeg]) -> int:
    return legs[0].days_to_expiry or get_config().default_days_to_expiry


def price_grid(legs: Sequence[StrategyLeg], snapshot: MarketSnapshot) -> np.ndarray:
    """Expiration prices to sweep: zero up to spot plus N expected moves.

    Every strike is included so piecewise-linear payoffs hit their kinks.
    """
    config = get_config()
    move = expected_move(snapshot, _horizon_days(legs))
    top = max(
        snapshot.current_price + config.scenario_expected_moves * move,
        max(leg.strike for leg in legs) * 1.1,
    )
    grid = np.linspace(0.0, top, config.scenario_grid_points)
    return np.unique(np.concatenate([grid, [leg.strike for leg in legs]]))


def net_call_exposure(legs: Sequence[StrategyLeg]) -> int:
    """Net long call contracts; the payoff slope above the highest strike."""
    return sum(
        leg.action.sign * leg.quantity for leg in legs if leg.option_type == OptionType.CALL
    )


def payoff_extremes(
    legs: Sequence[StrategyLeg], snapshot: MarketSnapshot
) -> tuple[PayoffExtreme, PayoffExtreme]:
    """Max profit and max loss at expiration.

    Puts cap out at a zero underlying, so only net call exposure can make
    either side unlimited.
    """
    _require_legs(legs)
    grid = price_grid(legs, snapshot)
    pnls = np.array([expiration_pnl(legs, float(p)) for p in grid])

    hi_idx = int(np.argmax(pnls))
    lo_idx = int(np.argmin(pnls))
    exposure = net_call_exposure(legs)

    max_profit = PayoffExtreme(
        amount=float(pnls[hi_idx]),
        at_price=float(grid[hi_idx]),
        is_unlimited=exposure > 0,
    )
    max_loss = PayoffExtreme(
        amount=float(pnls[lo_idx]),
        at_price=float(grid[lo_idx]),
        is_unlimited=exposure < 0,
    )
    if max_profit.is_unlimited:
        max_profit = PayoffExtreme(amount=float(pnls[-1]), at_price=float(grid[-1]), is_unlimited=True)
    if max_loss.is_unlimited:
        max_loss = PayoffExtreme(amount=float(pnls[-1]), at_price=float(grid[-1]), is_unlimited=True)
    return max_profit, max_loss


def profit_probability(
    legs: Sequence[StrategyLeg],
    snapshot: MarketSnapshot,
    breakevens: Sequence[float] | None = None,
) -> float:
    """Rough chance of finishing profitable. A heuristic, not a risk-neutral probability.

    One breakeven: the normal tail beyond it on the profitable side, with
    the expected move as standard deviation. Two or more: 0.7 when spot sits
    between the outer breakevens, 0.3 otherwise. None: 0.5.
    """
    if breakevens is None:
        breakevens = calculate_breakevens(legs)
    if not breakevens:
        return 0.5

    spot = snapshot.current_price
    if len(breakevens) == 1:
        be = breakevens[0]
        move = expected_move(snapshot, _horizon_days(legs))
        if move <= 0:
            return 0.5
        z = (be - spot) / move
        step = max(be * 1e-3, 1e-6)
        profitable_above = expiration_pnl(legs, be + step) > expiration_pnl(legs, max(be - step, 0.0))
        prob = 1.0 - norm.cdf(z) if profitable_above else norm.cdf(z)
    else:
        lower, upper = min(breakevens), max(breakevens)
        prob = 0.7 if lower <= spot <= upper else 0.3

    return float(max(0.0, min(1.0, prob)))


def scenario_analysis(
    legs: Sequence[StrategyLeg],
    snapshot: MarketSnapshot,
    prices: Sequence[float],
    days: Sequence[int] | None = None,
) -> list[ScenarioPoint]:
    """Revalue the strategy at each price, and at each DTE override when given."""
    _require_legs(legs)
    results = []
    for price in prices:
        at_price = snapshot.model_copy(update={"current_price": float(price)})
        if days:
            for d in days:
                shifted = [leg.model_copy(update={"days_to_expiry": d}) for leg in legs]
                pnl = sum(leg_pnl(leg, at_price).total_pnl for leg in shifted)
                results.append(ScenarioPoint(price=float(price), pnl=pnl, days_to_expiry=d))
        else:
            pnl = sum(leg_pnl(leg, at_price).total_pnl for leg in legs)
            results.append(ScenarioPoint(price=float(price), pnl=pnl))
    return results


def scenario_frame(points: Sequence[ScenarioPoint]) -> pd.DataFrame:
    """Pivot scenario points into a price x days-to-expiry P&L table."""
    df = pd.DataFrame([p.model_dump() for p in points])
    if df.empty:
        return df
    if df["days_to_expiry"].isna().all():
        return df.set_index("price")[["pnl"]]
    return df.pivot(index="price", columns="days_to_expiry", values="pnl")


def aggregate_strategy_pnl(
    legs: Sequence[StrategyLeg],
    snapshot: MarketSnapshot,
    scenario: ScenarioSpec | None = None,
) -> StrategyPnLReport:
    """Roll leg-level P&L up into a strategy report."""
    _require_legs(legs)
    leg_results = [leg_pnl(leg, snapshot) for leg in legs]

    greeks = Greeks()
    for result in leg_results:
        greeks = greeks + result.greeks

    breakevens = calculate_breakevens(legs)
    max_profit, max_loss = payoff_extremes(legs, snapshot)
    probability = profit_probability(legs, snapshot, breakevens)

    scenarios = None
    if scenario is not None:
        scenarios = scenario_analysis(legs, snapshot, scenario.price_range, scenario.time_decay)

    report = StrategyPnLReport(
        legs=leg_results,
        total_pnl=sum(r.total_pnl for r in leg_results),
        total_value=sum(r.total_value for r in leg_results),
        net_premium=net_premium(legs),
        greeks=greeks,
        breakevens=breakevens,
        max_profit=max_profit,
        max_loss=max_loss,
        profit_probability=probability,
        scenario_analysis=scenarios,
    )
    logger.debug(
        f"Aggregated {len(legs)} legs: pnl={report.total_pnl:.2f} "
        f"max_profit={max_profit.amount:.2f} max_loss={max_loss.amount:.2f}"
    )
    return report
