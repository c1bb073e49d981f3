"""Tests for strategy-level P&L aggregation."""

import pytest

from optionsdesk.core.enums import OptionType, OrderSide
from optionsdesk.core.exceptions import InvalidInputError
from optionsdesk.core.models import MarketSnapshot, StrategyLeg
from optionsdesk.core.pnl import leg_pnl
from optionsdesk.engine.aggregator import (
    aggregate_strategy_pnl,
    calculate_breakevens,
    expiration_pnl,
    net_call_exposure,
    net_premium,
    payoff_extremes,
    price_grid,
    profit_probability,
    scenario_analysis,
    scenario_frame,
)
from optionsdesk.engine.models import ScenarioSpec
from optionsdesk.strategies.options import BullCallSpread, BullPutSpread, IronButterfly, IronCondor


@pytest.fixture
def bull_put_legs():
    return BullPutSpread.generate_legs({"short_strike": 180, "long_strike": 175, "entry_prices": [3.0, 0.5]})


@pytest.fixture
def condor_legs():
    return IronCondor.generate_legs(
        {
            "put_sell_strike": 170,
            "put_buy_strike": 165,
            "call_sell_strike": 185,
            "call_buy_strike": 190,
            "entry_prices": [2.0, 1.0, 2.0, 1.0],
        }
    )


def _single(action, option_type, strike=100.0, entry=5.0):
    return [StrategyLeg(action=action, option_type=option_type, strike=strike, entry_price=entry)]


def test_net_premium_credit(bull_put_legs):
    assert net_premium(bull_put_legs) == pytest.approx(250.0)


def test_net_premium_debit():
    legs = BullCallSpread.generate_legs({"long_strike": 175, "short_strike": 180, "entry_prices": [4.0, 1.5]})
    assert net_premium(legs) == pytest.approx(-250.0)
    assert calculate_breakevens(legs) == [pytest.approx(177.5)]


def test_expiration_pnl(bull_put_legs):
    assert expiration_pnl(bull_put_legs, 200.0) == pytest.approx(250.0)
    assert expiration_pnl(bull_put_legs, 177.5) == pytest.approx(0.0)
    assert expiration_pnl(bull_put_legs, 150.0) == pytest.approx(-250.0)


def test_bull_put_breakeven(bull_put_legs):
    assert calculate_breakevens(bull_put_legs) == [pytest.approx(177.5)]


def test_condor_breakevens(condor_legs):
    assert calculate_breakevens(condor_legs) == [pytest.approx(168.0), pytest.approx(187.0)]


def test_butterfly_breakevens():
    legs = IronButterfly.generate_legs(
        {"center_strike": 180, "wing_strike1": 175, "wing_strike2": 185, "entry_prices": [0.5, 2.5, 2.5, 0.5]}
    )
    assert calculate_breakevens(legs) == [pytest.approx(176.0), pytest.approx(184.0)]


def test_breakevens_drop_non_positive():
    legs = _single(OrderSide.BUY, OptionType.PUT, strike=3.0, entry=5.0)
    assert calculate_breakevens(legs) == []


def test_bounded_extremes(bull_put_legs, snapshot):
    max_profit, max_loss = payoff_extremes(bull_put_legs, snapshot)
    assert max_profit.amount == pytest.approx(250.0)
    assert max_profit.at_price == pytest.approx(180.0)
    assert not max_profit.is_unlimited
    assert max_loss.amount == pytest.approx(-250.0)
    assert max_loss.at_price <= 175.0
    assert not max_loss.is_unlimited


def test_condor_extremes(condor_legs, snapshot):
    max_profit, max_loss = payoff_extremes(condor_legs, snapshot)
    assert max_profit.amount == pytest.approx(200.0)
    assert max_loss.amount == pytest.approx(-300.0)
    assert not max_profit.is_unlimited
    assert not max_loss.is_unlimited


def test_long_call_unlimited_profit():
    snap = MarketSnapshot(current_price=100.0)
    legs = _single(OrderSide.BUY, OptionType.CALL)
    max_profit, max_loss = payoff_extremes(legs, snap)
    assert max_profit.is_unlimited
    assert max_profit.amount > 0
    assert max_loss.amount == pytest.approx(-500.0)
    assert not max_loss.is_unlimited
    assert calculate_breakevens(legs) == [pytest.approx(105.0)]


def test_short_call_unlimited_loss():
    snap = MarketSnapshot(current_price=100.0)
    legs = _single(OrderSide.SELL, OptionType.CALL)
    max_profit, max_loss = payoff_extremes(legs, snap)
    assert max_loss.is_unlimited
    assert max_loss.amount < 0
    assert max_profit.amount == pytest.approx(500.0)
    assert net_call_exposure(legs) == -1


def test_long_put_is_bounded():
    snap = MarketSnapshot(current_price=100.0)
    max_profit, _ = payoff_extremes(_single(OrderSide.BUY, OptionType.PUT), snap)
    assert not max_profit.is_unlimited
    assert max_profit.amount == pytest.approx(9500.0)
    assert max_profit.at_price == 0.0


def test_price_grid_contains_strikes(condor_legs, snapshot):
    grid = price_grid(condor_legs, snapshot)
    assert grid[0] == 0.0
    for strike in (165.0, 170.0, 185.0, 190.0):
        assert strike in grid
    assert grid[-1] >= 190.0 * 1.1


def test_probability_single_breakeven(bull_put_legs):
    above = MarketSnapshot(current_price=185.0)
    below = MarketSnapshot(current_price=170.0)
    assert profit_probability(bull_put_legs, above) > 0.5
    assert profit_probability(bull_put_legs, below) < 0.5


def test_probability_range(condor_legs):
    assert profit_probability(condor_legs, MarketSnapshot(current_price=177.0)) == 0.7
    assert profit_probability(condor_legs, MarketSnapshot(current_price=200.0)) == 0.3


def test_probability_without_breakevens():
    legs = _single(OrderSide.BUY, OptionType.PUT, strike=3.0, entry=5.0)
    assert profit_probability(legs, MarketSnapshot(current_price=100.0)) == 0.5


def test_aggregate_report(bull_put_legs, snapshot):
    report = aggregate_strategy_pnl(bull_put_legs, snapshot)
    leg_results = [leg_pnl(leg, snapshot) for leg in bull_put_legs]

    assert len(report.legs) == 2
    assert report.total_pnl == pytest.approx(sum(r.total_pnl for r in leg_results))
    assert report.total_value == pytest.approx(sum(r.total_value for r in leg_results))
    assert report.greeks.delta == pytest.approx(sum(r.greeks.delta for r in leg_results))
    assert report.greeks.theta == pytest.approx(sum(r.greeks.theta for r in leg_results))
    assert report.net_premium == pytest.approx(250.0)
    assert report.breakevens == [pytest.approx(177.5)]
    assert report.max_profit.amount == pytest.approx(250.0)
    assert 0.0 <= report.profit_probability <= 1.0
    assert report.scenario_analysis is None


def test_aggregate_with_scenarios(bull_put_legs, snapshot):
    report = aggregate_strategy_pnl(
        bull_put_legs, snapshot, ScenarioSpec(price_range=[170.0, 180.0, 190.0], time_decay=[30, 0])
    )
    assert len(report.scenario_analysis) == 6


def test_aggregate_requires_legs(snapshot):
    with pytest.raises(InvalidInputError):
        aggregate_strategy_pnl([], snapshot)


def test_scenarios_at_expiry_match_payoff(bull_put_legs, snapshot):
    prices = [160.0, 177.5, 195.0]
    points = scenario_analysis(bull_put_legs, snapshot, prices, days=[0])
    for point in points:
        assert point.days_to_expiry == 0
        assert point.pnl == pytest.approx(expiration_pnl(bull_put_legs, point.price))


def test_scenario_frame_pivot(bull_put_legs, snapshot):
    points = scenario_analysis(bull_put_legs, snapshot, [170.0, 180.0, 190.0], days=[30, 10, 0])
    frame = scenario_frame(points)
    assert frame.shape == (3, 3)
    assert frame.loc[190.0, 0] == pytest.approx(250.0)


def test_scenario_frame_without_decay(bull_put_legs, snapshot):
    frame = scenario_frame(scenario_analysis(bull_put_legs, snapshot, [170.0, 190.0]))
    assert list(frame.columns) == ["pnl"]
    assert len(frame) == 2
