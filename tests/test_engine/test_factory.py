"""Tests for the strategy factory."""

from typing import ClassVar

import pytest

from optionsdesk.core.enums import MarketBias, OptionType, OrderSide
from optionsdesk.core.exceptions import (
    StrategyNotFoundError,
    StrategyPreconditionError,
    StrategyValidationError,
)
from optionsdesk.core.models import MarketSnapshot
from optionsdesk.engine.factory import (
    analyze_strategy,
    build_strategy,
    bulk_validate,
    compare_strategies,
    recommend_strategies,
    risk_grade,
)
from optionsdesk.engine.models import ScenarioSpec
from optionsdesk.strategies.base import StrategyDefinition
from optionsdesk.strategies.registry import StrategyRegistry

CONDOR = {"put_sell_strike": 170, "put_buy_strike": 165, "call_sell_strike": 185, "call_buy_strike": 190}


class BrokenPutSpread(StrategyDefinition):
    """Claims to be a put spread but trades calls."""

    strategy_name: ClassVar[str] = "Broken Put Spread"
    market_bias: ClassVar[MarketBias] = MarketBias.BULLISH
    required_strikes: ClassVar[tuple[str, ...]] = ("short_strike", "long_strike")
    canonical_params: ClassVar[dict] = {"short_strike": 180, "long_strike": 175}

    @classmethod
    def check_strikes(cls, params):
        pass

    @classmethod
    def leg_template(cls, params):
        return [
            (OrderSide.SELL, OptionType.CALL, params.short_strike, "short"),
            (OrderSide.BUY, OptionType.CALL, params.long_strike, "long"),
        ]

    @classmethod
    def calculate_metrics(cls, params, premium):
        raise NotImplementedError


def test_build_bull_put():
    built = build_strategy("bull put spread", {"short_strike": 180, "long_strike": 175, "contracts": 2})
    assert built.name == "Bull Put Spread"
    assert built.market_bias == MarketBias.BULLISH
    assert len(built.legs) == 2
    assert built.trade_setup.legs == "SELL 180 PUT + BUY 175 PUT"
    assert built.trade_setup.contracts == 2
    assert built.validation.is_valid


def test_build_unknown_strategy():
    with pytest.raises(StrategyNotFoundError):
        build_strategy("Jade Lizard", {})


def test_build_inverted_strikes():
    with pytest.raises(StrategyPreconditionError):
        build_strategy("Bull Put Spread", {"short_strike": 175, "long_strike": 180})


def test_build_rejects_inconsistent_definition():
    StrategyRegistry.register(BrokenPutSpread)
    with pytest.raises(StrategyValidationError) as exc_info:
        build_strategy("Broken Put Spread", BrokenPutSpread.canonical_params)
    report = exc_info.value.report
    assert report is not None
    assert report.critical_errors[0].kind == "PUT_SPREAD_WITH_CALLS"


def test_analyze_estimates_entries():
    snap = MarketSnapshot(current_price=177.0, implied_volatility=0.25)
    analysis = analyze_strategy("Iron Condor", CONDOR, snap)

    assert all(leg.entry_price >= 0.05 for leg in analysis.legs)
    assert analysis.pnl.net_premium > 0
    assert len(analysis.pnl.breakevens) == 2
    assert analysis.pnl.profit_probability == 0.7
    assert analysis.risk_metrics.risk_grade in {"A", "B", "C", "D", "F"}
    assert not analysis.pnl.max_loss.is_unlimited


def test_analyze_keeps_given_entries():
    snap = MarketSnapshot(current_price=185.0)
    params = {"short_strike": 180, "long_strike": 175, "entry_prices": [3.0, 0.5]}
    analysis = analyze_strategy("Bull Put Spread", params, snap, ScenarioSpec(price_range=[170.0, 190.0]))
    assert [leg.entry_price for leg in analysis.legs] == [3.0, 0.5]
    assert analysis.pnl.max_profit.amount == pytest.approx(250.0)
    assert analysis.risk_metrics.risk_reward_ratio == pytest.approx(1.0)
    assert analysis.risk_metrics.risk_grade == "F"
    assert len(analysis.pnl.scenario_analysis) == 2


def test_analyze_reward_recommendation():
    snap = MarketSnapshot(current_price=185.0)
    params = {"short_strike": 180, "long_strike": 175, "entry_prices": [4.0, 0.5]}
    analysis = analyze_strategy("Bull Put Spread", params, snap)
    assert analysis.risk_metrics.risk_reward_ratio == pytest.approx(2.33)
    assert [r.title for r in analysis.recommendations] == ["Excellent Risk/Reward"]


@pytest.mark.parametrize(
    "ratio,grade",
    [(3.5, "A"), (2.5, "B"), (1.6, "C"), (1.2, "D"), (1.0, "F"), (0.4, "F")],
)
def test_risk_grade(ratio, grade):
    assert risk_grade(ratio) == grade


def test_recommend_bullish_low_vol():
    recs = recommend_strategies(MarketBias.BULLISH, volatility="low")
    assert recs[0].strategy == "Bull Put Spread"
    assert recs[0].score == 5
    assert recs[1].strategy == "Bull Call Spread"
    assert recs[1].score == 3
    assert len(recs) == 5


def test_recommend_limit_and_empty():
    assert len(recommend_strategies(MarketBias.NEUTRAL, limit=1)) == 1
    assert recommend_strategies() == []


def test_compare_skips_failures():
    results = compare_strategies(
        ["Bull Put Spread", "Bear Put Spread", "Nope"], {"short_strike": 180, "long_strike": 175}
    )
    assert [r.name for r in results] == ["Bull Put Spread"]
    assert results[0].legs == 2
    assert results[0].trade_setup == "Sell 180 Put + Buy 175 Put"


def test_compare_with_per_strategy_params():
    results = compare_strategies(
        ["Bull Put Spread", "Iron Condor"],
        {"Bull Put Spread": {"short_strike": 180, "long_strike": 175}, "Iron Condor": CONDOR},
    )
    assert [r.name for r in results] == ["Bull Put Spread", "Iron Condor"]
    assert results[1].win_rate == 60.0


def test_bulk_validate():
    result = bulk_validate(
        [
            {"strategy_name": "Bull Put Spread", "trade_setup": {"action": "Sell 180 Put + Buy 175 Put", "legs": "SELL 180 PUT + BUY 175 PUT"}},
            {"strategy_name": "Bull Put Spread", "trade_setup": {"action": "Sell 180 Call + Buy 175 Call", "legs": "SELL 180 CALL + BUY 175 CALL"}},
            {"strategy_name": "Jade Lizard", "trade_setup": "Sell 180 Put"},
        ]
    )
    assert result.total == 3
    assert result.valid == 1
    assert result.invalid == 2
    assert result.results[2].error is not None
    assert result.results[2].validation is None


def test_bulk_validate_isolates_bad_entries():
    result = bulk_validate(
        [
            {"strategy_name": "Bull Put Spread", "trade_setup": {"action": "Sell 180 Put", "contracts": "many"}},
            {"strategy_name": None, "trade_setup": "Sell 180 Put + Buy 175 Put"},
            {"strategy_name": "Bull Put Spread", "trade_setup": 42},
            {"strategy_name": "Bull Put Spread", "trade_setup": {"action": "Sell 180 Put + Buy 175 Put", "legs": "SELL 180 PUT + BUY 175 PUT"}},
        ]
    )
    assert result.total == 4
    assert result.valid == 1
    assert result.invalid == 3
    assert "contracts" in result.results[0].error
    assert result.results[1].strategy_name == "None"
    assert "strategy name or definition" in result.results[1].error
    assert "unsupported trade setup" in result.results[2].error
    assert result.results[3].is_valid
