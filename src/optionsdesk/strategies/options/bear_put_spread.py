"""Bear put spread: long higher-strike put, short lower-strike put."""

from __future__ import annotations

from typing import Any, ClassVar

from optionsdesk.core.enums import MarketBias, OptionType, OrderSide, RiskLevel
from optionsdesk.strategies.base import LegSpec, ParamsLike, StrategyDefinition, coerce_params
from optionsdesk.strategies.models import StrategyMetrics, StrategyParams
from optionsdesk.strategies.registry import StrategyRegistry


@StrategyRegistry.register
class BearPutSpread(StrategyDefinition):
    strategy_name: ClassVar[str] = "Bear Put Spread"
    description: ClassVar[str] = "Buy put + sell lower strike put"
    market_bias: ClassVar[MarketBias] = MarketBias.BEARISH
    risk_level: ClassVar[RiskLevel] = RiskLevel.MODERATE
    historical_win_rate: ClassVar[float] = 65.0
    best_for: ClassVar[str] = "Moderate bearish view with defined risk"
    ai_reasoning: ClassVar[str] = (
        "Buy the higher strike put and sell the lower strike put for defined-risk downside."
    )
    greeks_profile: ClassVar[dict[str, str]] = {"delta": "-", "gamma": "+", "theta": "-", "vega": "-"}

    required_strikes: ClassVar[tuple[str, ...]] = ("long_strike", "short_strike")
    canonical_params: ClassVar[dict[str, Any]] = {"long_strike": 180, "short_strike": 175, "contracts": 1}

    @classmethod
    def check_strikes(cls, params: StrategyParams) -> None:
        cls._precondition(
            params.long_strike > params.short_strike,
            f"requires long strike > short strike "
            f"(got long={params.long_strike}, short={params.short_strike})",
        )

    @classmethod
    def leg_template(cls, params: StrategyParams) -> list[LegSpec]:
        return [
            (OrderSide.BUY, OptionType.PUT, params.long_strike, "long position"),
            (OrderSide.SELL, OptionType.PUT, params.short_strike, "reduce cost"),
        ]

    @classmethod
    def calculate_metrics(cls, params: ParamsLike, premium: float) -> StrategyMetrics:
        """premium is the net debit paid per share."""
        p = coerce_params(params)
        cls._require_strikes(p)
        cls.check_strikes(p)
        width = p.long_strike - p.short_strike
        return StrategyMetrics.build(
            max_profit=width - premium,
            max_loss=-premium,
            breakevens=[p.long_strike - premium],
        )
