"""Bull put spread: short higher-strike put, long lower-strike put for a credit."""

from __future__ import annotations

from typing import Any, ClassVar

from optionsdesk.core.enums import MarketBias, OptionType, OrderSide, RiskLevel
from optionsdesk.strategies.base import LegSpec, ParamsLike, StrategyDefinition, coerce_params
from optionsdesk.strategies.models import StrategyMetrics, StrategyParams
from optionsdesk.strategies.registry import StrategyRegistry


@StrategyRegistry.register
class BullPutSpread(StrategyDefinition):
    strategy_name: ClassVar[str] = "Bull Put Spread"
    description: ClassVar[str] = "Sell put + buy lower strike put"
    market_bias: ClassVar[MarketBias] = MarketBias.BULLISH
    risk_level: ClassVar[RiskLevel] = RiskLevel.MODERATE
    historical_win_rate: ClassVar[float] = 70.0
    best_for: ClassVar[str] = "Moderate bullish view with income"
    ai_reasoning: ClassVar[str] = "Sell puts to collect premium with upward momentum."
    greeks_profile: ClassVar[dict[str, str]] = {"delta": "+", "gamma": "0", "theta": "+", "vega": "-"}

    required_strikes: ClassVar[tuple[str, ...]] = ("short_strike", "long_strike")
    canonical_params: ClassVar[dict[str, Any]] = {"short_strike": 180, "long_strike": 175, "contracts": 1}

    @classmethod
    def check_strikes(cls, params: StrategyParams) -> None:
        cls._precondition(
            params.short_strike > params.long_strike,
            f"requires short strike > long strike "
            f"(got short={params.short_strike}, long={params.long_strike})",
        )

    @classmethod
    def leg_template(cls, params: StrategyParams) -> list[LegSpec]:
        return [
            (OrderSide.SELL, OptionType.PUT, params.short_strike, "collect premium"),
            (OrderSide.BUY, OptionType.PUT, params.long_strike, "limit risk"),
        ]

    @classmethod
    def calculate_metrics(cls, params: ParamsLike, premium: float) -> StrategyMetrics:
        """premium is the net credit received per share."""
        p = coerce_params(params)
        cls._require_strikes(p)
        cls.check_strikes(p)
        width = p.short_strike - p.long_strike
        return StrategyMetrics.build(
            max_profit=premium,
            max_loss=-(width - premium),
            breakevens=[p.short_strike - premium],
        )
