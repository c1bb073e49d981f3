"""Bull call spread: long lower-strike call, short higher-strike call."""

from __future__ import annotations

from typing import Any, ClassVar

from optionsdesk.core.enums import MarketBias, OptionType, OrderSide, RiskLevel
from optionsdesk.strategies.base import LegSpec, ParamsLike, StrategyDefinition, coerce_params
from optionsdesk.strategies.models import StrategyMetrics, StrategyParams
from optionsdesk.strategies.registry import StrategyRegistry


@StrategyRegistry.register
class BullCallSpread(StrategyDefinition):
    strategy_name: ClassVar[str] = "Bull Call Spread"
    description: ClassVar[str] = "Buy call + sell higher strike call"
    market_bias: ClassVar[MarketBias] = MarketBias.BULLISH
    risk_level: ClassVar[RiskLevel] = RiskLevel.MODERATE
    historical_win_rate: ClassVar[float] = 65.0
    best_for: ClassVar[str] = "Moderate bullish view with limited upside"
    ai_reasoning: ClassVar[str] = (
        "Buy the lower strike call and sell the higher strike call for defined-risk upside."
    )
    greeks_profile: ClassVar[dict[str, str]] = {"delta": "+", "gamma": "+", "theta": "-", "vega": "-"}

    required_strikes: ClassVar[tuple[str, ...]] = ("long_strike", "short_strike")
    canonical_params: ClassVar[dict[str, Any]] = {"long_strike": 175, "short_strike": 180, "contracts": 1}

    @classmethod
    def check_strikes(cls, params: StrategyParams) -> None:
        cls._precondition(
            params.long_strike < params.short_strike,
            f"requires long strike < short strike "
            f"(got long={params.long_strike}, short={params.short_strike})",
        )

    @classmethod
    def leg_template(cls, params: StrategyParams) -> list[LegSpec]:
        return [
            (OrderSide.BUY, OptionType.CALL, params.long_strike, "long position"),
            (OrderSide.SELL, OptionType.CALL, params.short_strike, "limit upside"),
        ]

    @classmethod
    def calculate_metrics(cls, params: ParamsLike, premium: float) -> StrategyMetrics:
        """premium is the net debit paid per share."""
        p = coerce_params(params)
        cls._require_strikes(p)
        cls.check_strikes(p)
        width = p.short_strike - p.long_strike
        return StrategyMetrics.build(
            max_profit=width - premium,
            max_loss=-premium,
            breakevens=[p.long_strike + premium],
        )
