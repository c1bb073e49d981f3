"""Iron butterfly: short straddle at the body, long strangle at the wings."""

from __future__ import annotations

from typing import Any, ClassVar

from optionsdesk.core.enums import MarketBias, OptionType, OrderSide, RiskLevel
from optionsdesk.strategies.base import LegSpec, ParamsLike, StrategyDefinition, coerce_params
from optionsdesk.strategies.models import StrategyMetrics, StrategyParams
from optionsdesk.strategies.registry import StrategyRegistry


@StrategyRegistry.register
class IronButterfly(StrategyDefinition):
    strategy_name: ClassVar[str] = "Iron Butterfly"
    description: ClassVar[str] = "Sell straddle + buy strangle"
    market_bias: ClassVar[MarketBias] = MarketBias.NEUTRAL
    risk_level: ClassVar[RiskLevel] = RiskLevel.MODERATE
    historical_win_rate: ClassVar[float] = 55.0
    best_for: ClassVar[str] = "Pinning to strike price with income"
    ai_reasoning: ClassVar[str] = "Maximum profit if price stays exactly at the center strike."
    greeks_profile: ClassVar[dict[str, str]] = {"delta": "~0", "gamma": "-", "theta": "+", "vega": "-"}

    required_strikes: ClassVar[tuple[str, ...]] = ("wing_strike1", "center_strike", "wing_strike2")
    canonical_params: ClassVar[dict[str, Any]] = {
        "center_strike": 180,
        "wing_strike1": 175,
        "wing_strike2": 185,
        "contracts": 1,
    }

    @classmethod
    def check_strikes(cls, params: StrategyParams) -> None:
        cls._precondition(
            params.wing_strike1 < params.center_strike < params.wing_strike2,
            "requires lower wing < center < upper wing "
            f"(got {params.wing_strike1} / {params.center_strike} / {params.wing_strike2})",
        )

    @classmethod
    def leg_template(cls, params: StrategyParams) -> list[LegSpec]:
        return [
            (OrderSide.BUY, OptionType.PUT, params.wing_strike1, "wing"),
            (OrderSide.SELL, OptionType.PUT, params.center_strike, "body"),
            (OrderSide.SELL, OptionType.CALL, params.center_strike, "body"),
            (OrderSide.BUY, OptionType.CALL, params.wing_strike2, "wing"),
        ]

    @classmethod
    def calculate_metrics(cls, params: ParamsLike, premium: float) -> StrategyMetrics:
        """premium is the total net credit received per share."""
        p = coerce_params(params)
        cls._require_strikes(p)
        cls.check_strikes(p)
        width = max(p.center_strike - p.wing_strike1, p.wing_strike2 - p.center_strike)
        return StrategyMetrics.build(
            max_profit=premium,
            max_loss=-(width - premium),
            breakevens=[p.center_strike - premium, p.center_strike + premium],
        )
