"""Iron condor: a short put spread below the market and a short call spread above it."""

from __future__ import annotations

from typing import Any, ClassVar

from optionsdesk.core.enums import MarketBias, OptionType, OrderSide, RiskLevel
from optionsdesk.strategies.base import LegSpec, ParamsLike, StrategyDefinition, coerce_params
from optionsdesk.strategies.models import StrategyMetrics, StrategyParams
from optionsdesk.strategies.registry import StrategyRegistry


@StrategyRegistry.register
class IronCondor(StrategyDefinition):
    strategy_name: ClassVar[str] = "Iron Condor"
    description: ClassVar[str] = "Sell call spread + sell put spread"
    market_bias: ClassVar[MarketBias] = MarketBias.NEUTRAL
    risk_level: ClassVar[RiskLevel] = RiskLevel.MODERATE
    historical_win_rate: ClassVar[float] = 60.0
    best_for: ClassVar[str] = "Range-bound market with income generation"
    ai_reasoning: ClassVar[str] = "Profit from low volatility and time decay in a range-bound market."
    greeks_profile: ClassVar[dict[str, str]] = {"delta": "~0", "gamma": "-", "theta": "+", "vega": "-"}

    required_strikes: ClassVar[tuple[str, ...]] = (
        "put_buy_strike",
        "put_sell_strike",
        "call_sell_strike",
        "call_buy_strike",
    )
    canonical_params: ClassVar[dict[str, Any]] = {
        "put_sell_strike": 170,
        "put_buy_strike": 165,
        "call_sell_strike": 185,
        "call_buy_strike": 190,
        "contracts": 1,
    }

    @classmethod
    def check_strikes(cls, params: StrategyParams) -> None:
        cls._precondition(
            params.put_buy_strike < params.put_sell_strike < params.call_sell_strike < params.call_buy_strike,
            "requires put buy < put sell < call sell < call buy "
            f"(got {params.put_buy_strike} / {params.put_sell_strike} / "
            f"{params.call_sell_strike} / {params.call_buy_strike})",
        )

    @classmethod
    def leg_template(cls, params: StrategyParams) -> list[LegSpec]:
        return [
            (OrderSide.SELL, OptionType.PUT, params.put_sell_strike, "short put"),
            (OrderSide.BUY, OptionType.PUT, params.put_buy_strike, "put wing"),
            (OrderSide.SELL, OptionType.CALL, params.call_sell_strike, "short call"),
            (OrderSide.BUY, OptionType.CALL, params.call_buy_strike, "call wing"),
        ]

    @classmethod
    def calculate_metrics(cls, params: ParamsLike, premium: float) -> StrategyMetrics:
        """premium is the total net credit received per share.

        Only one side can finish in the money, so the risk is the wider wing.
        """
        p = coerce_params(params)
        cls._require_strikes(p)
        cls.check_strikes(p)
        width = max(p.put_sell_strike - p.put_buy_strike, p.call_buy_strike - p.call_sell_strike)
        return StrategyMetrics.build(
            max_profit=premium,
            max_loss=-(width - premium),
            breakevens=[p.put_sell_strike - premium, p.call_sell_strike + premium],
        )
