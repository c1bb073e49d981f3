"""Base strategy definition for the strategy registry.

A definition is a stateless class: its leg template is the single source
for both the generated legs and the trade-setup text shown to a user.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar

from optionsdesk.config import get_config
from optionsdesk.core.enums import MarketBias, OptionType, OrderSide, RiskLevel
from optionsdesk.core.exceptions import InvalidInputError, StrategyPreconditionError
from optionsdesk.core.models import StrategyLeg, format_strike
from optionsdesk.strategies.models import StrategyMetrics, StrategyParams, TradeSetup

LegSpec = tuple[OrderSide, OptionType, float, str]

ParamsLike = StrategyParams | Mapping[str, Any]


def coerce_params(params: ParamsLike | None) -> StrategyParams:
    if params is None:
        return StrategyParams()
    if isinstance(params, StrategyParams):
        return params
    return StrategyParams(**params)


class StrategyDefinition(ABC):
    """Abstract base class for all option strategies.

    Subclasses define class-level metadata, the strikes they require, the
    ordering those strikes must satisfy and the leg template.
    """

    # Registry metadata - subclasses must override
    strategy_name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    market_bias: ClassVar[MarketBias] = MarketBias.NEUTRAL
    risk_level: ClassVar[RiskLevel] = RiskLevel.MODERATE
    historical_win_rate: ClassVar[float] = 0.0
    best_for: ClassVar[str] = ""
    ai_reasoning: ClassVar[str] = ""
    greeks_profile: ClassVar[dict[str, str]] = {}
    version: ClassVar[str] = "1.0.0"

    required_strikes: ClassVar[tuple[str, ...]] = ()
    canonical_params: ClassVar[dict[str, Any]] = {}

    @classmethod
    @abstractmethod
    def check_strikes(cls, params: StrategyParams) -> None:
        """Raise StrategyPreconditionError when the strike ordering is wrong."""

    @classmethod
    @abstractmethod
    def leg_template(cls, params: StrategyParams) -> list[LegSpec]:
        """Ordered (action, option type, strike, note) tuples."""

    @classmethod
    @abstractmethod
    def calculate_metrics(cls, params: ParamsLike, premium: float) -> StrategyMetrics:
        """Closed-form max profit/loss and breakevens per share."""

    @classmethod
    def _require_strikes(cls, params: StrategyParams) -> None:
        missing = [name for name in cls.required_strikes if getattr(params, name) is None]
        if missing:
            raise InvalidInputError(
                f"{cls.strategy_name} requires {', '.join(missing)}"
            )

    @classmethod
    def _precondition(cls, ok: bool, message: str) -> None:
        if not ok:
            raise StrategyPreconditionError(f"{cls.strategy_name}: {message}")

    @classmethod
    def generate_legs(cls, params: ParamsLike | None = None) -> list[StrategyLeg]:
        """Build the ordered legs for this strategy.

        Raises:
            InvalidInputError: a required strike is missing, or entry prices
                do not line up with the legs.
            StrategyPreconditionError: the strikes are in the wrong order.
        """
        p = coerce_params(params)
        cls._require_strikes(p)
        cls.check_strikes(p)

        template = cls.leg_template(p)
        if p.entry_prices is not None and len(p.entry_prices) != len(template):
            raise InvalidInputError(
                f"{cls.strategy_name} has {len(template)} legs but "
                f"{len(p.entry_prices)} entry prices were given"
            )

        legs = []
        for i, (action, option_type, strike, note) in enumerate(template):
            verb = "Buy" if action == OrderSide.BUY else "Sell"
            legs.append(
                StrategyLeg(
                    action=action,
                    option_type=option_type,
                    strike=strike,
                    quantity=p.contracts,
                    days_to_expiry=p.days_to_expiry,
                    entry_price=p.entry_prices[i] if p.entry_prices else 0.0,
                    expiry=p.expiry,
                    description=(
                        f"{verb} {format_strike(strike)} {option_type.value.capitalize()} ({note})"
                    ),
                )
            )
        return legs

    @classmethod
    def format_trade_setup(cls, params: ParamsLike | None = None) -> TradeSetup:
        """Render the legs as display text.

        Both the action sentence and the leg text are derived from
        generate_legs, so the words shown can never disagree with the legs.
        """
        p = coerce_params(params)
        legs = cls.generate_legs(p)
        return TradeSetup(
            action=" + ".join(leg.phrase for leg in legs),
            expiry=p.expiry or get_config().default_expiry_label,
            contracts=p.contracts,
            legs=" + ".join(leg.label for leg in legs),
        )

    @classmethod
    def get_canonical_params(cls) -> StrategyParams:
        return StrategyParams(**cls.canonical_params)

    @classmethod
    def get_metadata(cls) -> dict[str, Any]:
        """Return class-level metadata without instantiation."""
        return {
            "name": cls.strategy_name,
            "description": cls.description,
            "market_bias": cls.market_bias.value,
            "risk_level": cls.risk_level.value,
            "win_rate": cls.historical_win_rate,
            "best_for": cls.best_for,
            "greeks": dict(cls.greeks_profile),
            "version": cls.version,
            "required_strikes": list(cls.required_strikes),
        }
