"""Pydantic domain models for option pricing and position P&L."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from optionsdesk.config import get_config
from optionsdesk.core.enums import OptionType, OrderSide


def format_strike(strike: float) -> str:
    """Render a strike without a trailing '.0' (180.0 -> '180', 177.5 -> '177.5')."""
    return f"{strike:g}"


class Greeks(BaseModel):
    model_config = ConfigDict(frozen=True)

    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0

    def __add__(self, other: Greeks) -> Greeks:
        return Greeks(
            delta=self.delta + other.delta,
            gamma=self.gamma + other.gamma,
            theta=self.theta + other.theta,
            vega=self.vega + other.vega,
        )

    def scaled(self, factor: float) -> Greeks:
        return Greeks(
            delta=self.delta * factor,
            gamma=self.gamma * factor,
            theta=self.theta * factor,
            vega=self.vega * factor,
        )


class MarketSnapshot(BaseModel):
    """Point-in-time market inputs supplied by the quote layer."""

    model_config = ConfigDict(frozen=True)

    current_price: float = Field(gt=0)
    implied_volatility: float = Field(default_factory=lambda: get_config().default_volatility, gt=0, le=5)
    risk_free_rate: float = Field(default_factory=lambda: get_config().risk_free_rate)


class StrategyLeg(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: OrderSide
    option_type: OptionType
    strike: float = Field(gt=0)
    quantity: int = Field(default=1, ge=1)
    days_to_expiry: int = Field(default_factory=lambda: get_config().default_days_to_expiry, ge=0)
    entry_price: float = Field(default=0.0, ge=0)
    expiry: str = Field(default_factory=lambda: get_config().default_expiry_label)
    description: str = ""

    @property
    def years_to_expiry(self) -> float:
        return self.days_to_expiry / 365.0

    @property
    def label(self) -> str:
        """Structured leg text, e.g. 'SELL 180 PUT'."""
        return f"{self.action.value.upper()} {format_strike(self.strike)} {self.option_type.value.upper()}"

    @property
    def phrase(self) -> str:
        """Human-readable leg text, e.g. 'Sell 180 Put'."""
        return (
            f"{self.action.value.capitalize()} {format_strike(self.strike)} "
            f"{self.option_type.value.capitalize()}"
        )


class PricingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: float = Field(ge=0)
    delta: float
    gamma: float
    theta: float  # per calendar day
    vega: float  # per 1 vol point
    rho: float = 0.0  # per 1 rate point
    intrinsic_value: float = Field(ge=0)
    time_value: float = Field(ge=0)
    d1: float | None = None
    d2: float | None = None

    @property
    def greeks(self) -> Greeks:
        return Greeks(delta=self.delta, gamma=self.gamma, theta=self.theta, vega=self.vega)


class IVResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    volatility: float
    iterations: int
    converged: bool


class LegPnL(BaseModel):
    """Mark-to-market P&L of one leg, Greeks at position scale."""

    model_config = ConfigDict(frozen=True)

    leg: StrategyLeg
    current_value: float
    entry_price: float
    pnl_per_contract: float
    total_pnl: float
    total_value: float
    percent_change: float
    greeks: Greeks
    intrinsic_value: float
    time_value: float
    days_to_expiry: int


class PayoffExtreme(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: float
    at_price: float
    is_unlimited: bool = False


class ScenarioPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    price: float
    pnl: float
    days_to_expiry: int | None = None


class PortfolioGreeks(Greeks):
    total_value: float = 0.0
    delta_risk: float = 0.0
    gamma_risk: float = 0.0
    theta_decay: float = 0.0
    vega_risk: float = 0.0


class StrategyPnLReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    legs: list[LegPnL]
    total_pnl: float
    total_value: float
    net_premium: float
    greeks: Greeks
    breakevens: list[float] = Field(default_factory=list)
    max_profit: PayoffExtreme
    max_loss: PayoffExtreme
    profit_probability: float = Field(ge=0, le=1)
    scenario_analysis: list[ScenarioPoint] | None = None
