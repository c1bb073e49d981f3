"""Pydantic models for strategy parameters, trade setups and closed-form metrics."""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from optionsdesk.config import get_config


class StrategyParams(BaseModel):
    """Strike and sizing inputs; each strategy family reads the strikes it needs."""

    model_config = ConfigDict(frozen=True)

    short_strike: float | None = Field(default=None, gt=0)
    long_strike: float | None = Field(default=None, gt=0)
    put_sell_strike: float | None = Field(default=None, gt=0)
    put_buy_strike: float | None = Field(default=None, gt=0)
    call_sell_strike: float | None = Field(default=None, gt=0)
    call_buy_strike: float | None = Field(default=None, gt=0)
    center_strike: float | None = Field(default=None, gt=0)
    wing_strike1: float | None = Field(default=None, gt=0)
    wing_strike2: float | None = Field(default=None, gt=0)
    expiry: str = Field(default_factory=lambda: get_config().default_expiry_label)
    contracts: int = Field(default=1, ge=1)
    days_to_expiry: int = Field(default_factory=lambda: get_config().default_days_to_expiry, ge=0)
    entry_prices: list[float] | None = None

    @field_validator("entry_prices")
    @classmethod
    def _non_negative_prices(cls, v: list[float] | None) -> list[float] | None:
        if v is not None and any(p < 0 for p in v):
            raise ValueError("entry prices must be non-negative")
        return v


class TradeSetup(BaseModel):
    """Display form of a strategy: action text plus structured leg text."""

    action: str = ""
    expiry: str = Field(default_factory=lambda: get_config().default_expiry_label)
    contracts: int = 1
    legs: str = ""

    @field_validator("legs", mode="before")
    @classmethod
    def _join_leg_list(cls, v):
        if v is None:
            return ""
        if isinstance(v, (list, tuple)):
            return " + ".join(str(item) for item in v)
        return v

    @field_validator("action", mode="before")
    @classmethod
    def _none_action(cls, v):
        return "" if v is None else v

    @property
    def leg_entries(self) -> list[str]:
        return [part.strip() for part in self.legs.split("+") if part.strip()]

    @property
    def text(self) -> str:
        return f"{self.action} {self.legs}".strip()


class StrategyMetrics(BaseModel):
    """Per-share expiration metrics for a given net premium."""

    max_profit: float
    max_loss: float
    breakevens: list[float]
    risk_reward_ratio: float

    @classmethod
    def build(cls, max_profit: float, max_loss: float, breakevens: list[float]) -> StrategyMetrics:
        ratio = max_profit / abs(max_loss) if max_loss != 0 else math.inf
        return cls(
            max_profit=max_profit,
            max_loss=max_loss,
            breakevens=breakevens,
            risk_reward_ratio=ratio,
        )
