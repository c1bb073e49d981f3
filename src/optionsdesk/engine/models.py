"""Pydantic models for strategy construction and analysis results."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from optionsdesk.core.enums import MarketBias
from optionsdesk.core.models import StrategyLeg, StrategyPnLReport
from optionsdesk.strategies.models import TradeSetup
from optionsdesk.validation.models import ValidationReport


class ScenarioSpec(BaseModel):
    """Underlying prices to revalue at, optionally across several DTE values."""

    price_range: list[float] = Field(min_length=1)
    time_decay: list[int] | None = None


class RiskMetrics(BaseModel):
    risk_reward_ratio: float
    prob_adjusted_return: float
    risk_grade: Literal["A", "B", "C", "D", "F"]


class PnLRecommendation(BaseModel):
    type: Literal["positive", "warning"]
    title: str
    message: str


class BuiltStrategy(BaseModel):
    name: str
    market_bias: MarketBias
    legs: list[StrategyLeg]
    trade_setup: TradeSetup
    validation: ValidationReport
    created_at: datetime = Field(default_factory=datetime.now)


class StrategyAnalysis(BuiltStrategy):
    pnl: StrategyPnLReport
    risk_metrics: RiskMetrics
    recommendations: list[PnLRecommendation] = Field(default_factory=list)


class StrategyRecommendation(BaseModel):
    strategy: str
    score: int
    reasons: list[str]
    description: str
    best_for: str


class StrategyComparison(BaseModel):
    name: str
    description: str
    market_bias: MarketBias
    risk_level: str
    win_rate: float
    trade_setup: str
    legs: int
    greeks: dict[str, str]


class BulkValidationItem(BaseModel):
    strategy_name: str
    trade_setup: Any = None
    validation: ValidationReport | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.validation is not None and self.validation.is_valid


class BulkValidationResult(BaseModel):
    total: int
    valid: int
    invalid: int
    results: list[BulkValidationItem]
