"""Strategy factory: build validated strategies and attach P&L analysis."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from optionsdesk.core.enums import MarketBias
from optionsdesk.core.exceptions import StrategyValidationError
from optionsdesk.core.models import MarketSnapshot, StrategyPnLReport
from optionsdesk.core.pnl import price_legs
from optionsdesk.engine.aggregator import aggregate_strategy_pnl
from optionsdesk.engine.models import (
    BuiltStrategy,
    BulkValidationItem,
    BulkValidationResult,
    PnLRecommendation,
    RiskMetrics,
    ScenarioSpec,
    StrategyAnalysis,
    StrategyComparison,
    StrategyRecommendation,
)
from optionsdesk.strategies.base import ParamsLike, coerce_params
from optionsdesk.strategies.registry import get_registry
from optionsdesk.validation.validator import validate_strategy

logger = logging.getLogger(__name__)


def build_strategy(name: str, params: ParamsLike | None = None) -> BuiltStrategy:
    """Generate legs and trade setup for a named strategy, validated before return.

    Raises:
        StrategyNotFoundError: unknown strategy name.
        InvalidInputError / StrategyPreconditionError: bad strikes.
        StrategyValidationError: the generated setup failed its own checks.
    """
    definition = get_registry().get_strategy(name)
    p = coerce_params(params)
    legs = definition.generate_legs(p)
    setup = definition.format_trade_setup(p)

    report = validate_strategy(definition, setup)
    if not report.is_valid:
        raise StrategyValidationError(
            "Strategy validation failed: " + ", ".join(e.message for e in report.errors),
            report=report,
        )

    logger.debug(f"Built {definition.strategy_name}: {setup.legs}")
    return BuiltStrategy(
        name=definition.strategy_name,
        market_bias=definition.market_bias,
        legs=legs,
        trade_setup=setup,
        validation=report,
    )


def calculate_risk_metrics(pnl: StrategyPnLReport) -> RiskMetrics:
    max_profit = pnl.max_profit.amount
    max_loss = pnl.max_loss.amount
    ratio = abs(max_profit / max_loss) if max_loss != 0 else math.inf
    prob = pnl.profit_probability
    return RiskMetrics(
        risk_reward_ratio=round(ratio, 2) if math.isfinite(ratio) else ratio,
        prob_adjusted_return=round(max_profit * prob + max_loss * (1 - prob), 2),
        risk_grade=risk_grade(ratio),
    )


def risk_grade(ratio: float) -> str:
    if ratio > 3:
        return "A"
    if ratio > 2:
        return "B"
    if ratio > 1.5:
        return "C"
    if ratio > 1:
        return "D"
    return "F"


def pnl_recommendations(pnl: StrategyPnLReport, metrics: RiskMetrics) -> list[PnLRecommendation]:
    recommendations = []
    if metrics.risk_reward_ratio > 2:
        recommendations.append(
            PnLRecommendation(
                type="positive",
                title="Excellent Risk/Reward",
                message=f"Risk/reward ratio of {metrics.risk_reward_ratio}:1 is very attractive",
            )
        )
    if pnl.max_loss.is_unlimited:
        recommendations.append(
            PnLRecommendation(
                type="warning",
                title="Unlimited Risk",
                message="Losses are uncapped above the highest strike; add a long call to define risk",
            )
        )
    return recommendations


def analyze_strategy(
    name: str,
    params: ParamsLike | None,
    snapshot: MarketSnapshot,
    scenario: ScenarioSpec | None = None,
) -> StrategyAnalysis:
    """Build a strategy and run the full P&L analysis against a snapshot.

    Legs without an entry price get a Black-Scholes estimate first.
    """
    built = build_strategy(name, params)
    legs = price_legs(built.legs, snapshot)
    pnl = aggregate_strategy_pnl(legs, snapshot, scenario)
    metrics = calculate_risk_metrics(pnl)
    return StrategyAnalysis(
        name=built.name,
        market_bias=built.market_bias,
        trade_setup=built.trade_setup,
        validation=built.validation,
        created_at=built.created_at,
        legs=legs,
        pnl=pnl,
        risk_metrics=metrics,
        recommendations=pnl_recommendations(pnl, metrics),
    )


def recommend_strategies(
    bias: MarketBias | None = None,
    volatility: str | None = None,
    timeframe: str | None = None,
    limit: int = 5,
) -> list[StrategyRecommendation]:
    """Score registered strategies against a market outlook."""
    recommendations = []
    for definition in get_registry().definitions():
        score = 0
        reasons = []
        profile = definition.greeks_profile

        if bias is not None and definition.market_bias == bias:
            score += 3
            reasons.append(f"Matches {bias.value} market bias")
        if volatility == "low" and profile.get("theta") == "+":
            score += 2
            reasons.append("Benefits from time decay in low volatility")
        if volatility == "high" and profile.get("vega") == "+":
            score += 2
            reasons.append("Benefits from high volatility")
        if timeframe == "short" and profile.get("theta") == "+":
            score += 1
            reasons.append("Good for short-term time decay")

        if score > 0:
            recommendations.append(
                StrategyRecommendation(
                    strategy=definition.strategy_name,
                    score=score,
                    reasons=reasons,
                    description=definition.description,
                    best_for=definition.best_for,
                )
            )

    recommendations.sort(key=lambda r: r.score, reverse=True)
    return recommendations[:limit]


def compare_strategies(
    names: Iterable[str], params: Mapping[str, ParamsLike] | ParamsLike | None = None
) -> list[StrategyComparison]:
    """Side-by-side summary of strategies that build cleanly.

    ``params`` may be one parameter set for all, or a mapping of strategy
    name to its own parameters. Strategies that fail to build are skipped.
    """
    comparisons = []
    for name in names:
        per_name = params.get(name) if isinstance(params, Mapping) and name in params else params
        try:
            built = build_strategy(name, per_name)
        except (KeyError, ValueError) as e:
            logger.info(f"Skipping {name} in comparison: {e}")
            continue
        definition = get_registry().get_strategy(name)
        comparisons.append(
            StrategyComparison(
                name=definition.strategy_name,
                description=definition.description,
                market_bias=definition.market_bias,
                risk_level=definition.risk_level.value,
                win_rate=definition.historical_win_rate,
                trade_setup=built.trade_setup.action,
                legs=len(built.legs),
                greeks=dict(definition.greeks_profile),
            )
        )
    return comparisons


def bulk_validate(items: Sequence[Mapping[str, Any]]) -> BulkValidationResult:
    """Validate many ``{"strategy_name": ..., "trade_setup": ...}`` entries.

    A bad entry is recorded with its error and does not stop the batch.
    """
    results = []
    for item in items:
        name = item.get("strategy_name")
        setup = item.get("trade_setup")
        label = name if isinstance(name, str) else repr(name)
        try:
            report = validate_strategy(name, setup)
            results.append(BulkValidationItem(strategy_name=label, trade_setup=setup, validation=report))
        except (KeyError, ValueError) as e:
            logger.info(f"Bulk validation entry {label} failed: {e}")
            results.append(BulkValidationItem(strategy_name=label, trade_setup=setup, error=str(e)))

    valid = sum(1 for r in results if r.is_valid)
    return BulkValidationResult(
        total=len(results),
        valid=valid,
        invalid=len(results) - valid,
        results=results,
    )
