"""Consistency checks between a strategy definition and a displayed trade setup.

The primary check regenerates the strategy's own legs and compares the
option-type and action multisets with the legs parsed from the setup.
Token checks on the setup text (no calls in a put spread, and so on) run
alongside as a second line of defence.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Mapping, Sequence
from typing import Any

from optionsdesk.core.enums import MarketBias, Severity
from optionsdesk.core.exceptions import InvalidInputError, StrategyPreconditionError
from optionsdesk.core.models import StrategyLeg
from optionsdesk.strategies.base import StrategyDefinition
from optionsdesk.strategies.models import TradeSetup
from optionsdesk.strategies.registry import get_registry
from optionsdesk.validation.models import ValidationIssue, ValidationReport

logger = logging.getLogger(__name__)

StrategyLike = type[StrategyDefinition] | str
TradeSetupLike = TradeSetup | Mapping[str, Any] | str | Sequence[str]

_LEG_PATTERN = re.compile(r"\b(buy|sell)\s+\$?(\d+(?:\.\d+)?)\s+(call|put)s?\b", re.IGNORECASE)

_RECOMMENDATIONS = {
    "PUT_SPREAD_WITH_CALLS": "Replace call options with put options for {name}",
    "CALL_SPREAD_WITH_PUTS": "Replace put options with call options for {name}",
    "IRON_CONDOR_INCOMPLETE": "Ensure iron condor includes both call and put spreads",
    "BIAS_MISMATCH": "Align the market bias of {name} with its name",
    "LEG_STRUCTURE_MISMATCH": "Regenerate the trade setup from the {name} leg template",
    "MISSING_ACTION": "Include an action description in the trade setup",
    "MISSING_LEGS": "Include the leg breakdown in the trade setup",
}


def coerce_trade_setup(trade_setup: TradeSetupLike | None) -> TradeSetup:
    """Accept a TradeSetup, a dict, a bare action string or a list of leg strings."""
    if trade_setup is None:
        return TradeSetup()
    if isinstance(trade_setup, TradeSetup):
        return trade_setup
    if isinstance(trade_setup, str):
        return TradeSetup(action=trade_setup)
    if isinstance(trade_setup, Mapping):
        return TradeSetup(**{k: v for k, v in trade_setup.items() if k in TradeSetup.model_fields})
    if isinstance(trade_setup, Sequence):
        return TradeSetup(legs=list(trade_setup))
    raise InvalidInputError(f"unsupported trade setup: {trade_setup!r}")


def _resolve(strategy: StrategyLike) -> type[StrategyDefinition]:
    if isinstance(strategy, str):
        return get_registry().get_strategy(strategy)
    if isinstance(strategy, type) and issubclass(strategy, StrategyDefinition):
        return strategy
    raise InvalidInputError(f"expected a strategy name or definition, got {strategy!r}")


def has_token(text: str, token: str) -> bool:
    return re.search(rf"\b{token}s?\b", text, re.IGNORECASE) is not None


def parse_legs(setup: TradeSetup) -> list[tuple[str, float, str]]:
    """(action, strike, option type) triples from the legs text, else the action text."""
    matches = _LEG_PATTERN.findall(setup.legs) or _LEG_PATTERN.findall(setup.action)
    return [(action.lower(), float(strike), kind.lower()) for action, strike, kind in matches]


def _fmt(counter: Counter) -> str:
    return ", ".join(f"{n}x {key}" for key, n in sorted(counter.items())) or "none"


def _structure_issue(
    definition: type[StrategyDefinition],
    actual_kinds: Counter,
    actual_actions: Counter,
) -> ValidationIssue | None:
    """Compare against legs regenerated from the definition's canonical params."""
    try:
        expected = definition.generate_legs(definition.get_canonical_params())
    except (InvalidInputError, StrategyPreconditionError, ValueError) as e:
        logger.debug(f"Skipping leg structure check for {definition.strategy_name}: {e}")
        return None

    expected_kinds = Counter(leg.option_type.value for leg in expected)
    expected_actions = Counter(leg.action.value for leg in expected)
    if expected_kinds == actual_kinds and expected_actions == actual_actions:
        return None

    return ValidationIssue(
        kind="LEG_STRUCTURE_MISMATCH",
        message=f"Trade setup legs don't match the {definition.strategy_name} definition",
        severity=Severity.HIGH,
        expected=f"types [{_fmt(expected_kinds)}]; actions [{_fmt(expected_actions)}]",
        actual=f"types [{_fmt(actual_kinds)}]; actions [{_fmt(actual_actions)}]",
    )


def _bias_issues(definition: type[StrategyDefinition]) -> list[ValidationIssue]:
    name = definition.strategy_name.lower()
    issues = []
    if definition.market_bias == MarketBias.BULLISH and "bear" in name:
        issues.append(
            ValidationIssue(
                kind="BIAS_MISMATCH",
                message=f'Strategy name "{definition.strategy_name}" suggests bearish but bias is bullish',
                severity=Severity.HIGH,
                expected=MarketBias.BEARISH.value,
                actual=MarketBias.BULLISH.value,
            )
        )
    if definition.market_bias == MarketBias.BEARISH and "bull" in name:
        issues.append(
            ValidationIssue(
                kind="BIAS_MISMATCH",
                message=f'Strategy name "{definition.strategy_name}" suggests bullish but bias is bearish',
                severity=Severity.HIGH,
                expected=MarketBias.BULLISH.value,
                actual=MarketBias.BEARISH.value,
            )
        )
    return issues


def _token_issues(definition: type[StrategyDefinition], text: str) -> list[ValidationIssue]:
    name = definition.strategy_name.lower()
    has_call = has_token(text, "call")
    has_put = has_token(text, "put")
    issues = []

    if "put" in name and "spread" in name and has_call:
        issues.append(
            ValidationIssue(
                kind="PUT_SPREAD_WITH_CALLS",
                message=f"{definition.strategy_name} should only use PUT options, not calls",
                severity=Severity.CRITICAL,
                expected="Put options only",
                actual="Contains call options",
            )
        )
    if "call" in name and "spread" in name and has_put:
        issues.append(
            ValidationIssue(
                kind="CALL_SPREAD_WITH_PUTS",
                message=f"{definition.strategy_name} should only use CALL options, not puts",
                severity=Severity.CRITICAL,
                expected="Call options only",
                actual="Contains put options",
            )
        )
    if "iron" in name and "condor" in name and not (has_call and has_put):
        issues.append(
            ValidationIssue(
                kind="IRON_CONDOR_INCOMPLETE",
                message=f"{definition.strategy_name} must include both CALL and PUT options",
                severity=Severity.CRITICAL,
                expected="Both calls and puts",
                actual=f"Calls: {has_call}, Puts: {has_put}",
            )
        )
    return issues


def _structural_issues(setup: TradeSetup) -> list[ValidationIssue]:
    issues = []
    if not setup.action.strip():
        issues.append(
            ValidationIssue(
                kind="MISSING_ACTION",
                message="Trade setup must include action description",
                severity=Severity.HIGH,
            )
        )
    if not setup.leg_entries:
        issues.append(
            ValidationIssue(
                kind="MISSING_LEGS",
                message="Trade setup must include legs information",
                severity=Severity.HIGH,
            )
        )
    return issues


def build_recommendations(name: str, errors: Sequence[ValidationIssue]) -> list[str]:
    """One recommendation per distinct error kind, in first-seen order."""
    seen: dict[str, None] = {}
    for error in errors:
        template = _RECOMMENDATIONS.get(error.kind, "Review strategy configuration for consistency")
        seen[template.format(name=name.lower())] = None
    return list(seen)


def _report(definition: type[StrategyDefinition], errors: list[ValidationIssue]) -> ValidationReport:
    report = ValidationReport(
        strategy=definition.strategy_name,
        errors=errors,
        recommendations=build_recommendations(definition.strategy_name, errors),
    )
    if errors:
        logger.warning(
            f"{definition.strategy_name} failed validation: "
            + "; ".join(f"[{e.severity}] {e.kind}" for e in errors)
        )
    return report


def validate_strategy(strategy: StrategyLike, trade_setup: TradeSetupLike | None) -> ValidationReport:
    """Cross-check a strategy definition against a displayed trade setup.

    Every rule runs independently; the report carries all triggered errors.
    """
    definition = _resolve(strategy)
    setup = coerce_trade_setup(trade_setup)

    errors = _token_issues(definition, setup.text)
    errors.extend(_bias_issues(definition))

    parsed = parse_legs(setup)
    if setup.text:
        issue = _structure_issue(
            definition,
            Counter(kind for _action, _strike, kind in parsed),
            Counter(action for action, _strike, _kind in parsed),
        )
        if issue is not None:
            errors.append(issue)

    errors.extend(_structural_issues(setup))
    return _report(definition, errors)


def validate_legs(strategy: StrategyLike, legs: Sequence[StrategyLeg]) -> ValidationReport:
    """Structured variant of validate_strategy for legs already in hand."""
    definition = _resolve(strategy)
    errors = _bias_issues(definition)
    issue = _structure_issue(
        definition,
        Counter(leg.option_type.value for leg in legs),
        Counter(leg.action.value for leg in legs),
    )
    if issue is not None:
        errors.append(issue)
    return _report(definition, errors)
