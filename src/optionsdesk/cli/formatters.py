"""Output formatters for the CLI - JSON and rich table output."""

from __future__ import annotations

import json
import math
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from optionsdesk.core.models import PricingResult
from optionsdesk.engine.models import BuiltStrategy, StrategyAnalysis, StrategyRecommendation
from optionsdesk.validation.models import ValidationReport

console = Console()
err_console = Console(stderr=True)

_SEVERITY_COLORS = {
    "CRITICAL": "bold red",
    "HIGH": "red",
    "MEDIUM": "yellow",
    "LOW": "dim",
}


def output_json(data: Any, file=None) -> None:
    """Write JSON output to stdout."""
    if hasattr(data, "model_dump"):
        data = data.model_dump()
    elif isinstance(data, list) and data and hasattr(data[0], "model_dump"):
        data = [item.model_dump() for item in data]
    print(json.dumps(data, indent=2, default=str), file=file)


def output_error(message: str, code: int = 1) -> None:
    """Write JSON error to stderr and exit."""
    output_json({"error": message, "code": code}, file=sys.stderr)
    raise SystemExit(code)


def _money(value: float, unlimited: bool = False) -> str:
    if unlimited or math.isinf(value):
        return "Unlimited"
    color = "green" if value >= 0 else "red"
    return f"[{color}]${value:+,.2f}[/{color}]"


def print_strategies_table(strategies: list[dict[str, Any]]) -> None:
    """Print a rich table of strategies."""
    table = Table(title="Available Strategies")
    table.add_column("Name", style="cyan")
    table.add_column("Bias", style="green")
    table.add_column("Risk")
    table.add_column("Win %", justify="right")
    table.add_column("Description")

    for s in strategies:
        table.add_row(s["name"], s["market_bias"], s["risk_level"], f"{s['win_rate']:.0f}", s["description"])

    console.print(table)


def print_pricing_result(result: PricingResult, title: str = "Option Price") -> None:
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Price", f"${result.price:,.4f}")
    table.add_row("Intrinsic", f"${result.intrinsic_value:,.4f}")
    table.add_row("Time Value", f"${result.time_value:,.4f}")
    table.add_row("Delta", f"{result.delta:.4f}")
    table.add_row("Gamma", f"{result.gamma:.4f}")
    table.add_row("Theta (day)", f"{result.theta:.4f}")
    table.add_row("Vega (1 pt)", f"{result.vega:.4f}")
    table.add_row("Rho (1 pt)", f"{result.rho:.4f}")

    console.print(table)


def print_built_strategy(built: BuiltStrategy) -> None:
    """Print the legs and trade setup of a built strategy."""
    table = Table(title=f"{built.name} ({built.market_bias.value})")
    table.add_column("#", style="dim")
    table.add_column("Action")
    table.add_column("Type")
    table.add_column("Strike", justify="right")
    table.add_column("Qty", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Note")

    for i, leg in enumerate(built.legs, start=1):
        color = "green" if leg.action.value == "buy" else "red"
        table.add_row(
            str(i),
            f"[{color}]{leg.action.value.upper()}[/{color}]",
            leg.option_type.value.upper(),
            f"${leg.strike:,.2f}",
            str(leg.quantity),
            f"${leg.entry_price:.2f}" if leg.entry_price else "-",
            leg.description,
        )

    console.print(table)
    setup = built.trade_setup
    console.print(f"  [cyan]Action:[/cyan] {setup.action}")
    console.print(f"  [cyan]Expiry:[/cyan] {setup.expiry}   [cyan]Contracts:[/cyan] {setup.contracts}")


def print_analysis(analysis: StrategyAnalysis) -> None:
    """Print legs plus a P&L, Greeks and risk summary."""
    print_built_strategy(analysis)
    pnl = analysis.pnl

    table = Table(title="P&L Analysis")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Current P&L", _money(pnl.total_pnl))
    table.add_row("Net Premium", _money(pnl.net_premium))
    table.add_row("Max Profit", _money(pnl.max_profit.amount, pnl.max_profit.is_unlimited))
    table.add_row("Max Loss", _money(pnl.max_loss.amount, pnl.max_loss.is_unlimited))
    breakevens = ", ".join(f"${be:,.2f}" for be in pnl.breakevens) or "-"
    table.add_row("Breakevens", breakevens)
    table.add_row("Profit Probability", f"{pnl.profit_probability:.1%}")
    table.add_row("", "")
    table.add_row("Delta", f"{pnl.greeks.delta:.3f}")
    table.add_row("Gamma", f"{pnl.greeks.gamma:.4f}")
    table.add_row("Theta", f"{pnl.greeks.theta:.3f}")
    table.add_row("Vega", f"{pnl.greeks.vega:.3f}")
    table.add_row("", "")
    metrics = analysis.risk_metrics
    table.add_row("Risk/Reward", f"{metrics.risk_reward_ratio}")
    table.add_row("Prob-Adjusted Return", _money(metrics.prob_adjusted_return))
    table.add_row("Risk Grade", metrics.risk_grade)

    console.print(table)
    for rec in analysis.recommendations:
        color = "green" if rec.type == "positive" else "yellow"
        console.print(f"  [{color}]{rec.title}:[/{color}] {rec.message}")


def print_validation_report(report: ValidationReport) -> None:
    if report.is_valid:
        console.print(f"[green]{report.strategy}: {report.summary}[/green]")
        return

    table = Table(title=f"Validation: {report.strategy} - {report.summary}")
    table.add_column("Severity")
    table.add_column("Kind", style="cyan")
    table.add_column("Message")

    for error in report.errors:
        color = _SEVERITY_COLORS.get(error.severity.value, "white")
        table.add_row(f"[{color}]{error.severity.value}[/{color}]", error.kind, error.message)

    console.print(table)
    for rec in report.recommendations:
        console.print(f"  [dim]-[/dim] {rec}")


def print_recommendations(recommendations: list[StrategyRecommendation]) -> None:
    if not recommendations:
        console.print("[yellow]No strategies match that outlook.[/yellow]")
        return

    table = Table(title="Recommended Strategies")
    table.add_column("Strategy", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Reasons")
    table.add_column("Best For")

    for rec in recommendations:
        table.add_row(rec.strategy, str(rec.score), "; ".join(rec.reasons), rec.best_for)

    console.print(table)
