"""CLI commands for building, analyzing and validating option strategies."""

from __future__ import annotations

from typing import Any, Optional

import typer

from optionsdesk.cli.formatters import (
    output_error,
    output_json,
    print_analysis,
    print_built_strategy,
    print_recommendations,
    print_strategies_table,
    print_validation_report,
)
from optionsdesk.core.enums import MarketBias
from optionsdesk.core.models import MarketSnapshot
from optionsdesk.engine.factory import analyze_strategy, build_strategy, recommend_strategies
from optionsdesk.strategies.registry import get_registry
from optionsdesk.validation.validator import validate_strategy

app = typer.Typer(name="strategy", help="Build, analyze and validate option strategies")


def _params(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


@app.command("list")
def strategy_list(
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: json"),
):
    """List all available strategies."""
    strategies = get_registry().list_strategies()

    if output == "json":
        output_json(strategies)
    else:
        print_strategies_table(strategies)


@app.command("info")
def strategy_info(
    name: str = typer.Argument(..., help="Strategy name"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: json"),
):
    """Show detailed information about a strategy."""
    try:
        cls = get_registry().get_strategy(name)
    except KeyError as e:
        output_error(str(e))
        return

    info = cls.get_metadata()
    if output == "json":
        output_json(info)
    else:
        from rich.console import Console
        from rich.panel import Panel

        console = Console()
        text = (
            f"[cyan]Name:[/cyan] {info['name']}\n"
            f"[cyan]Bias:[/cyan] {info['market_bias']}\n"
            f"[cyan]Risk:[/cyan] {info['risk_level']}\n"
            f"[cyan]Win Rate:[/cyan] {info['win_rate']:.0f}%\n"
            f"[cyan]Description:[/cyan] {info['description']}\n"
            f"[cyan]Best For:[/cyan] {info['best_for']}\n"
            f"[cyan]Strikes:[/cyan] {', '.join(info['required_strikes'])}\n"
            f"[cyan]Greeks:[/cyan]"
        )
        for k, v in info["greeks"].items():
            text += f"\n  {k} = {v}"
        console.print(Panel(text, title=f"Strategy: {info['name']}"))


@app.command("build")
def strategy_build(
    name: str = typer.Argument(..., help="Strategy name, e.g. 'Bull Put Spread'"),
    short: Optional[float] = typer.Option(None, "--short", help="Short strike (verticals)"),
    long: Optional[float] = typer.Option(None, "--long", help="Long strike (verticals)"),
    put_sell: Optional[float] = typer.Option(None, "--put-sell", help="Short put strike"),
    put_buy: Optional[float] = typer.Option(None, "--put-buy", help="Long put strike"),
    call_sell: Optional[float] = typer.Option(None, "--call-sell", help="Short call strike"),
    call_buy: Optional[float] = typer.Option(None, "--call-buy", help="Long call strike"),
    center: Optional[float] = typer.Option(None, "--center", help="Body strike (butterfly)"),
    wing1: Optional[float] = typer.Option(None, "--wing1", help="Lower wing strike"),
    wing2: Optional[float] = typer.Option(None, "--wing2", help="Upper wing strike"),
    contracts: int = typer.Option(1, "--contracts", "-c", help="Contracts per leg"),
    dte: Optional[int] = typer.Option(None, "--dte", help="Days to expiry"),
    spot: Optional[float] = typer.Option(None, "--spot", help="Underlying price; runs P&L analysis"),
    volatility: Optional[float] = typer.Option(None, "--vol", help="Implied volatility"),
    rate: Optional[float] = typer.Option(None, "--rate", help="Risk-free rate"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: json"),
):
    """Build a strategy's legs; with --spot, also analyze its P&L."""
    params = _params(
        short_strike=short,
        long_strike=long,
        put_sell_strike=put_sell,
        put_buy_strike=put_buy,
        call_sell_strike=call_sell,
        call_buy_strike=call_buy,
        center_strike=center,
        wing_strike1=wing1,
        wing_strike2=wing2,
        contracts=contracts,
        days_to_expiry=dte,
    )

    try:
        if spot is None:
            result = build_strategy(name, params)
        else:
            snapshot = MarketSnapshot(
                **_params(current_price=spot, implied_volatility=volatility, risk_free_rate=rate)
            )
            result = analyze_strategy(name, params, snapshot)
    except (KeyError, ValueError) as e:
        output_error(str(e))
        return

    if output == "json":
        output_json(result)
    elif spot is None:
        print_built_strategy(result)
    else:
        print_analysis(result)


@app.command("validate")
def strategy_validate(
    name: str = typer.Argument(..., help="Strategy name"),
    action: str = typer.Option("", "--action", "-a", help="Displayed action text"),
    legs: str = typer.Option("", "--legs", "-l", help="Leg text, e.g. 'SELL 180 PUT + BUY 175 PUT'"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: json"),
):
    """Check a displayed trade setup against a strategy definition."""
    try:
        report = validate_strategy(name, {"action": action, "legs": legs})
    except KeyError as e:
        output_error(str(e))
        return

    if output == "json":
        output_json(report)
    else:
        print_validation_report(report)

    if not report.is_valid:
        raise typer.Exit(1)


@app.command("recommend")
def strategy_recommend(
    bias: Optional[MarketBias] = typer.Option(None, "--bias", "-b", help="Market bias"),
    volatility: Optional[str] = typer.Option(None, "--volatility", help="low or high"),
    timeframe: Optional[str] = typer.Option(None, "--timeframe", help="short or long"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: json"),
):
    """Rank strategies for a market outlook."""
    recommendations = recommend_strategies(bias, volatility, timeframe)

    if output == "json":
        output_json(recommendations)
    else:
        print_recommendations(recommendations)
