"""CLI commands for single-option pricing and implied volatility."""

from __future__ import annotations

from typing import Optional

import typer

from optionsdesk.cli.formatters import console, output_error, output_json, print_pricing_result
from optionsdesk.core.enums import OptionType
from optionsdesk.core.exceptions import InvalidInputError
from optionsdesk.core.pricing import implied_volatility, price_option


def price(
    spot: float = typer.Argument(..., help="Underlying price"),
    strike: float = typer.Argument(..., help="Strike price"),
    days: float = typer.Argument(..., help="Days to expiry"),
    volatility: Optional[float] = typer.Option(None, "--vol", help="Annualized volatility (config default)"),
    rate: Optional[float] = typer.Option(None, "--rate", "-r", help="Risk-free rate"),
    option_type: OptionType = typer.Option(OptionType.CALL, "--type", "-t", help="Option type"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: json"),
):
    """Price an option with Black-Scholes and show its Greeks."""
    try:
        result = price_option(spot, strike, days, rate, volatility, option_type)
    except InvalidInputError as e:
        output_error(str(e))
        return

    if output == "json":
        output_json(result)
    else:
        print_pricing_result(result, title=f"{option_type.value.upper()} {strike:g} @ {spot:g}, {days:g} DTE")


def iv(
    option_price: float = typer.Argument(..., help="Observed option price"),
    spot: float = typer.Argument(..., help="Underlying price"),
    strike: float = typer.Argument(..., help="Strike price"),
    days: float = typer.Argument(..., help="Days to expiry"),
    rate: Optional[float] = typer.Option(None, "--rate", "-r", help="Risk-free rate"),
    option_type: OptionType = typer.Option(OptionType.CALL, "--type", "-t", help="Option type"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output format: json"),
):
    """Solve for the implied volatility of an observed option price."""
    try:
        result = implied_volatility(option_price, spot, strike, days / 365.0, rate, option_type)
    except InvalidInputError as e:
        output_error(str(e))
        return

    if output == "json":
        output_json(result)
        return

    status = "[green]converged[/green]" if result.converged else "[yellow]not converged[/yellow]"
    console.print(
        f"Implied volatility: [bold]{result.volatility:.2%}[/bold] "
        f"({status} after {result.iterations} iterations)"
    )
