"""Root CLI application for the options strategy engine."""

from __future__ import annotations

import logging

import typer

from optionsdesk.cli.pricing_cmds import iv, price
from optionsdesk.cli.strategy_cmds import app as strategy_app

app = typer.Typer(
    name="optionsdesk",
    help="Options pricing, strategy construction and consistency checks",
    no_args_is_help=True,
)

app.command("price")(price)
app.command("iv")(iv)
app.add_typer(strategy_app, name="strategy")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Options strategy engine CLI."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s | %(name)s | %(message)s",
    )


if __name__ == "__main__":
    app()
