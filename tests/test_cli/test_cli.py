"""Tests for the optionsdesk CLI."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from optionsdesk.cli.app import app

runner = CliRunner()


def test_price_json():
    result = runner.invoke(app, ["price", "100", "100", "365", "--vol", "0.2", "--rate", "0.05", "--output", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["price"] == pytest.approx(10.4506, abs=1e-3)
    assert data["delta"] > 0.5


def test_price_put_table():
    result = runner.invoke(app, ["price", "185", "180", "30", "--type", "put"])
    assert result.exit_code == 0
    assert "PUT 180" in result.output


def test_price_invalid_spot():
    result = runner.invoke(app, ["price", "0", "100", "30"])
    assert result.exit_code == 1


def test_iv_json():
    result = runner.invoke(app, ["iv", "10.4506", "100", "100", "365", "--rate", "0.05", "--output", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["converged"] is True
    assert data["volatility"] == pytest.approx(0.2, abs=1e-3)


def test_strategy_list_json():
    result = runner.invoke(app, ["strategy", "list", "--output", "json"])
    assert result.exit_code == 0
    names = {s["name"] for s in json.loads(result.output)}
    assert names == {
        "Bear Call Spread",
        "Bear Put Spread",
        "Bull Call Spread",
        "Bull Put Spread",
        "Iron Butterfly",
        "Iron Condor",
    }


def test_strategy_info():
    result = runner.invoke(app, ["strategy", "info", "iron_condor", "--output", "json"])
    assert result.exit_code == 0
    assert json.loads(result.output)["name"] == "Iron Condor"


def test_strategy_info_unknown():
    result = runner.invoke(app, ["strategy", "info", "Jade Lizard"])
    assert result.exit_code == 1


def test_strategy_build_json():
    result = runner.invoke(
        app, ["strategy", "build", "Bull Put Spread", "--short", "180", "--long", "175", "--output", "json"]
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["trade_setup"]["legs"] == "SELL 180 PUT + BUY 175 PUT"
    assert data["trade_setup"]["action"] == "Sell 180 Put + Buy 175 Put"
    assert data["validation"]["is_valid"] is True


def test_strategy_build_table():
    result = runner.invoke(app, ["strategy", "build", "Bull Put Spread", "--short", "180", "--long", "175"])
    assert result.exit_code == 0
    assert "Bull Put Spread" in result.output


def test_strategy_build_inverted_strikes():
    result = runner.invoke(app, ["strategy", "build", "Bull Put Spread", "--short", "175", "--long", "180"])
    assert result.exit_code == 1


def test_strategy_build_with_spot_analyzes():
    result = runner.invoke(
        app,
        [
            "strategy", "build", "Iron Condor",
            "--put-sell", "170", "--put-buy", "165", "--call-sell", "185", "--call-buy", "190",
            "--spot", "177", "--output", "json",
        ],
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert len(data["pnl"]["breakevens"]) == 2
    assert data["pnl"]["profit_probability"] == 0.7
    assert data["risk_metrics"]["risk_grade"] in {"A", "B", "C", "D", "F"}


def test_strategy_validate_passes():
    result = runner.invoke(
        app,
        [
            "strategy", "validate", "Bull Put Spread",
            "--action", "Sell 180 Put + Buy 175 Put", "--legs", "SELL 180 PUT + BUY 175 PUT",
            "--output", "json",
        ],
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["is_valid"] is True


def test_strategy_validate_fails():
    result = runner.invoke(
        app,
        [
            "strategy", "validate", "Bull Put Spread",
            "--action", "Sell 180 Call + Buy 175 Call", "--legs", "SELL 180 CALL + BUY 175 CALL",
            "--output", "json",
        ],
    )
    assert result.exit_code == 1
    assert '"PUT_SPREAD_WITH_CALLS"' in result.output


def test_strategy_recommend():
    result = runner.invoke(app, ["strategy", "recommend", "--bias", "bullish", "--output", "json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert {r["strategy"] for r in data[:2]} == {"Bull Put Spread", "Bull Call Spread"}
