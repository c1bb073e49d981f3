"""Tests for core enums."""

from optionsdesk.core.enums import MarketBias, OptionType, OrderSide, RiskLevel, Severity


def test_option_type_values():
    assert OptionType.CALL == "call"
    assert OptionType.PUT == "put"


def test_order_side_values():
    assert OrderSide.BUY == "buy"
    assert OrderSide.SELL == "sell"


def test_order_side_sign():
    assert OrderSide.BUY.sign == 1
    assert OrderSide.SELL.sign == -1


def test_bias_and_risk_values():
    assert MarketBias.BULLISH == "bullish"
    assert MarketBias.NEUTRAL == "neutral"
    assert RiskLevel.MODERATE == "moderate"
    assert Severity.CRITICAL == "CRITICAL"
