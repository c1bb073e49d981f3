"""Tests for position Greeks."""

import pytest

from optionsdesk.core.enums import OptionType, OrderSide
from optionsdesk.core.greeks import position_greeks
from optionsdesk.core.pricing import bsm_price


def test_position_greeks_long_and_short():
    per_share = bsm_price(100, 100, 0.5, 0.05, 0.25, OptionType.CALL).greeks
    long = position_greeks(per_share, OrderSide.BUY, 2)
    short = position_greeks(per_share, OrderSide.SELL, 2)
    assert long.delta == pytest.approx(per_share.delta * 200)
    assert long.vega == pytest.approx(per_share.vega * 200)
    assert short.delta == pytest.approx(-long.delta)
    assert short.theta > 0


def test_position_greeks_custom_multiplier():
    per_share = bsm_price(100, 100, 0.5, 0.05, 0.25, OptionType.PUT).greeks
    scaled = position_greeks(per_share, OrderSide.BUY, 1, multiplier=10)
    assert scaled.delta == pytest.approx(per_share.delta * 10)
