"""Black-Scholes-Merton pricing utilities."""

from __future__ import annotations

import logging
import math

from scipy.stats import norm

from optionsdesk.config import get_config
from optionsdesk.core.enums import OptionType
from optionsdesk.core.exceptions import InvalidInputError
from optionsdesk.core.models import IVResult, PricingResult

logger = logging.getLogger(__name__)


def d1(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """Calculate d1 in Black-Scholes formula."""
    if T <= 0 or sigma <= 0:
        return 0.0
    return (math.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * math.sqrt(T))


def d2(S: float, K: float, T: float, r: float, sigma: float) -> float:
    """Calculate d2 in Black-Scholes formula."""
    if T <= 0 or sigma <= 0:
        return 0.0
    return d1(S, K, T, r, sigma) - sigma * math.sqrt(T)


def intrinsic_value(S: float, K: float, option_type: OptionType) -> float:
    """Exercise value of an option right now."""
    if option_type == OptionType.CALL:
        return max(S - K, 0.0)
    return max(K - S, 0.0)


def _check_inputs(S: float, K: float, T: float, r: float, sigma: float) -> None:
    for name, value in (("spot", S), ("strike", K), ("time", T), ("rate", r), ("volatility", sigma)):
        if not math.isfinite(value):
            raise InvalidInputError(f"{name} must be a finite number, got {value!r}")
    if S <= 0:
        raise InvalidInputError(f"spot must be positive, got {S}")
    if K <= 0:
        raise InvalidInputError(f"strike must be positive, got {K}")
    if T > 0 and sigma <= 0:
        raise InvalidInputError(f"volatility must be positive before expiry, got {sigma}")


def bsm_price(
    S: float,
    K: float,
    T: float,
    r: float | None = None,
    sigma: float | None = None,
    option_type: OptionType = OptionType.CALL,
) -> PricingResult:
    """Calculate Black-Scholes option price and Greeks.

    Args:
        S: Current underlying price
        K: Strike price
        T: Time to expiration in years
        r: Risk-free interest rate (config default when None)
        sigma: Volatility (annualized, config default when None)
        option_type: CALL or PUT

    Theta is per calendar day, vega and rho per one percentage point.

    Raises:
        InvalidInputError: non-positive spot or strike, or non-positive
            volatility with time remaining.
    """
    if r is None:
        r = get_config().risk_free_rate
    if sigma is None:
        sigma = get_config().default_volatility
    _check_inputs(S, K, T, r, sigma)

    intrinsic = intrinsic_value(S, K, option_type)

    if T <= 0:
        # At expiration
        if option_type == OptionType.CALL:
            delta = 1.0 if S > K else 0.0
        else:
            delta = -1.0 if S < K else 0.0
        return PricingResult(
            price=intrinsic,
            delta=delta,
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=0.0,
            intrinsic_value=intrinsic,
            time_value=0.0,
        )

    _d1 = d1(S, K, T, r, sigma)
    _d2 = d2(S, K, T, r, sigma)
    sqrt_T = math.sqrt(T)
    discount = math.exp(-r * T)

    nd1 = norm.cdf(_d1)
    nd2 = norm.cdf(_d2)
    npd1 = norm.pdf(_d1)

    if option_type == OptionType.CALL:
        price = S * nd1 - K * discount * nd2
        delta = nd1
        theta = (
            -(S * npd1 * sigma) / (2 * sqrt_T)
            - r * K * discount * nd2
        ) / 365.0
        rho = K * T * discount * nd2 / 100.0
    else:
        price = K * discount * norm.cdf(-_d2) - S * norm.cdf(-_d1)
        delta = -norm.cdf(-_d1)
        theta = (
            -(S * npd1 * sigma) / (2 * sqrt_T)
            + r * K * discount * norm.cdf(-_d2)
        ) / 365.0
        rho = -K * T * discount * norm.cdf(-_d2) / 100.0

    gamma = npd1 / (S * sigma * sqrt_T)
    vega = S * npd1 * sqrt_T / 100.0

    price = max(0.0, float(price))
    return PricingResult(
        price=price,
        delta=float(delta),
        gamma=float(gamma),
        theta=float(theta),
        vega=float(vega),
        rho=float(rho),
        intrinsic_value=intrinsic,
        time_value=max(0.0, price - intrinsic),
        d1=_d1,
        d2=_d2,
    )


def price_option(
    spot: float,
    strike: float,
    days_to_expiry: float,
    risk_free_rate: float | None = None,
    volatility: float | None = None,
    option_type: OptionType = OptionType.CALL,
) -> PricingResult:
    """Price an option with time expressed in calendar days."""
    return bsm_price(
        S=spot,
        K=strike,
        T=days_to_expiry / 365.0,
        r=risk_free_rate,
        sigma=volatility,
        option_type=option_type,
    )


def implied_volatility(
    option_price: float,
    S: float,
    K: float,
    T: float,
    r: float | None = None,
    option_type: OptionType = OptionType.CALL,
    initial_guess: float | None = None,
) -> IVResult:
    """Invert Black-Scholes for volatility with Newton-Raphson.

    Sigma is kept inside the configured floor/cap after every step. When
    the iteration cap is hit, or vega vanishes, the last iterate is
    returned with ``converged=False``.
    """
    config = get_config()
    if option_price < 0 or not math.isfinite(option_price):
        raise InvalidInputError(f"option price must be non-negative, got {option_price}")
    if T <= 0:
        raise InvalidInputError("implied volatility is undefined at or after expiry")

    sigma = initial_guess if initial_guess is not None else config.default_volatility
    for i in range(config.iv_max_iterations):
        result = bsm_price(S, K, T, r, sigma, option_type)
        diff = result.price - option_price
        if abs(diff) < config.iv_tolerance:
            return IVResult(volatility=sigma, iterations=i + 1, converged=True)

        # vega is quoted per vol point; the derivative is per unit sigma
        vega = result.vega * 100.0
        if vega == 0:
            logger.warning(f"Zero vega at sigma={sigma:.4f}, stopping IV search for K={K}")
            return IVResult(volatility=sigma, iterations=i + 1, converged=False)

        sigma = max(config.iv_floor, min(config.iv_cap, sigma - diff / vega))

    logger.warning(
        f"IV search did not converge after {config.iv_max_iterations} iterations "
        f"(price={option_price}, K={K}, last sigma={sigma:.4f})"
    )
    return IVResult(volatility=sigma, iterations=config.iv_max_iterations, converged=False)
