"""
Concentrated liquidity (Uniswap v3 style) position math.

Prices are quoted in the quote token per unit of the risky token. A
position of virtual liquidity L over [lower, upper] holds only the risky
token below the range, only the quote token above it, and a mix inside.
Position values are expressed in the quote token.
"""

import numpy as np

from greeks.analytics.stats import normal_cdf
from greeks.exceptions import InvalidParameter


def _check_range(lower: float, upper: float):
    if lower <= 0:
        raise InvalidParameter("lower", lower, "> 0")
    if upper <= lower:
        raise InvalidParameter("upper", upper, f"> lower ({lower})")


def virtual_liquidity(lower: float, upper: float, amount0: float, amount1: float) -> float:
    """
    Virtual liquidity L of a position from its token reserves.

    Solves (amount0 + L / sqrt(upper)) * (amount1 + L * sqrt(lower)) = L**2
    for its positive root.

    Args:
        lower: Lower bound of the price range
        upper: Upper bound of the price range
        amount0: Reserve of the risky token
        amount1: Reserve of the quote token

    Returns:
        Virtual liquidity
    """
    _check_range(lower, upper)

    # Quadratic a*L^2 + b*L + c = 0 with a < 0 and b, c >= 0
    a = np.sqrt(lower) / np.sqrt(upper) - 1.0
    b = amount1 / np.sqrt(upper) + amount0 * np.sqrt(lower)
    c = amount0 * amount1

    discriminant = b**2 - 4.0 * a * c
    return float((-b - np.sqrt(discriminant)) / (2.0 * a))


def position_value(liquidity: float, price: float, lower: float, upper: float) -> float:
    """Value of the position at the given pool price."""
    if price <= lower:
        return float(liquidity * price * (1.0 / np.sqrt(lower) - 1.0 / np.sqrt(upper)))
    if price >= upper:
        return float(liquidity * (np.sqrt(upper) - np.sqrt(lower)))
    return float(liquidity * (2.0 * np.sqrt(price) - price / np.sqrt(upper) - np.sqrt(lower)))


def concentrated_delta(liquidity: float, price: float, upper: float) -> float:
    """Delta of an in-range position: risky-token holdings."""
    return float(liquidity * (1.0 / np.sqrt(price) - 1.0 / np.sqrt(upper)))


def concentrated_gamma(liquidity: float, price: float) -> float:
    """Gamma of an in-range position. Always negative: LPs are short gamma."""
    return float(-0.5 * liquidity * price**-1.5)


def expected_position_value(
    liquidity: float,
    price: float,
    lower: float,
    upper: float,
    volatility: float,
    horizon: float,
) -> float:
    """
    Expected position value after `horizon` years of driftless lognormal
    price moves with annualised `volatility`.

    Integrates the piecewise value curve against the lognormal density
    using truncated moments of S_T, sqrt(S_T) and the indicator.
    """
    s = abs(volatility) * np.sqrt(horizon)
    if s == 0:
        return position_value(liquidity, price, lower, upper)

    def z(bound: float) -> float:
        # S_T < bound  <=>  Z < z(bound)
        return (np.log(bound / price) + 0.5 * s**2) / s

    z_lower = z(lower)
    z_upper = z(upper)

    # P(lower < S_T < upper) style pieces
    prob_below = normal_cdf(z_lower)
    prob_inside = normal_cdf(z_upper) - prob_below
    prob_above = 1.0 - normal_cdf(z_upper)

    spot_below = price * normal_cdf(z_lower - s)
    spot_inside = price * (normal_cdf(z_upper - s) - normal_cdf(z_lower - s))
    root_inside = (
        np.sqrt(price)
        * np.exp(-(s**2) / 8.0)
        * (normal_cdf(z_upper - 0.5 * s) - normal_cdf(z_lower - 0.5 * s))
    )

    below = spot_below * (1.0 / np.sqrt(lower) - 1.0 / np.sqrt(upper))
    inside = 2.0 * root_inside - spot_inside / np.sqrt(upper) - np.sqrt(lower) * prob_inside
    above = prob_above * (np.sqrt(upper) - np.sqrt(lower))

    return float(liquidity * (below + inside + above))
