"""
greeks: option pricing and sensitivities

- European option prices and Greeks (Black-Scholes with dividend yield)
- Implied volatility
- Squeeks: Greeks of power perpetuals and concentrated liquidity positions
"""

__version__ = "0.1.0"
