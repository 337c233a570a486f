"""
Standard normal distribution primitives.
"""

from scipy.stats import norm


def normal_cdf(x: float) -> float:
    """Cumulative standard normal distribution Φ(x)."""
    return float(norm.cdf(x))


def normal_pdf(x: float) -> float:
    """Standard normal density φ(x)."""
    return float(norm.pdf(x))
