"""
General utility functions.
"""

from typing import Optional

import numpy as np

from greeks.config import settings


def days_to_years(days: float, days_per_year: Optional[float] = None) -> float:
    """Convert calendar days to a year fraction."""
    days_per_year = days_per_year or settings.pricing.days_per_year
    return days / days_per_year


def annualize_volatility(
    daily_vol: float,
    periods_per_year: Optional[float] = None,
) -> float:
    """Annualize a per-period volatility. Crypto markets trade every calendar day."""
    periods_per_year = periods_per_year or settings.pricing.days_per_year
    return float(daily_vol * np.sqrt(periods_per_year))


def implied_volatility_from_funding(daily_funding: float) -> float:
    """
    Implied volatility of squeeth from its daily funding rate.

    Squeeth pays sigma**2 of its value per year in funding, so a normalization
    factor drop of `daily_funding` over one day implies
    sigma = sqrt(daily_funding * days_per_year).
    """
    return float(np.sqrt(daily_funding * settings.pricing.days_per_year))


def format_currency(value: float) -> str:
    """Format value as currency string."""
    if value >= 0:
        return f"${value:,.2f}"
    else:
        return f"-${abs(value):,.2f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format value as percentage string."""
    return f"{value * 100:.{decimals}f}%"


def format_greek(value: float, greek: str) -> str:
    """Format Greek value appropriately. Accepts a name or a Greek member."""
    if getattr(greek, "value", greek).lower() == "gamma":
        return f"{value:+.6f}"
    return f"{value:+.4f}"
