"""Analytics layer for option pricing, Greeks, squeeks and scenarios."""

from greeks.analytics.greeks import GreeksCalculator
from greeks.analytics.pricing import BlackScholes, OptionPricer
from greeks.analytics.scenarios import ScenarioEngine, ScenarioResult
from greeks.analytics.squeeks import (
    ConcentratedLiquidityModel,
    PayoffModel,
    PowerPerpetualModel,
    SqueeksCalculator,
    hedge_quantity,
)
from greeks.analytics.stats import normal_cdf, normal_pdf

__all__ = [
    "GreeksCalculator",
    "BlackScholes",
    "OptionPricer",
    "ScenarioEngine",
    "ScenarioResult",
    "ConcentratedLiquidityModel",
    "PayoffModel",
    "PowerPerpetualModel",
    "SqueeksCalculator",
    "hedge_quantity",
    "normal_cdf",
    "normal_pdf",
]
