"""Parameter records and result types."""

from greeks.data.models import (
    ConcentratedLiquidityParameters,
    Greek,
    GreekResult,
    InstrumentKind,
    OptionParameters,
    OptionType,
    PowerPerpetualParameters,
    PricingResult,
    SqueeksResult,
)

__all__ = [
    "ConcentratedLiquidityParameters",
    "Greek",
    "GreekResult",
    "InstrumentKind",
    "OptionParameters",
    "OptionType",
    "PowerPerpetualParameters",
    "PricingResult",
    "SqueeksResult",
]
