"""
Command-line demo: prints Greeks and squeeks for reference positions.

    python -m greeks.main
"""

from loguru import logger

from greeks.analytics.greeks import GreeksCalculator
from greeks.analytics.pricing import OptionPricer
from greeks.analytics.scenarios import ScenarioEngine
from greeks.analytics.squeeks import SqueeksCalculator, hedge_quantity
from greeks.data.models import (
    ConcentratedLiquidityParameters,
    OptionParameters,
    OptionType,
    PowerPerpetualParameters,
)
from greeks.utils.helpers import days_to_years, format_currency, format_greek, format_percent
from greeks.utils.logging import setup_logging


def vanilla_report():
    """Price an equity option and print its Greeks in trading-screen units."""
    params = OptionParameters(
        spot=64.68,
        strike=65.0,
        time_to_expiry=days_to_years(23),
        rate=0.015,
        volatility=0.5051,
        option_type=OptionType.CALL,
        dividend_yield=0.021,
    )
    pricer = OptionPricer()
    calculator = GreeksCalculator(market_units=True)

    print(f"European call, IV {format_percent(params.volatility)}")
    print(f"  Price: {pricer.price(params):.4f}")
    for greek, result in calculator.all_greeks(params).items():
        print(f"  {greek.value.capitalize():<7} {format_greek(result.value, greek)}")


def squeeth_report():
    params = PowerPerpetualParameters(
        underlying_price=3500.0,
        normalization_factor=0.8,
        volatility=0.9,
    )
    print(SqueeksCalculator().all_squeeks(params))


def liquidity_report():
    """Squeeks of an ETH/USDC range position and its squeeth gamma hedge."""
    position = ConcentratedLiquidityParameters.from_reserves(
        lower=3747.0,
        upper=5024.0,
        price=4360.61,
        amount0=1.448,
        amount1=6779.0,
        volatility=0.9,
    )
    squeeth = PowerPerpetualParameters(
        underlying_price=position.price,
        normalization_factor=0.8,
        volatility=position.volatility,
    )
    calculator = SqueeksCalculator()
    result = calculator.all_squeeks(position)

    print(f"Virtual liquidity: {position.liquidity:.4f}")
    print(result)

    hedge = hedge_quantity(result.gamma, calculator.gamma(squeeth).value)
    print(f"Squeeth to neutralise gamma: {hedge:+.4f}")

    for scenario in ScenarioEngine().run_stress_test(position):
        print(f"  {scenario.name:<10} {format_currency(scenario.pnl)}")


def main():
    """Main entry point."""
    setup_logging()
    logger.info("Computing reference Greeks")

    vanilla_report()
    squeeth_report()
    liquidity_report()


if __name__ == "__main__":
    main()
