"""
Greeks calculation on option parameter records.
"""

from typing import Optional

from loguru import logger

from greeks.config import settings
from greeks.data.models import Greek, GreekResult, OptionParameters
from greeks.analytics.pricing import BlackScholes
from greeks.exceptions import InvalidParameter


class GreeksCalculator:
    """
    Calculate vanilla option Greeks.

    By default every Greek is the raw analytic derivative (per unit of the
    input, per year). With market_units=True, Theta is quoted per calendar
    day and Vega and Rho per percentage point, as on a trading screen.
    """

    def __init__(self, market_units: bool = False):
        self.market_units = market_units
        self.days_per_year = settings.pricing.days_per_year

    def _result(self, greek: Greek, value: float) -> GreekResult:
        if self.market_units:
            if greek == Greek.THETA:
                value = value / self.days_per_year
            elif greek in (Greek.VEGA, Greek.RHO):
                value = value / 100
        return GreekResult(greek=greek, value=value)

    def delta(self, params: OptionParameters) -> GreekResult:
        """Sensitivity of the price to the spot price."""
        value = BlackScholes.delta(
            params.spot, params.strike, params.time_to_expiry, params.rate,
            params.volatility, params.option_type, params.dividend_yield,
        )
        return self._result(Greek.DELTA, value)

    def gamma(self, params: OptionParameters) -> GreekResult:
        """Sensitivity of delta to the spot price."""
        value = BlackScholes.gamma(
            params.spot, params.strike, params.time_to_expiry, params.rate,
            params.volatility, params.dividend_yield,
        )
        return self._result(Greek.GAMMA, value)

    def theta(self, params: OptionParameters) -> GreekResult:
        value = BlackScholes.theta(
            params.spot, params.strike, params.time_to_expiry, params.rate,
            params.volatility, params.option_type, params.dividend_yield,
        )
        return self._result(Greek.THETA, value)

    def vega(self, params: OptionParameters) -> GreekResult:
        value = BlackScholes.vega(
            params.spot, params.strike, params.time_to_expiry, params.rate,
            params.volatility, params.dividend_yield,
        )
        return self._result(Greek.VEGA, value)

    def rho(self, params: OptionParameters) -> GreekResult:
        value = BlackScholes.rho(
            params.spot, params.strike, params.time_to_expiry, params.rate,
            params.volatility, params.option_type, params.dividend_yield,
        )
        return self._result(Greek.RHO, value)

    def lambda_(
        self,
        params: OptionParameters,
        option_price: Optional[float] = None,
    ) -> GreekResult:
        """
        Percentage change of the option value per percentage change in spot.

        Args:
            params: Option parameters
            option_price: Observed option price, defaults to the model price

        Raises:
            DivisionByZero: If the option price is zero
        """
        value = BlackScholes.lambda_(
            params.spot, params.strike, params.time_to_expiry, params.rate,
            params.volatility, params.option_type, params.dividend_yield,
            price=option_price,
        )
        return self._result(Greek.LAMBDA, value)

    def greek(self, params: OptionParameters, greek: Greek) -> GreekResult:
        """Evaluate a single Greek selected by enum."""
        try:
            greek = Greek(greek)
        except ValueError:
            raise InvalidParameter("greek", greek, "a known Greek") from None
        handlers = {
            Greek.DELTA: self.delta,
            Greek.GAMMA: self.gamma,
            Greek.LAMBDA: self.lambda_,
            Greek.RHO: self.rho,
            Greek.THETA: self.theta,
            Greek.VEGA: self.vega,
        }
        return handlers[greek](params)

    def all_greeks(self, params: OptionParameters) -> dict[Greek, GreekResult]:
        """
        Evaluate every Greek.

        Lambda is omitted when the option price is zero.
        """
        results = {
            greek: self.greek(params, greek)
            for greek in Greek
            if greek != Greek.LAMBDA
        }

        price = BlackScholes.price(
            params.spot, params.strike, params.time_to_expiry, params.rate,
            params.volatility, params.option_type, params.dividend_yield,
        )
        if price != 0:
            results[Greek.LAMBDA] = self.lambda_(params, option_price=price)
        else:
            logger.debug(f"Skipping lambda for zero-priced option {params}")

        return results
