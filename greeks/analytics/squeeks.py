"""
Squeeks: Greeks of power perpetual and concentrated liquidity positions.

Each instrument is described by a payoff model V(spot, volatility, horizon).
Sensitivities default to central finite differences of that curve; models
override them with closed forms where those exist.

Theta here is the sensitivity to the valuation horizon per year with spot
unchanged. For squeeth it is the funding paid per year; for a liquidity
position it is the expected drift from diffusion, negative since LPs are
short gamma.
"""

from abc import ABC, abstractmethod
from typing import Union

import numpy as np
from loguru import logger

from greeks.analytics import liquidity
from greeks.config import settings
from greeks.data.models import (
    ConcentratedLiquidityParameters,
    Greek,
    GreekResult,
    InstrumentKind,
    PowerPerpetualParameters,
    SqueeksResult,
)
from greeks.exceptions import DivisionByZero, InvalidParameter, UnsupportedInstrument

SqueeksParameters = Union[PowerPerpetualParameters, ConcentratedLiquidityParameters]


class PayoffModel(ABC):
    """Value curve of a position with finite-difference sensitivities."""

    kind: InstrumentKind

    def __init__(self, params: SqueeksParameters):
        self.params = params
        self.numerics = settings.numerics

    @property
    @abstractmethod
    def spot(self) -> float:
        """Current underlying price."""
        pass

    @property
    @abstractmethod
    def horizon(self) -> float:
        """Current valuation horizon in years."""
        pass

    @property
    def volatility(self) -> float:
        return self.params.volatility

    @abstractmethod
    def value(self, spot: float, volatility: float, horizon: float) -> float:
        """Position value for the given market state."""
        pass

    def current_value(self) -> float:
        return self.value(self.spot, self.volatility, self.horizon)

    def numerical_delta(self) -> float:
        h = self.spot * self.numerics.spot_bump
        up = self.value(self.spot + h, self.volatility, self.horizon)
        down = self.value(self.spot - h, self.volatility, self.horizon)
        return (up - down) / (2 * h)

    def numerical_gamma(self) -> float:
        h = self.spot * self.numerics.spot_bump
        up = self.value(self.spot + h, self.volatility, self.horizon)
        mid = self.value(self.spot, self.volatility, self.horizon)
        down = self.value(self.spot - h, self.volatility, self.horizon)
        return (up - 2 * mid + down) / h**2

    def numerical_theta(self) -> float:
        h = self.numerics.time_bump
        up = self.value(self.spot, self.volatility, self.horizon + h)
        if self.horizon < h:
            # One-sided at the start of the horizon
            return (up - self.current_value()) / h
        down = self.value(self.spot, self.volatility, self.horizon - h)
        return (up - down) / (2 * h)

    def numerical_vega(self) -> float:
        h = self.numerics.vol_bump
        up = self.value(self.spot, self.volatility + h, self.horizon)
        if self.volatility < h:
            return (up - self.current_value()) / h
        down = self.value(self.spot, self.volatility - h, self.horizon)
        return (up - down) / (2 * h)

    def delta(self) -> float:
        return self.numerical_delta()

    def gamma(self) -> float:
        return self.numerical_gamma()

    def theta(self) -> float:
        return self.numerical_theta()

    def vega(self) -> float:
        return self.numerical_vega()


class PowerPerpetualModel(PayoffModel):
    """
    Power perpetual mark value.

    V = n * NF * S**p * exp(p * (p - 1) / 2 * sigma**2 * f) / scale

    where n is the position size, NF the normalization factor and f the
    funding period. With p = 2 this is squeeth.
    """

    kind = InstrumentKind.POWER_PERPETUAL

    @property
    def spot(self) -> float:
        return self.params.underlying_price

    @property
    def horizon(self) -> float:
        return self.params.funding_period

    @property
    def _convexity(self) -> float:
        p = self.params.power
        return p * (p - 1) / 2

    def value(self, spot: float, volatility: float, horizon: float) -> float:
        params = self.params
        return float(
            params.position_size
            * params.normalization_factor
            * spot**params.power
            * np.exp(self._convexity * volatility**2 * horizon)
            / params.scaling_factor
        )

    def delta(self) -> float:
        return self.params.power * self.current_value() / self.spot

    def gamma(self) -> float:
        p = self.params.power
        return p * (p - 1) * self.current_value() / self.spot**2

    def theta(self) -> float:
        return self._convexity * self.volatility**2 * self.current_value()

    def vega(self) -> float:
        p = self.params.power
        return p * (p - 1) * self.volatility * self.horizon * self.current_value()


class ConcentratedLiquidityModel(PayoffModel):
    """
    Concentrated liquidity position value.

    With a zero horizon the value is the position curve at the pool price;
    otherwise it is the expectation of that curve after `horizon` years.
    """

    kind = InstrumentKind.CONCENTRATED_LIQUIDITY

    @property
    def spot(self) -> float:
        return self.params.price

    @property
    def horizon(self) -> float:
        return self.params.horizon

    def value(self, spot: float, volatility: float, horizon: float) -> float:
        params = self.params
        return liquidity.expected_position_value(
            params.liquidity, spot, params.lower, params.upper, volatility, horizon
        )

    def delta(self) -> float:
        params = self.params
        if params.horizon > 0 and params.volatility > 0:
            return self.numerical_delta()
        if params.price >= params.upper:
            return 0.0
        # Below the range the position is all risky token
        price = max(params.price, params.lower)
        return liquidity.concentrated_delta(params.liquidity, price, params.upper)

    def gamma(self) -> float:
        params = self.params
        if params.horizon > 0 and params.volatility > 0:
            return self.numerical_gamma()
        if not params.in_range:
            return 0.0
        return liquidity.concentrated_gamma(params.liquidity, params.price)

    def theta(self) -> float:
        params = self.params
        if params.horizon > 0 and params.volatility > 0:
            return self.numerical_theta()
        return 0.5 * params.volatility**2 * params.price**2 * self.gamma()

    def vega(self) -> float:
        params = self.params
        if params.horizon > 0 and params.volatility > 0:
            return self.numerical_vega()
        return 0.0


MODELS: dict[InstrumentKind, type[PayoffModel]] = {
    InstrumentKind.POWER_PERPETUAL: PowerPerpetualModel,
    InstrumentKind.CONCENTRATED_LIQUIDITY: ConcentratedLiquidityModel,
}


def hedge_quantity(exposure: float, per_unit: float) -> float:
    """
    Signed quantity of a hedge instrument that neutralises an exposure.

    Args:
        exposure: Sensitivity of the position to hedge (e.g. its delta)
        per_unit: Same sensitivity of one unit of the hedge instrument

    Returns:
        Units to buy (positive) or sell (negative)
    """
    if per_unit == 0:
        raise DivisionByZero("hedge instrument has zero sensitivity")
    return -exposure / per_unit


class SqueeksCalculator:
    """Evaluate squeeks for power perpetual and liquidity positions."""

    def model_for(self, params: SqueeksParameters) -> PayoffModel:
        """Select the payoff model for a parameter record."""
        kind = getattr(params, "kind", None)
        model_cls = MODELS.get(kind)
        if model_cls is None:
            raise UnsupportedInstrument(f"No payoff model for {type(params).__name__}")
        return model_cls(params)

    def value(self, params: SqueeksParameters) -> float:
        """Position value."""
        return self.model_for(params).current_value()

    def delta(self, params: SqueeksParameters) -> GreekResult:
        return GreekResult(greek=Greek.DELTA, value=self.model_for(params).delta())

    def gamma(self, params: SqueeksParameters) -> GreekResult:
        return GreekResult(greek=Greek.GAMMA, value=self.model_for(params).gamma())

    def theta(self, params: SqueeksParameters) -> GreekResult:
        return GreekResult(greek=Greek.THETA, value=self.model_for(params).theta())

    def vega(self, params: SqueeksParameters) -> GreekResult:
        return GreekResult(greek=Greek.VEGA, value=self.model_for(params).vega())

    def greek(self, params: SqueeksParameters, greek: Greek) -> GreekResult:
        """Evaluate a single squeek selected by enum."""
        handlers = {
            Greek.DELTA: self.delta,
            Greek.GAMMA: self.gamma,
            Greek.THETA: self.theta,
            Greek.VEGA: self.vega,
        }
        try:
            handler = handlers[Greek(greek)]
        except (KeyError, ValueError):
            raise InvalidParameter("greek", greek, "one of delta, gamma, theta, vega") from None
        return handler(params)

    def all_squeeks(self, params: SqueeksParameters) -> SqueeksResult:
        """Value and all four sensitivities in one pass."""
        model = self.model_for(params)
        logger.debug(f"Evaluating squeeks for {model.kind.value}")
        return SqueeksResult(
            kind=model.kind,
            value=model.current_value(),
            delta=model.delta(),
            gamma=model.gamma(),
            theta=model.theta(),
            vega=model.vega(),
        )
