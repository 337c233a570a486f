"""
Data models for the greeks library.

Parameter records validate themselves on construction and are immutable
afterwards. Comparisons are written so that NaN passes validation and
propagates through the formulas instead of raising.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from greeks.config import settings
from greeks.exceptions import InvalidParameter


class OptionType(str, Enum):
    """Option type enumeration."""
    CALL = "call"
    PUT = "put"


class Greek(str, Enum):
    """Sensitivity enumeration."""
    DELTA = "delta"
    GAMMA = "gamma"
    LAMBDA = "lambda"
    RHO = "rho"
    THETA = "theta"
    VEGA = "vega"


class InstrumentKind(str, Enum):
    """Instrument families priced by the squeeks models."""
    POWER_PERPETUAL = "power_perpetual"
    CONCENTRATED_LIQUIDITY = "concentrated_liquidity"


def _require_positive(name: str, value: float):
    if value <= 0:
        raise InvalidParameter(name, value, "> 0")


def _require_non_negative(name: str, value: float):
    if value < 0:
        raise InvalidParameter(name, value, ">= 0")


@dataclass(frozen=True)
class OptionParameters:
    """
    Inputs of a European option.

    Units: time_to_expiry in years; rate, volatility and dividend_yield as
    continuously compounded decimals (0.05 for 5%).
    """

    spot: float
    strike: float
    time_to_expiry: float
    rate: float
    volatility: float
    option_type: OptionType = OptionType.CALL
    dividend_yield: float = 0.0

    def __post_init__(self):
        _require_positive("spot", self.spot)
        _require_positive("strike", self.strike)
        _require_non_negative("time_to_expiry", self.time_to_expiry)
        _require_non_negative("volatility", self.volatility)
        # Accept plain strings ("call"/"put") as well as the enum
        try:
            option_type = OptionType(self.option_type)
        except ValueError:
            raise InvalidParameter("option_type", self.option_type, "call or put") from None
        object.__setattr__(self, "option_type", option_type)

    @property
    def is_call(self) -> bool:
        return self.option_type == OptionType.CALL

    def replace(self, **changes) -> "OptionParameters":
        """Return a validated copy with some fields changed."""
        return replace(self, **changes)


@dataclass(frozen=True)
class PowerPerpetualParameters:
    """
    Inputs of a power perpetual position (squeeth when power == 2).

    The mark price of one unit is
    normalization_factor * underlying_price ** power
    * exp(power * (power - 1) / 2 * volatility ** 2 * funding_period)
    / scaling_factor.
    """

    underlying_price: float
    normalization_factor: float
    volatility: float
    power: float = field(default_factory=lambda: settings.squeeth.power)
    funding_period: float = field(default_factory=lambda: settings.squeeth.funding_period)
    scaling_factor: float = field(default_factory=lambda: settings.squeeth.scaling_factor)
    position_size: float = 1.0  # Signed: negative for short

    def __post_init__(self):
        _require_positive("underlying_price", self.underlying_price)
        _require_positive("normalization_factor", self.normalization_factor)
        _require_non_negative("volatility", self.volatility)
        _require_positive("funding_period", self.funding_period)
        _require_positive("scaling_factor", self.scaling_factor)

    @property
    def kind(self) -> InstrumentKind:
        return InstrumentKind.POWER_PERPETUAL

    def replace(self, **changes) -> "PowerPerpetualParameters":
        return replace(self, **changes)


@dataclass(frozen=True)
class ConcentratedLiquidityParameters:
    """
    Inputs of a concentrated liquidity position.

    Prices are quoted in the quote token per unit of the risky token and the
    position value is expressed in the quote token. A non-zero horizon
    values the position as the expected value of its curve after that many
    years of driftless lognormal moves with the given volatility.
    """

    lower: float
    upper: float
    price: float
    liquidity: float
    volatility: float = 0.0
    horizon: float = 0.0

    def __post_init__(self):
        _require_positive("lower", self.lower)
        if self.upper <= self.lower:
            raise InvalidParameter("upper", self.upper, f"> lower ({self.lower})")
        _require_positive("price", self.price)
        _require_non_negative("liquidity", self.liquidity)
        _require_non_negative("volatility", self.volatility)
        _require_non_negative("horizon", self.horizon)

    @classmethod
    def from_reserves(
        cls,
        lower: float,
        upper: float,
        price: float,
        amount0: float,
        amount1: float,
        volatility: float = 0.0,
        horizon: float = 0.0,
    ) -> "ConcentratedLiquidityParameters":
        """
        Build a position from its token reserves.

        Args:
            lower: Lower bound of the price range
            upper: Upper bound of the price range
            price: Current pool price
            amount0: Reserve of the risky token
            amount1: Reserve of the quote token
        """
        from greeks.analytics.liquidity import virtual_liquidity

        _require_positive("lower", lower)
        if upper <= lower:
            raise InvalidParameter("upper", upper, f"> lower ({lower})")
        _require_non_negative("amount0", amount0)
        _require_non_negative("amount1", amount1)

        return cls(
            lower=lower,
            upper=upper,
            price=price,
            liquidity=virtual_liquidity(lower, upper, amount0, amount1),
            volatility=volatility,
            horizon=horizon,
        )

    @property
    def kind(self) -> InstrumentKind:
        return InstrumentKind.CONCENTRATED_LIQUIDITY

    @property
    def in_range(self) -> bool:
        return self.lower < self.price < self.upper

    def replace(self, **changes) -> "ConcentratedLiquidityParameters":
        return replace(self, **changes)


@dataclass(frozen=True)
class GreekResult:
    """A single sensitivity value tagged with its greek."""

    greek: Greek
    value: float

    def __float__(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"{self.greek.value.capitalize()}: {self.value:+.6f}"


@dataclass(frozen=True)
class PricingResult:
    """Result from option pricing."""

    price: float
    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float
    lambda_: Optional[float] = None  # None when the price is zero

    def __str__(self) -> str:
        lambda_ = "n/a" if self.lambda_ is None else f"{self.lambda_:+.4f}"
        return (
            f"Price: {self.price:.4f}\n"
            f"  Delta:  {self.delta:+.4f}\n"
            f"  Gamma:  {self.gamma:+.6f}\n"
            f"  Theta:  {self.theta:+.4f}\n"
            f"  Vega:   {self.vega:+.4f}\n"
            f"  Rho:    {self.rho:+.4f}\n"
            f"  Lambda: {lambda_}"
        )


@dataclass(frozen=True)
class SqueeksResult:
    """Value and sensitivities of a power perpetual or liquidity position."""

    kind: InstrumentKind
    value: float
    delta: float
    gamma: float
    theta: float
    vega: float

    def __str__(self) -> str:
        return (
            f"{self.kind.value}: value {self.value:.4f}\n"
            f"  Delta:  {self.delta:+.6f}\n"
            f"  Gamma:  {self.gamma:+.8f}\n"
            f"  Theta:  {self.theta:+.4f}/yr\n"
            f"  Vega:   {self.vega:+.4f}"
        )
