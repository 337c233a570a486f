"""
Tests for parameter records and configuration.
"""

import dataclasses
import math

import pytest

from greeks.config import PricingConfig, SqueethConfig
from greeks.data.models import (
    ConcentratedLiquidityParameters,
    InstrumentKind,
    OptionParameters,
    OptionType,
    PowerPerpetualParameters,
)
from greeks.exceptions import GreeksError, InvalidParameter


class TestOptionParameters:
    """Validation of option inputs."""

    @pytest.mark.parametrize(
        "field,value",
        [
            ("spot", 0.0),
            ("spot", -1.0),
            ("strike", 0.0),
            ("time_to_expiry", -0.1),
            ("volatility", -0.2),
        ],
    )
    def test_invalid_inputs(self, field, value):
        kwargs = dict(spot=100, strike=100, time_to_expiry=1.0, rate=0.05, volatility=0.2)
        kwargs[field] = value

        with pytest.raises(InvalidParameter) as exc_info:
            OptionParameters(**kwargs)

        assert exc_info.value.field == field
        assert isinstance(exc_info.value, GreeksError)
        assert isinstance(exc_info.value, ValueError)

    def test_option_type_from_string(self):
        params = OptionParameters(100, 100, 1.0, 0.05, 0.2, option_type="put")
        assert params.option_type is OptionType.PUT
        assert not params.is_call

    def test_unknown_option_type(self):
        with pytest.raises(InvalidParameter):
            OptionParameters(100, 100, 1.0, 0.05, 0.2, option_type="straddle")

    def test_negative_rate_allowed(self):
        params = OptionParameters(100, 100, 1.0, -0.01, 0.2)
        assert params.rate == -0.01

    def test_nan_passes_validation(self):
        params = OptionParameters(100, 100, 1.0, 0.05, float("nan"))
        assert math.isnan(params.volatility)

    def test_immutable(self):
        params = OptionParameters(100, 100, 1.0, 0.05, 0.2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.spot = 101

    def test_replace_revalidates(self):
        params = OptionParameters(100, 100, 1.0, 0.05, 0.2)
        assert params.replace(spot=110).spot == 110
        with pytest.raises(InvalidParameter):
            params.replace(spot=-5)


class TestSqueeksParameters:
    """Validation of power perpetual and liquidity inputs."""

    def test_power_perpetual_defaults(self):
        params = PowerPerpetualParameters(underlying_price=3500, normalization_factor=0.8, volatility=0.9)

        assert params.power == 2.0
        assert params.funding_period == pytest.approx(17.5 / 365)
        assert params.scaling_factor == 10000
        assert params.kind == InstrumentKind.POWER_PERPETUAL

    @pytest.mark.parametrize(
        "field,value",
        [
            ("underlying_price", 0.0),
            ("normalization_factor", -0.1),
            ("volatility", -0.5),
            ("funding_period", 0.0),
            ("scaling_factor", 0.0),
        ],
    )
    def test_power_perpetual_invalid(self, field, value):
        kwargs = dict(underlying_price=3500, normalization_factor=0.8, volatility=0.9)
        kwargs[field] = value
        with pytest.raises(InvalidParameter):
            PowerPerpetualParameters(**kwargs)

    def test_liquidity_range_must_be_ordered(self):
        with pytest.raises(InvalidParameter):
            ConcentratedLiquidityParameters(lower=5000, upper=4000, price=4500, liquidity=1000)
        with pytest.raises(InvalidParameter):
            ConcentratedLiquidityParameters(lower=4000, upper=4000, price=4000, liquidity=1000)

    def test_liquidity_invalid_inputs(self):
        with pytest.raises(InvalidParameter):
            ConcentratedLiquidityParameters(lower=0, upper=4000, price=3000, liquidity=1000)
        with pytest.raises(InvalidParameter):
            ConcentratedLiquidityParameters(lower=3000, upper=4000, price=3500, liquidity=-1)
        with pytest.raises(InvalidParameter):
            ConcentratedLiquidityParameters(lower=3000, upper=4000, price=3500, liquidity=1, horizon=-1)

    def test_in_range(self):
        params = ConcentratedLiquidityParameters(lower=3000, upper=4000, price=3500, liquidity=1000)
        assert params.in_range
        assert not params.replace(price=4500).in_range
        assert params.kind == InstrumentKind.CONCENTRATED_LIQUIDITY


class TestConfig:
    """Environment-driven configuration."""

    def test_defaults(self):
        config = PricingConfig()
        assert config.days_per_year == 365.0
        assert config.iv_lower_bound < config.iv_upper_bound

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PRICING_DAYS_PER_YEAR", "252")
        monkeypatch.setenv("SQUEETH_FUNDING_PERIOD_DAYS", "365")

        assert PricingConfig().days_per_year == 252.0
        assert SqueethConfig().funding_period == 1.0
