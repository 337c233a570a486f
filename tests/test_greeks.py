"""
Tests for Greeks calculation module.
"""

import pytest

from greeks.analytics.greeks import GreeksCalculator
from greeks.data.models import Greek, GreekResult, OptionParameters, OptionType
from greeks.exceptions import DivisionByZero, InvalidParameter


class TestGreeksCalculator:
    """Tests for GreeksCalculator."""

    @pytest.fixture
    def calculator(self):
        return GreeksCalculator()

    @pytest.fixture
    def screen_calculator(self):
        return GreeksCalculator(market_units=True)

    @pytest.fixture
    def sample_call(self):
        return OptionParameters(
            spot=64.68,
            strike=65.0,
            time_to_expiry=23 / 365,
            rate=0.015,
            volatility=0.5051,
            option_type=OptionType.CALL,
            dividend_yield=0.021,
        )

    @pytest.fixture
    def sample_put(self, sample_call):
        return sample_call.replace(option_type=OptionType.PUT)

    def test_delta(self, calculator, sample_call, sample_put):
        assert abs(calculator.delta(sample_call).value - 0.5079) < 1e-3
        assert abs(calculator.delta(sample_put).value - (-0.4908)) < 1e-3

    def test_market_unit_vega(self, screen_calculator, sample_call):
        """Vega per volatility point."""
        assert abs(screen_calculator.vega(sample_call).value - 0.0647) < 1e-3

    def test_market_unit_theta(self, screen_calculator, sample_call, sample_put):
        """Theta per calendar day."""
        assert abs(screen_calculator.theta(sample_call).value - (-0.0703)) < 1e-3
        assert abs(screen_calculator.theta(sample_put).value - (-0.0714)) < 1e-3

    def test_market_unit_rho(self, screen_calculator, sample_call, sample_put):
        """Rho per rate point."""
        assert abs(screen_calculator.rho(sample_call).value - 0.0187) < 1e-3
        assert abs(screen_calculator.rho(sample_put).value - (-0.0222)) < 1e-3

    def test_market_units_scale_raw_values(self, calculator, screen_calculator, sample_call):
        raw_vega = calculator.vega(sample_call).value
        raw_theta = calculator.theta(sample_call).value

        assert screen_calculator.vega(sample_call).value == pytest.approx(raw_vega / 100)
        assert screen_calculator.theta(sample_call).value == pytest.approx(raw_theta / 365)
        # Delta and gamma are unit-free
        assert screen_calculator.delta(sample_call) == calculator.delta(sample_call)

    def test_gamma_symmetric(self, calculator, sample_call, sample_put):
        call_gamma = calculator.gamma(sample_call).value
        put_gamma = calculator.gamma(sample_put).value
        assert call_gamma == put_gamma
        assert call_gamma >= 0

    def test_greek_dispatch(self, calculator, sample_call):
        result = calculator.greek(sample_call, Greek.DELTA)
        assert isinstance(result, GreekResult)
        assert result.greek == Greek.DELTA
        assert calculator.greek(sample_call, "vega") == calculator.vega(sample_call)

    def test_unknown_greek(self, calculator, sample_call):
        with pytest.raises(InvalidParameter):
            calculator.greek(sample_call, "omega")

    def test_lambda(self, calculator, sample_call):
        result = calculator.greek(sample_call, "lambda")
        assert result.greek == Greek.LAMBDA
        # Leveraged: more than 1% move per 1% of spot
        assert result.value > 1

    def test_all_greeks(self, calculator, sample_call):
        results = calculator.all_greeks(sample_call)
        assert set(results) == set(Greek)
        assert all(result.greek == greek for greek, result in results.items())

    def test_all_greeks_skips_lambda_when_worthless(self, calculator):
        expired = OptionParameters(
            spot=90, strike=100, time_to_expiry=0.0, rate=0.05, volatility=0.2,
        )
        results = calculator.all_greeks(expired)

        assert Greek.LAMBDA not in results
        assert results[Greek.DELTA].value == 0
        assert results[Greek.GAMMA].value == 0

        with pytest.raises(DivisionByZero):
            calculator.lambda_(expired)

    def test_greek_result_formatting(self, calculator, sample_call):
        result = calculator.delta(sample_call)
        assert float(result) == result.value
        assert str(result).startswith("Delta: +0.50")
