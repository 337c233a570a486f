"""
European option pricing: Black-Scholes with a continuous dividend yield.

All functions take time in years and rates, yields and volatility as
continuously compounded decimals. Greeks are raw derivatives (per unit of
the input, per year); see GreeksCalculator for trading-screen units.
"""

from typing import Optional

import numpy as np
from loguru import logger
from scipy.optimize import brentq

from greeks.analytics.stats import normal_cdf, normal_pdf
from greeks.config import settings
from greeks.data.models import OptionParameters, OptionType, PricingResult
from greeks.exceptions import DivisionByZero


class BlackScholes:
    """Black-Scholes option pricing model."""

    @staticmethod
    def d1(S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0) -> float:
        """Calculate d1 parameter."""
        vol_sqrt_t = sigma * np.sqrt(T)
        if vol_sqrt_t == 0:
            raise DivisionByZero("d1 is undefined when sigma * sqrt(T) == 0")
        return (np.log(S / K) + (r - q + 0.5 * sigma**2) * T) / vol_sqrt_t

    @staticmethod
    def d2(S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0) -> float:
        """Calculate d2 parameter."""
        return BlackScholes.d1(S, K, T, r, sigma, q) - sigma * np.sqrt(T)

    @staticmethod
    def _degenerate(T: float, sigma: float) -> bool:
        # NaN compares False and falls through to the closed form
        return T <= 0 or sigma <= 0

    @staticmethod
    def _forward_itm(S: float, K: float, T: float, r: float, q: float, option_type: OptionType) -> bool:
        """Whether the discounted forward payoff is in the money."""
        forward = S * np.exp(-q * T)
        discounted_strike = K * np.exp(-r * T)
        # Calls take the kink so that call and put deltas always differ by e^(-qT)
        if option_type == OptionType.CALL:
            return forward >= discounted_strike
        return forward < discounted_strike

    @staticmethod
    def value_at_expiry(S: float, K: float, option_type: OptionType) -> float:
        """Intrinsic value of the option, independent of rates, volatility and time."""
        if option_type == OptionType.CALL:
            return max(S - K, 0.0)
        return max(K - S, 0.0)

    @staticmethod
    def price(
        S: float,
        K: float,
        T: float,
        r: float,
        sigma: float,
        option_type: OptionType,
        q: float = 0.0,
    ) -> float:
        """
        Calculate Black-Scholes option price.

        Args:
            S: Spot price
            K: Strike price
            T: Time to expiry (years)
            r: Risk-free rate
            sigma: Implied volatility
            option_type: Call or Put
            q: Continuous dividend yield

        Returns:
            Option price
        """
        if T <= 0:
            # At expiry
            return BlackScholes.value_at_expiry(S, K, option_type)

        if sigma <= 0:
            # No diffusion: the option is worth its discounted forward payoff
            forward = S * np.exp(-q * T)
            discounted_strike = K * np.exp(-r * T)
            if option_type == OptionType.CALL:
                return float(max(forward - discounted_strike, 0.0))
            return float(max(discounted_strike - forward, 0.0))

        d1 = BlackScholes.d1(S, K, T, r, sigma, q)
        d2 = d1 - sigma * np.sqrt(T)
        spot_df = np.exp(-q * T)
        strike_df = np.exp(-r * T)

        if option_type == OptionType.CALL:
            price = S * spot_df * normal_cdf(d1) - K * strike_df * normal_cdf(d2)
        else:
            price = K * strike_df * normal_cdf(-d2) - S * spot_df * normal_cdf(-d1)

        return float(price)

    @staticmethod
    def delta(
        S: float,
        K: float,
        T: float,
        r: float,
        sigma: float,
        option_type: OptionType,
        q: float = 0.0,
    ) -> float:
        """Calculate option delta."""
        if BlackScholes._degenerate(T, sigma):
            # Slope of the discounted payoff
            if not BlackScholes._forward_itm(S, K, T, r, q, option_type):
                return 0.0
            slope = float(np.exp(-q * max(T, 0.0)))
            return slope if option_type == OptionType.CALL else -slope

        d1 = BlackScholes.d1(S, K, T, r, sigma, q)
        spot_df = np.exp(-q * T)

        if option_type == OptionType.CALL:
            return float(spot_df * normal_cdf(d1))
        else:
            return float(spot_df * (normal_cdf(d1) - 1))

    @staticmethod
    def gamma(S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0) -> float:
        """Calculate option gamma (same for calls and puts)."""
        if BlackScholes._degenerate(T, sigma):
            return 0.0

        d1 = BlackScholes.d1(S, K, T, r, sigma, q)
        return float(np.exp(-q * T) * normal_pdf(d1) / (S * sigma * np.sqrt(T)))

    @staticmethod
    def theta(
        S: float,
        K: float,
        T: float,
        r: float,
        sigma: float,
        option_type: OptionType,
        q: float = 0.0,
    ) -> float:
        """Calculate option theta (per year)."""
        if T <= 0:
            return 0.0

        if sigma <= 0:
            # Time derivative of the discounted forward payoff
            if not BlackScholes._forward_itm(S, K, T, r, q, option_type):
                return 0.0
            carry = q * S * np.exp(-q * T) - r * K * np.exp(-r * T)
            return float(carry if option_type == OptionType.CALL else -carry)

        d1 = BlackScholes.d1(S, K, T, r, sigma, q)
        d2 = d1 - sigma * np.sqrt(T)
        spot_df = np.exp(-q * T)
        strike_df = np.exp(-r * T)

        term1 = -(S * spot_df * normal_pdf(d1) * sigma) / (2 * np.sqrt(T))

        if option_type == OptionType.CALL:
            term2 = -r * K * strike_df * normal_cdf(d2)
            term3 = q * S * spot_df * normal_cdf(d1)
        else:
            term2 = r * K * strike_df * normal_cdf(-d2)
            term3 = -q * S * spot_df * normal_cdf(-d1)

        return float(term1 + term2 + term3)

    @staticmethod
    def vega(S: float, K: float, T: float, r: float, sigma: float, q: float = 0.0) -> float:
        """Calculate option vega (per unit of volatility)."""
        if BlackScholes._degenerate(T, sigma):
            return 0.0

        d1 = BlackScholes.d1(S, K, T, r, sigma, q)
        return float(S * np.exp(-q * T) * normal_pdf(d1) * np.sqrt(T))

    @staticmethod
    def rho(
        S: float,
        K: float,
        T: float,
        r: float,
        sigma: float,
        option_type: OptionType,
        q: float = 0.0,
    ) -> float:
        """Calculate option rho (per unit of rate)."""
        if T <= 0:
            return 0.0

        strike_df = np.exp(-r * T)

        if sigma <= 0:
            if not BlackScholes._forward_itm(S, K, T, r, q, option_type):
                return 0.0
            rho = K * T * strike_df
            return float(rho if option_type == OptionType.CALL else -rho)

        d2 = BlackScholes.d2(S, K, T, r, sigma, q)

        if option_type == OptionType.CALL:
            return float(K * T * strike_df * normal_cdf(d2))
        else:
            return float(-K * T * strike_df * normal_cdf(-d2))

    @staticmethod
    def lambda_(
        S: float,
        K: float,
        T: float,
        r: float,
        sigma: float,
        option_type: OptionType,
        q: float = 0.0,
        price: Optional[float] = None,
    ) -> float:
        """
        Calculate option lambda (elasticity), delta * S / price.

        Args:
            price: Observed option price. Defaults to the model price.

        Raises:
            DivisionByZero: If the price is zero
        """
        if price is None:
            price = BlackScholes.price(S, K, T, r, sigma, option_type, q)
        if price == 0:
            logger.warning(f"Lambda undefined for zero-priced {option_type.value} S={S} K={K} T={T}")
            raise DivisionByZero("lambda is undefined when the option price is zero")

        delta = BlackScholes.delta(S, K, T, r, sigma, option_type, q)
        return float(delta * S / price)

    @staticmethod
    def implied_volatility(
        price: float,
        S: float,
        K: float,
        T: float,
        r: float,
        option_type: OptionType,
        q: float = 0.0,
        max_iterations: Optional[int] = None,
        precision: Optional[float] = None,
    ) -> Optional[float]:
        """
        Calculate implied volatility using Brent's method.

        Returns None if IV cannot be found.
        """
        config = settings.pricing
        if max_iterations is None:
            max_iterations = config.iv_max_iterations
        if precision is None:
            precision = config.iv_precision

        if T <= 0 or price <= 0:
            logger.debug(f"No implied volatility for price={price} T={T}")
            return None

        # Check for intrinsic value violations
        forward = S * np.exp(-q * T)
        discounted_strike = K * np.exp(-r * T)
        if option_type == OptionType.CALL:
            intrinsic = max(0.0, forward - discounted_strike)
        else:
            intrinsic = max(0.0, discounted_strike - forward)

        if price < intrinsic:
            logger.debug(f"Price {price} below discounted intrinsic {intrinsic:.6f}")
            return None

        def objective(sigma):
            return BlackScholes.price(S, K, T, r, sigma, option_type, q) - price

        # Widen the bracket downwards for volatilities below the configured floor
        lower = config.iv_lower_bound
        while lower > config.iv_lower_limit and objective(lower) > 0:
            lower /= 10

        try:
            iv = brentq(
                objective,
                lower,
                config.iv_upper_bound,
                maxiter=max_iterations,
                xtol=precision,
            )
            return float(iv)
        except (ValueError, RuntimeError) as e:
            logger.debug(f"Implied volatility search failed for price={price}: {e}")
            return None

    @staticmethod
    def full_greeks(
        S: float,
        K: float,
        T: float,
        r: float,
        sigma: float,
        option_type: OptionType,
        q: float = 0.0,
    ) -> PricingResult:
        """Calculate price and all Greeks at once."""
        price = BlackScholes.price(S, K, T, r, sigma, option_type, q)
        delta = BlackScholes.delta(S, K, T, r, sigma, option_type, q)
        # Lambda is left unset rather than raised for worthless options
        lambda_ = delta * S / price if price != 0 else None

        return PricingResult(
            price=price,
            delta=delta,
            gamma=BlackScholes.gamma(S, K, T, r, sigma, q),
            theta=BlackScholes.theta(S, K, T, r, sigma, option_type, q),
            vega=BlackScholes.vega(S, K, T, r, sigma, q),
            rho=BlackScholes.rho(S, K, T, r, sigma, option_type, q),
            lambda_=lambda_,
        )


class OptionPricer:
    """Option pricer working on validated OptionParameters records."""

    def __init__(self):
        self._pricer = BlackScholes()

    @staticmethod
    def _args(params: OptionParameters) -> tuple:
        return (
            params.spot,
            params.strike,
            params.time_to_expiry,
            params.rate,
            params.volatility,
            params.option_type,
            params.dividend_yield,
        )

    def price(self, params: OptionParameters) -> float:
        """Black-Scholes premium of the option."""
        return self._pricer.price(*self._args(params))

    def value_at_expiry(self, params: OptionParameters) -> float:
        """Intrinsic value of the option at the current spot."""
        return self._pricer.value_at_expiry(params.spot, params.strike, params.option_type)

    def price_option(self, params: OptionParameters) -> PricingResult:
        """Price an option and compute all Greeks."""
        return self._pricer.full_greeks(*self._args(params))

    def implied_volatility(
        self,
        market_price: float,
        params: OptionParameters,
    ) -> Optional[float]:
        """Calculate implied volatility from market price, ignoring params.volatility."""
        return self._pricer.implied_volatility(
            price=market_price,
            S=params.spot,
            K=params.strike,
            T=params.time_to_expiry,
            r=params.rate,
            option_type=params.option_type,
            q=params.dividend_yield,
        )
