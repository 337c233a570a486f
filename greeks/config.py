"""
Configuration management for the greeks library.
Uses Pydantic for validation and environment variable loading.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingConfig(BaseSettings):
    """Vanilla option pricing configuration."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    days_per_year: float = 365.0

    # Implied volatility search (Brent's method)
    iv_lower_bound: float = 1e-6
    iv_lower_limit: float = 1e-12  # Floor when widening the bracket
    iv_upper_bound: float = 5.0
    iv_max_iterations: int = 100
    iv_precision: float = 1e-8


class SqueethConfig(BaseSettings):
    """Power perpetual (squeeth) contract constants."""

    model_config = SettingsConfigDict(env_prefix="SQUEETH_")

    funding_period_days: float = 17.5
    scaling_factor: float = 10000.0
    power: float = 2.0

    @property
    def funding_period(self) -> float:
        """Funding period in years."""
        return self.funding_period_days / 365.0


class NumericsConfig(BaseSettings):
    """Bump sizes for finite-difference squeeks."""

    model_config = SettingsConfigDict(env_prefix="NUMERICS_")

    spot_bump: float = 1e-4  # Relative to spot
    vol_bump: float = 1e-4  # Absolute volatility points (decimal)
    time_bump: float = 1e-5  # Years


class ScenarioConfig(BaseSettings):
    """Stress scenario shock sizes."""

    model_config = SettingsConfigDict(env_prefix="SCENARIO_")

    spot_shock_pct: float = 5.0  # Percent move in the underlying
    iv_shock_points: float = 5.0  # Volatility points
    ladder_steps: int = 9
    ladder_range_pct: float = 20.0


class Settings(BaseSettings):
    """Main settings container."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sub-configurations
    pricing: PricingConfig = Field(default_factory=PricingConfig)
    squeeth: SqueethConfig = Field(default_factory=SqueethConfig)
    numerics: NumericsConfig = Field(default_factory=NumericsConfig)
    scenario: ScenarioConfig = Field(default_factory=ScenarioConfig)

    # Paths
    project_root: Path = Path(__file__).parent.parent

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None


# Global settings instance
settings = Settings()
