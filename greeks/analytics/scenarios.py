"""
Scenario analysis: revalue a single instrument under spot and volatility shocks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np
import pandas as pd
from loguru import logger

from greeks.config import settings
from greeks.data.models import (
    ConcentratedLiquidityParameters,
    OptionParameters,
    PowerPerpetualParameters,
)
from greeks.analytics.pricing import OptionPricer
from greeks.analytics.squeeks import SqueeksCalculator

InstrumentParameters = Union[
    OptionParameters,
    PowerPerpetualParameters,
    ConcentratedLiquidityParameters,
]

# Name of the underlying price field on each parameter record
_SPOT_FIELDS = {
    OptionParameters: "spot",
    PowerPerpetualParameters: "underlying_price",
    ConcentratedLiquidityParameters: "price",
}


class ScenarioType(str, Enum):
    """Types of stress scenarios."""
    SPOT_UP = "spot_up"
    SPOT_DOWN = "spot_down"
    VOL_UP = "vol_up"
    VOL_DOWN = "vol_down"
    SPOT_DOWN_VOL_UP = "spot_down_vol_up"
    CUSTOM = "custom"


@dataclass
class ScenarioResult:
    """Result of a stress scenario."""

    name: str
    scenario_type: ScenarioType
    spot_change_pct: float
    iv_change_points: float
    pnl: float
    new_value: float
    new_delta: float
    new_gamma: float
    new_vega: float

    def __str__(self) -> str:
        return (
            f"{self.name}: Spot {self.spot_change_pct:+.1f}%, "
            f"IV {self.iv_change_points:+.1f}pts -> "
            f"P&L {self.pnl:+,.4f}"
        )


class ScenarioEngine:
    """Engine for running stress scenarios on options and squeeks positions."""

    def __init__(self):
        self.config = settings.scenario
        self.pricer = OptionPricer()
        self.squeeks = SqueeksCalculator()
        self._standard_scenarios = self._build_standard_scenarios()

    def _build_standard_scenarios(self) -> list[dict]:
        """Build standard stress scenarios."""
        spot_shock = self.config.spot_shock_pct
        iv_shock = self.config.iv_shock_points

        return [
            {"name": "Spot up", "type": ScenarioType.SPOT_UP, "spot_pct": spot_shock, "iv_pts": 0},
            {"name": "Spot down", "type": ScenarioType.SPOT_DOWN, "spot_pct": -spot_shock, "iv_pts": 0},
            {"name": "Vol up", "type": ScenarioType.VOL_UP, "spot_pct": 0, "iv_pts": iv_shock},
            {"name": "Vol down", "type": ScenarioType.VOL_DOWN, "spot_pct": 0, "iv_pts": -iv_shock},
            {
                "name": "Crash",
                "type": ScenarioType.SPOT_DOWN_VOL_UP,
                "spot_pct": -2 * spot_shock,
                "iv_pts": 2 * iv_shock,
            },
        ]

    def evaluate(self, params: InstrumentParameters) -> dict[str, float]:
        """Value and first sensitivities of any supported instrument."""
        if isinstance(params, OptionParameters):
            result = self.pricer.price_option(params)
            return {
                "value": result.price,
                "delta": result.delta,
                "gamma": result.gamma,
                "theta": result.theta,
                "vega": result.vega,
            }

        result = self.squeeks.all_squeeks(params)
        return {
            "value": result.value,
            "delta": result.delta,
            "gamma": result.gamma,
            "theta": result.theta,
            "vega": result.vega,
        }

    @staticmethod
    def shock(
        params: InstrumentParameters,
        spot_change_pct: float,
        iv_change_points: float,
    ) -> InstrumentParameters:
        """Copy of params with spot moved by a percentage and IV by points."""
        spot_field = _SPOT_FIELDS.get(type(params), "spot")
        new_spot = getattr(params, spot_field) * (1 + spot_change_pct / 100)
        # Volatility floored at zero
        new_vol = max(params.volatility + iv_change_points / 100, 0.0)
        return params.replace(**{spot_field: new_spot, "volatility": new_vol})

    def run_scenario(
        self,
        params: InstrumentParameters,
        spot_change_pct: float,
        iv_change_points: float,
        scenario_name: str = "Custom",
        scenario_type: ScenarioType = ScenarioType.CUSTOM,
    ) -> ScenarioResult:
        """
        Run a single stress scenario.

        Args:
            params: Instrument parameters
            spot_change_pct: Percentage change in spot price
            iv_change_points: Absolute change in IV (in percentage points)
            scenario_name: Name of the scenario
            scenario_type: Type of scenario

        Returns:
            ScenarioResult with P&L and new Greeks
        """
        current = self.evaluate(params)
        shocked = self.evaluate(self.shock(params, spot_change_pct, iv_change_points))

        return ScenarioResult(
            name=scenario_name,
            scenario_type=scenario_type,
            spot_change_pct=spot_change_pct,
            iv_change_points=iv_change_points,
            pnl=shocked["value"] - current["value"],
            new_value=shocked["value"],
            new_delta=shocked["delta"],
            new_gamma=shocked["gamma"],
            new_vega=shocked["vega"],
        )

    def run_stress_test(self, params: InstrumentParameters) -> list[ScenarioResult]:
        """Run all standard scenarios."""
        results = [
            self.run_scenario(
                params,
                spot_change_pct=scenario["spot_pct"],
                iv_change_points=scenario["iv_pts"],
                scenario_name=scenario["name"],
                scenario_type=scenario["type"],
            )
            for scenario in self._standard_scenarios
        ]

        worst = min(results, key=lambda r: r.pnl)
        logger.debug(f"Stress test complete, worst scenario: {worst}")
        return results

    def spot_ladder(
        self,
        params: InstrumentParameters,
        spot_changes_pct: Optional[np.ndarray] = None,
    ) -> pd.DataFrame:
        """
        Revalue the instrument across a range of spot moves.

        Returns:
            DataFrame indexed by spot change (percent) with the shocked spot,
            value, P&L and Greeks
        """
        if spot_changes_pct is None:
            width = self.config.ladder_range_pct
            spot_changes_pct = np.linspace(-width, width, self.config.ladder_steps)

        spot_field = _SPOT_FIELDS.get(type(params), "spot")
        base_value = self.evaluate(params)["value"]

        rows = []
        for change in spot_changes_pct:
            shocked = self.shock(params, float(change), 0.0)
            row = self.evaluate(shocked)
            row["spot"] = getattr(shocked, spot_field)
            row["pnl"] = row["value"] - base_value
            rows.append(row)

        frame = pd.DataFrame(rows, index=pd.Index(np.asarray(spot_changes_pct, dtype=float), name="spot_change_pct"))
        return frame[["spot", "value", "pnl", "delta", "gamma", "theta", "vega"]]
