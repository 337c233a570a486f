"""
Tests for helpers and logging setup.
"""

import sys

import pytest
from loguru import logger

from greeks.config import settings
from greeks.data.models import Greek
from greeks.utils.helpers import (
    annualize_volatility,
    days_to_years,
    format_currency,
    format_greek,
    format_percent,
    implied_volatility_from_funding,
)
from greeks.utils.logging import setup_logging


class TestHelpers:
    """Unit conversion and formatting."""

    def test_days_to_years(self):
        assert days_to_years(365) == 1.0
        assert days_to_years(126, days_per_year=252) == 0.5

    def test_annualize_volatility(self):
        assert annualize_volatility(0.05, periods_per_year=365) == pytest.approx(0.05 * 365**0.5)

    def test_implied_volatility_from_funding(self):
        daily_funding = 0.9**2 / 365
        assert implied_volatility_from_funding(daily_funding) == pytest.approx(0.9)

    def test_formatting(self):
        assert format_currency(-1234.5) == "-$1,234.50"
        assert format_percent(0.5051) == "50.51%"
        assert format_greek(0.0001663, Greek.GAMMA) == "+0.000166"
        assert format_greek(-0.0703, "theta") == "-0.0703"


class TestLogging:
    """loguru sink configuration."""

    @pytest.fixture(autouse=True)
    def restore_logger(self):
        yield
        logger.remove()
        logger.add(sys.stderr)

    def test_file_sink(self, tmp_path, monkeypatch):
        log_file = tmp_path / "logs" / "greeks.log"
        monkeypatch.setattr(settings, "log_file", log_file)

        setup_logging()
        logger.warning("lambda undefined")
        logger.remove()

        assert "lambda undefined" in log_file.read_text()
