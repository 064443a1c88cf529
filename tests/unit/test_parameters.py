"""
Unit tests for analytics settings and strategy parameter loading.
"""

import logging

import pytest
from pydantic import ValidationError

from portfolio_analytics.config.parameters import (
    AnalyticsSettings,
    MeanReversionParameters,
    MomentumParameters,
    SmaCrossoverParameters,
    load_settings,
    load_strategy_parameters,
)


pytestmark = pytest.mark.unit


class TestAnalyticsSettings:
    """Test suite for engine-wide settings validation."""

    def test_defaults(self):
        settings = load_settings()

        assert settings.risk_free_rate == 0.05
        assert settings.trading_days_per_year == 252
        assert settings.rolling_windows == (30, 90, 252)
        assert settings.daily_risk_free_rate == pytest.approx(0.05 / 252)

    def test_overrides(self):
        settings = load_settings({"benchmark_ticker": "QQQ", "monte_carlo_seed": 7})

        assert settings.benchmark_ticker == "QQQ"
        assert settings.monte_carlo_seed == 7

    def test_very_high_band_must_exceed_high(self):
        with pytest.raises(ValidationError):
            AnalyticsSettings(high_correlation_threshold=0.8, very_high_correlation_threshold=0.75)

    def test_strong_hedge_below_negative_band(self):
        with pytest.raises(ValidationError):
            AnalyticsSettings(negative_correlation_threshold=-0.5, strong_hedge_threshold=-0.4)

    def test_rolling_windows_need_two_returns(self):
        with pytest.raises(ValidationError):
            AnalyticsSettings(rolling_windows=(1, 90, 252))

    def test_risk_free_rate_range(self):
        with pytest.raises(ValidationError):
            AnalyticsSettings(risk_free_rate=-0.01)


class TestStrategyParameters:
    """Test suite for per-field parameter fallback."""

    def test_camel_case_keys(self):
        params = load_strategy_parameters(SmaCrossoverParameters, {"shortPeriod": 5, "longPeriod": "30"})

        assert (params.short_period, params.long_period) == (5, 30)

    def test_snake_case_keys(self):
        params = load_strategy_parameters(MeanReversionParameters, {"std_dev": 1.5})

        assert params.std_dev == 1.5

    def test_invalid_value_falls_back_alone(self, caplog):
        raw = {"rsiPeriod": "abc", "buyThreshold": 25}

        with caplog.at_level(logging.WARNING):
            params = load_strategy_parameters(MomentumParameters, raw)

        assert params.rsi_period == 14
        assert params.buy_threshold == 25
        assert "rsiPeriod" in caplog.text

    def test_out_of_range_value_uses_default(self):
        params = load_strategy_parameters(SmaCrossoverParameters, {"shortPeriod": -3})

        assert params.short_period == 20

    def test_unknown_keys_ignored(self):
        params = load_strategy_parameters(SmaCrossoverParameters, {"minYield": 3.0})

        assert params == SmaCrossoverParameters()

    def test_as_dict_uses_camel_case(self):
        assert MomentumParameters().as_dict() == {
            "rsiPeriod": 14,
            "buyThreshold": 30.0,
            "sellThreshold": 70.0,
        }

    def test_none_gives_defaults(self):
        assert load_strategy_parameters(MeanReversionParameters, None).period == 20
