"""
Integration tests for the risk analytics engine.

Runs the engine end to end over the in-memory collaborator: price loading,
weighting, VaR, ratios, drawdown, stress scenarios and Monte Carlo.
"""

from datetime import timedelta

import numpy as np
import pytest

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.io.memory import InMemoryMarketData
from portfolio_analytics.models.core import HoldingSnapshot
from portfolio_analytics.models.exceptions import InputError
from portfolio_analytics.risk.engine import RiskAnalyticsEngine
from portfolio_analytics.timeseries.returns import simple_returns


pytestmark = pytest.mark.integration


@pytest.fixture()
def holdings(market_data):
    return market_data.get_holdings("core")


@pytest.fixture()
def engine(market_data):
    return RiskAnalyticsEngine(market_data, market_data)


class TestRiskReport:
    """Test suite for the full risk report."""

    def test_report_shape(self, engine, holdings, as_of):
        report = engine.compute("core", holdings, as_of=as_of)

        assert report.observations == 119
        assert sum(report.weights.values()) == pytest.approx(1.0)
        assert set(report.weights) == {"AAA", "BBB", "CCC"}
        assert len(report.stress_tests) == 5
        assert report.monte_carlo.simulations == 10_000
        assert report.has_benchmark
        assert len(report.holding_betas) == 3
        assert report.excluded_tickers == ()

    def test_risk_figures_are_non_negative(self, engine, holdings, as_of):
        report = engine.compute("core", holdings, confidence_level=0.99, as_of=as_of)

        assert report.var.historical >= 0
        assert report.var.parametric >= 0
        assert report.var.monte_carlo >= 0
        assert report.cvar_99 >= report.cvar_95 >= 0
        assert 0.0 <= report.max_drawdown.max_drawdown <= 1.0

    def test_portfolio_value_uses_last_close(self, engine, holdings, market_data, as_of):
        report = engine.compute("core", holdings, as_of=as_of)

        expected = sum(
            h.quantity * market_data.get_closing_prices(h.ticker, as_of, as_of).last_close
            for h in holdings
        )
        assert report.portfolio_value == pytest.approx(expected)

    def test_identical_requests_are_identical(self, engine, holdings, as_of):
        first = engine.compute("core", holdings, as_of=as_of)
        second = engine.compute("core", holdings, as_of=as_of)

        assert first == second

    def test_seed_override_changes_monte_carlo_only(self, engine, holdings, as_of):
        base = engine.compute("core", holdings, as_of=as_of)
        other = engine.compute("core", holdings, as_of=as_of, seed=7)

        assert other.var.historical == base.var.historical
        assert other.monte_carlo != base.monte_carlo

    def test_horizon_scales_historical_var(self, engine, holdings, as_of):
        one_day = engine.compute("core", holdings, horizon_days=1, as_of=as_of)
        four_day = engine.compute("core", holdings, horizon_days=4, as_of=as_of)

        assert four_day.var.historical == pytest.approx(2 * one_day.var.historical)
        assert four_day.var.parametric == pytest.approx(2 * one_day.var.parametric)

    def test_single_holding_beta_matches_holding(self, engine, market_data, as_of):
        report = engine.compute("solo", [HoldingSnapshot("AAA", 5)], as_of=as_of)

        assert report.weights == {"AAA": 1.0}
        assert report.portfolio_beta == pytest.approx(report.holding_betas[0].beta)
        aaa = market_data.get_closing_prices("AAA", as_of.replace(year=2024), as_of).closes
        assert report.daily_volatility == pytest.approx(np.std(simple_returns(aaa), ddof=1))


class TestRiskEdgeCases:
    """Test suite for exclusions, fallbacks and input errors."""

    def test_missing_history_is_excluded(self, engine, holdings, as_of):
        report = engine.compute("core", holdings + [HoldingSnapshot("NOPE", 3)], as_of=as_of)

        assert report.excluded_tickers == ("NOPE",)
        assert "NOPE" not in report.weights

    def test_duplicate_lots_are_merged(self, engine, as_of):
        lots = [HoldingSnapshot("AAA", 5), HoldingSnapshot("AAA", 5), HoldingSnapshot("BBB", 1)]
        merged = engine.compute("lots", lots, as_of=as_of)
        single = engine.compute("one", [HoldingSnapshot("AAA", 10), HoldingSnapshot("BBB", 1)], as_of=as_of)

        assert merged.weights == pytest.approx(single.weights)

    def test_foreign_currency_is_converted(self, market_data, as_of):
        market_data.set_exchange_rate("EUR", "USD", 1.1)
        engine = RiskAnalyticsEngine(market_data, market_data)

        usd = engine.compute("a", [HoldingSnapshot("AAA", 10)], as_of=as_of)
        eur = engine.compute("b", [HoldingSnapshot("AAA", 10, currency="EUR")], as_of=as_of)

        assert eur.portfolio_value == pytest.approx(usd.portfolio_value * 1.1)

    def test_quote_takes_precedence_over_close(self, market_data, as_of):
        market_data.set_quote("AAA", 250.0)
        engine = RiskAnalyticsEngine(market_data, market_data)

        report = engine.compute("a", [HoldingSnapshot("AAA", 2)], as_of=as_of)

        assert report.portfolio_value == pytest.approx(500.0)

    def test_no_benchmark_history(self, market_data, holdings, as_of):
        engine = RiskAnalyticsEngine(market_data, settings=AnalyticsSettings(benchmark_ticker="QQQ"))

        report = engine.compute("core", holdings, as_of=as_of)

        assert report.portfolio_beta is None
        assert report.alpha is None
        assert report.treynor_ratio is None
        assert report.holding_betas == ()
        assert report.stress_tests[0].estimated_loss_pct == pytest.approx(-56.8)

    def test_empty_portfolio(self, engine, as_of):
        with pytest.raises(InputError, match="Portfolio has no holdings"):
            engine.compute("empty", [], as_of=as_of)

    def test_no_usable_history(self, engine, as_of):
        with pytest.raises(InputError, match="Could not fetch historical prices"):
            engine.compute("ghost", [HoldingSnapshot("NOPE", 1)], as_of=as_of)

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"confidence_level": 1.0}, "Confidence level"),
            ({"confidence_level": 0.0}, "Confidence level"),
            ({"horizon_days": 0}, "Horizon"),
            ({"lookback_days": 1}, "Lookback"),
        ],
    )
    def test_invalid_parameters(self, engine, holdings, as_of, kwargs, message):
        with pytest.raises(InputError, match=message):
            engine.compute("core", holdings, as_of=as_of, **kwargs)


class TestDrawdownAndTreynor:
    """Test suite for drawdown dating and the Treynor ratio guard."""

    def test_drawdown_dates_offset_from_lookback_start(self, make_series, as_of):
        data = InMemoryMarketData()
        data.add_prices(make_series("DD", [100.0, 120.0, 90.0, 95.0]))
        engine = RiskAnalyticsEngine(data, data)

        report = engine.compute("dd", [HoldingSnapshot("DD", 1)], lookback_days=30, as_of=as_of)

        start = as_of - timedelta(days=30)
        assert report.max_drawdown.max_drawdown == pytest.approx(0.25)
        assert report.max_drawdown.peak_date == start + timedelta(days=1)
        assert report.max_drawdown.trough_date == start + timedelta(days=2)

    def test_zero_beta_omits_treynor(self, make_series, as_of):
        data = InMemoryMarketData()
        data.add_prices(make_series("ZIG", [100.0, 110.0, 99.0, 108.9, 98.01]))
        data.add_prices(make_series("SPY", [100.0, 110.0, 121.0, 108.9, 98.01]))
        engine = RiskAnalyticsEngine(data, data)

        report = engine.compute("zig", [HoldingSnapshot("ZIG", 1)], lookback_days=30, as_of=as_of)

        assert report.portfolio_beta == pytest.approx(0.0, abs=1e-9)
        assert report.alpha is not None
        assert report.treynor_ratio is None


class TestReportImmutability:
    """Test suite for read-only report collections."""

    def test_weights_are_read_only(self, engine, holdings, as_of):
        report = engine.compute("core", holdings, as_of=as_of)

        with pytest.raises(TypeError):
            report.weights["AAA"] = 1.0
