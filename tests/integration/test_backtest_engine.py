"""
Integration tests for the single-ticker backtest engine.
"""

import numpy as np
import pytest

from portfolio_analytics.backtest.drawdown import compute_max_drawdown
from portfolio_analytics.backtest.engine import BacktestEngine
from portfolio_analytics.backtest.metrics import cagr_pct
from portfolio_analytics.config.parameters import AnalyticsSettings, SmaCrossoverParameters
from portfolio_analytics.io.memory import InMemoryMarketData
from portfolio_analytics.models.exceptions import InputError
from portfolio_analytics.strategy.registry import get_available_strategies


pytestmark = pytest.mark.integration


@pytest.fixture()
def engine(market_data):
    return BacktestEngine(market_data)


class TestBacktestResult:
    """Test suite for aggregate backtest figures."""

    @pytest.mark.parametrize("strategy_id", ["sma_crossover", "mean_reversion", "momentum", "dca"])
    def test_every_rule_runs(self, engine, as_of, strategy_id):
        result = engine.run(strategy_id, "aaa", as_of=as_of)

        assert result.ticker == "AAA"
        assert result.price_points == 120
        assert result.winning_trades + result.losing_trades == result.total_trades
        assert 0.0 <= result.win_rate_pct <= 100.0
        assert result.notes == ()

    def test_ticker_performance_figures(self, engine, market_data, as_of):
        result = engine.run("sma_crossover", "AAA", lookback_days=365, as_of=as_of)
        closes = market_data.get_closing_prices("AAA", as_of.replace(year=2024), as_of).closes

        total = (closes[-1] - closes[0]) / closes[0] * 100.0
        assert result.total_return_pct == pytest.approx(total)
        assert result.cagr_pct == pytest.approx(cagr_pct(total, 365 / 252))
        assert result.max_drawdown_pct == pytest.approx(compute_max_drawdown(closes)[0] * 100.0)

    def test_benchmark_alpha(self, engine, market_data, as_of):
        result = engine.run("momentum", "BBB", as_of=as_of)
        spy = market_data.get_closing_prices("SPY", as_of.replace(year=2024), as_of).closes

        assert result.benchmark_return_pct == pytest.approx((spy[-1] / spy[0] - 1) * 100.0)
        assert result.alpha_pct == pytest.approx(result.total_return_pct - result.benchmark_return_pct)

    def test_without_benchmark(self, market_data, as_of):
        engine = BacktestEngine(market_data, AnalyticsSettings(benchmark_ticker="QQQ"))

        result = engine.run("momentum", "BBB", as_of=as_of)

        assert result.benchmark_return_pct is None
        assert result.alpha_pct is None

    def test_parameters_reported_in_camel_case(self, engine, as_of):
        result = engine.run("sma_crossover", "AAA", params={"shortPeriod": "10", "longPeriod": 30}, as_of=as_of)

        assert result.parameters == {"shortPeriod": 10, "longPeriod": 30}

    def test_invalid_parameter_uses_default(self, engine, as_of):
        result = engine.run("momentum", "AAA", params={"rsiPeriod": "abc"}, as_of=as_of)

        assert result.parameters["rsiPeriod"] == 14

    def test_deterministic(self, engine, as_of):
        assert engine.run("mean_reversion", "CCC", as_of=as_of) == engine.run(
            "mean_reversion", "CCC", as_of=as_of
        )

    def test_constant_prices_have_no_ratios(self, make_series, as_of):
        data = InMemoryMarketData()
        data.add_prices(make_series("FLAT", np.full(60, 10.0)))

        result = BacktestEngine(data).run("sma_crossover", "FLAT", as_of=as_of)

        assert result.sharpe_ratio is None
        assert result.total_return_pct == 0.0
        assert result.total_trades == 0
        assert result.profit_factor == 0.0


class TestStrategyFallback:
    """Test suite for catalogue strategies without a rule of their own."""

    @pytest.mark.parametrize("strategy_id", ["dividend_yield", "risk_parity", "unheard_of"])
    def test_runs_sma_crossover_with_defaults(self, engine, as_of, strategy_id):
        result = engine.run(strategy_id, "AAA", params={"shortPeriod": 5}, as_of=as_of)
        baseline = engine.run("sma_crossover", "AAA", as_of=as_of)

        assert result.strategy_id == strategy_id
        assert result.parameters == SmaCrossoverParameters().as_dict()
        assert result.trades == baseline.trades
        assert result.notes[0].startswith(f"No backtest rule for {strategy_id}")

    def test_catalogue_name_is_reported(self, engine, as_of):
        names = {s.id: s.name for s in get_available_strategies()}

        assert engine.run("risk_parity", "AAA", as_of=as_of).strategy_name == names["risk_parity"]


class TestBacktestErrors:
    """Test suite for request validation."""

    def test_insufficient_history(self, engine, as_of):
        with pytest.raises(InputError, match=r"Insufficient price data for AAA \(\d+ records\)"):
            engine.run("sma_crossover", "AAA", lookback_days=30, as_of=as_of)

    def test_unknown_ticker(self, engine, as_of):
        with pytest.raises(InputError, match=r"\(0 records\)"):
            engine.run("sma_crossover", "NOPE", as_of=as_of)

    def test_blank_ticker(self, engine):
        with pytest.raises(InputError, match="Ticker is required"):
            engine.run("sma_crossover", " ")

    def test_non_positive_lookback(self, engine, as_of):
        with pytest.raises(InputError, match="Lookback"):
            engine.run("sma_crossover", "AAA", lookback_days=0, as_of=as_of)
