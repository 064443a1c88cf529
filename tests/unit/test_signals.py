"""
Unit tests for live signal rules, ranking and tax-loss harvesting.
"""

import numpy as np
import pytest

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.io.memory import InMemoryMarketData
from portfolio_analytics.models.core import HoldingSnapshot
from portfolio_analytics.models.enums import AssetClass, SignalAction
from portfolio_analytics.signals.generator import (
    RSI_SOURCE,
    SMA_SOURCE,
    STRONG_HARVEST_SUGGESTION,
    SignalGenerator,
    rank_signals,
    rsi_signal,
    sma_crossover_signal,
    tax_loss_candidate,
)


pytestmark = pytest.mark.unit

HOLDING = HoldingSnapshot("AAA", 10, purchase_price=100.0, name="Alpha Corp")


class TestSmaCrossoverSignal:
    """Test suite for the 20/50 SMA signal rule."""

    def test_golden_cross(self):
        closes = np.array([100.0] * 59 + [110.0])

        signal = sma_crossover_signal(HOLDING, closes)

        assert signal.action is SignalAction.BUY
        assert signal.strategy_source == SMA_SOURCE
        assert signal.confidence == 0.75
        assert signal.target_price == pytest.approx(121.0)
        assert signal.stop_loss == pytest.approx(104.5)

    def test_death_cross(self):
        closes = np.array([100.0] * 59 + [90.0])

        signal = sma_crossover_signal(HOLDING, closes)

        assert signal.action is SignalAction.SELL
        assert signal.confidence == 0.70
        assert signal.target_price == pytest.approx(81.0)
        assert signal.stop_loss == pytest.approx(92.7)

    def test_trend_hold(self):
        signal = sma_crossover_signal(HOLDING, np.linspace(50.0, 110.0, 60))

        assert signal.action is SignalAction.HOLD
        assert signal.target_price is None

    def test_needs_50_closes(self):
        assert sma_crossover_signal(HOLDING, np.linspace(50.0, 110.0, 49)) is None

    def test_flat_prices_abstain(self):
        assert sma_crossover_signal(HOLDING, np.full(60, 100.0)) is None


class TestRsiSignal:
    """Test suite for the 14-period RSI signal rule."""

    def test_oversold(self):
        signal = rsi_signal(HOLDING, np.linspace(100.0, 70.0, 30))

        assert signal.action is SignalAction.BUY
        assert signal.strategy_source == RSI_SOURCE
        assert signal.rationale.startswith("RSI at 0.0")

    def test_overbought(self):
        signal = rsi_signal(HOLDING, np.linspace(70.0, 100.0, 30))

        assert signal.action is SignalAction.SELL
        assert signal.confidence == 0.65

    def test_needs_20_closes(self):
        assert rsi_signal(HOLDING, np.linspace(100.0, 70.0, 19)) is None


class TestRanking:
    """Test suite for signal ordering."""

    def test_buy_sell_hold_then_confidence(self):
        up = np.linspace(50.0, 110.0, 60)
        hold = sma_crossover_signal(HOLDING, up)
        sell = rsi_signal(HOLDING, up)
        buy_rsi = rsi_signal(HOLDING, np.linspace(100.0, 70.0, 30))
        buy_sma = sma_crossover_signal(HOLDING, np.array([100.0] * 59 + [110.0]))

        ranked = rank_signals([hold, sell, buy_rsi, buy_sma])

        assert ranked == [buy_sma, buy_rsi, sell, hold]


class TestTaxLossCandidate:
    """Test suite for tax-loss harvesting rules."""

    def test_qualifying_loss(self):
        candidate = tax_loss_candidate(HOLDING, 90.0)

        assert candidate.unrealized_loss == pytest.approx(-100.0)
        assert candidate.unrealized_loss_pct == pytest.approx(-10.0)
        assert not candidate.strong_candidate

    def test_small_loss_does_not_qualify(self):
        assert tax_loss_candidate(HOLDING, 97.0) is None

    def test_threshold_is_inclusive(self):
        assert tax_loss_candidate(HOLDING, 95.0) is not None

    def test_strong_candidate(self):
        candidate = tax_loss_candidate(HOLDING, 80.0)

        assert candidate.strong_candidate
        assert candidate.suggestion == STRONG_HARVEST_SUGGESTION

    def test_gain_or_missing_price(self):
        assert tax_loss_candidate(HOLDING, 120.0) is None
        assert tax_loss_candidate(HOLDING, None) is None
        assert tax_loss_candidate(HoldingSnapshot("X", 1), 5.0) is None


class TestSignalGenerator:
    """Test suite for portfolio-level signal generation."""

    def _data(self, make_series):
        data = InMemoryMarketData()
        data.add_prices(make_series("UP", np.linspace(50.0, 110.0, 60)))
        data.add_prices(make_series("DOWN", np.linspace(100.0, 70.0, 60)))
        data.add_prices(make_series("SHORT", np.linspace(100.0, 70.0, 10)))
        return data

    def test_signals_and_candidates(self, make_series, as_of):
        data = self._data(make_series)
        data.set_quote("SHORT", 60.0)
        holdings = [
            HoldingSnapshot("UP", 5, purchase_price=40.0),
            HoldingSnapshot("DOWN", 5, purchase_price=80.0),
            HoldingSnapshot("SHORT", 5, purchase_price=100.0),
        ]

        result = SignalGenerator(data, data).generate("p1", holdings, as_of=as_of)

        assert [(s.ticker, s.action) for s in result.signals] == [
            ("DOWN", SignalAction.BUY),
            ("UP", SignalAction.SELL),
            ("UP", SignalAction.HOLD),
        ]
        assert [c.ticker for c in result.tax_loss_candidates] == ["SHORT", "DOWN"]
        assert result.tax_loss_candidates[0].current_price == 60.0
        assert result.tax_loss_candidates[1].current_price == pytest.approx(70.0)

    def test_non_equity_holdings_only_checked_for_tax_loss(self, make_series, as_of):
        data = self._data(make_series)
        holdings = [
            HoldingSnapshot("DOWN", 1, purchase_price=100.0, asset_class=AssetClass.BOND, current_price=90.0),
            HoldingSnapshot("", 1, purchase_price=100.0, asset_class=AssetClass.CASH, current_price=50.0),
        ]

        result = SignalGenerator(data).generate("p1", holdings, as_of=as_of)

        assert result.signals == ()
        assert [c.current_price for c in result.tax_loss_candidates] == [50.0, 90.0]

    def test_minimum_history_setting(self, make_series, as_of):
        data = self._data(make_series)
        settings = AnalyticsSettings(min_signal_history=61)

        result = SignalGenerator(data, settings=settings).generate(
            "p1", [HoldingSnapshot("UP", 1)], as_of=as_of
        )

        assert result.signals == ()
