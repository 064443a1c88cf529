"""
Unit tests for backtest metrics aggregation.

Tests trade statistics, profit factor, CAGR and the annualized ratios,
including the zero-trade and zero-volatility cases.
"""

from datetime import date

import numpy as np
import pytest

from portfolio_analytics.backtest.metrics import (
    PROFIT_FACTOR_NO_LOSSES,
    annualized_sharpe,
    annualized_sortino,
    cagr_pct,
    compute_trade_stats,
    profit_factor,
)
from portfolio_analytics.models.backtest import TradeRecord


pytestmark = pytest.mark.unit

DAY = date(2025, 3, 3)


def _trade(return_pct: float) -> TradeRecord:
    entry = 100.0
    return TradeRecord(DAY, DAY, entry, entry * (1 + return_pct / 100.0), return_pct)


class TestTradeStats:
    """Test suite for win/loss statistics."""

    def test_zero_trades(self):
        stats = compute_trade_stats([])

        assert stats.winning_trades == 0
        assert stats.losing_trades == 0
        assert stats.win_rate_pct == 0.0
        assert stats.profit_factor == 0.0

    def test_mixed_trades(self):
        stats = compute_trade_stats([_trade(10.0), _trade(20.0), _trade(-5.0), _trade(-10.0)])

        assert stats.winning_trades == 2
        assert stats.losing_trades == 2
        assert stats.win_rate_pct == pytest.approx(50.0)
        assert stats.avg_win_pct == pytest.approx(15.0)
        assert stats.avg_loss_pct == pytest.approx(7.5)
        assert stats.profit_factor == pytest.approx(2.0)

    def test_flat_trade_counts_as_loss(self):
        stats = compute_trade_stats([_trade(0.0), _trade(4.0)])

        assert stats.losing_trades == 1
        assert stats.avg_loss_pct == 0.0
        assert stats.profit_factor == PROFIT_FACTOR_NO_LOSSES

    def test_wins_plus_losses_equal_total(self):
        trades = [_trade(r) for r in (3.0, -1.0, 0.0, 7.5, -2.2)]
        stats = compute_trade_stats(trades)

        assert stats.winning_trades + stats.losing_trades == len(trades)


class TestProfitFactorAndCagr:
    """Test suite for profit factor and CAGR edge cases."""

    def test_profit_factor_cases(self):
        assert profit_factor(10.0, 5.0) == 2.0
        assert profit_factor(10.0, 0.0) == 999.0
        assert profit_factor(0.0, 0.0) == 0.0

    def test_cagr(self):
        assert cagr_pct(21.0, 2.0) == pytest.approx(10.0)
        assert cagr_pct(10.0, 1.0) == pytest.approx(10.0)

    def test_cagr_degenerate(self):
        assert cagr_pct(15.0, 0.0) == 0.0
        assert cagr_pct(-100.0, 1.0) == 0.0


class TestRatios:
    """Test suite for annualized Sharpe and Sortino ratios."""

    def test_constant_returns_give_none(self):
        returns = np.full(30, 0.001)

        assert annualized_sharpe(returns, 0.05) is None
        assert annualized_sortino(returns, 0.05) is None

    def test_sharpe_sign_follows_excess_return(self, walk):
        prices = walk(300, drift=0.002, vol=0.01, seed=5)
        returns = np.diff(prices) / prices[:-1]

        assert annualized_sharpe(returns, 0.0) > 0
        assert annualized_sharpe(-returns, 0.0) < 0

    def test_sortino_uses_downside_only(self):
        returns = np.array([0.02, -0.01, 0.03, -0.02, 0.01])

        sortino = annualized_sortino(returns, 0.0)
        sharpe = annualized_sharpe(returns, 0.0)

        assert sortino is not None and sharpe is not None
        assert sortino > 0
