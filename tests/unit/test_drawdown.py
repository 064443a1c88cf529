"""
Unit tests for drawdown computation.
"""

import numpy as np
import pytest

from portfolio_analytics.backtest.drawdown import (
    compute_drawdown_curve,
    compute_max_drawdown,
    value_series_from_returns,
)


pytestmark = pytest.mark.unit


class TestMaxDrawdown:
    """Test suite for peak-to-trough drawdown."""

    def test_known_path(self):
        max_dd, peak, trough = compute_max_drawdown([100.0, 120.0, 90.0, 95.0])

        assert max_dd == pytest.approx(0.25)
        assert (peak, trough) == (1, 2)

    def test_rising_series_has_no_drawdown(self):
        assert compute_max_drawdown([1.0, 2.0, 3.0]) == (0.0, 0, 0)

    def test_empty_series(self):
        assert compute_max_drawdown([]) == (0.0, 0, 0)
        assert compute_drawdown_curve([]).size == 0

    def test_curve_is_bounded(self, walk):
        curve = compute_drawdown_curve(walk(250, vol=0.03))

        assert np.all(curve >= 0.0)
        assert np.all(curve <= 1.0)

    def test_compounded_values(self):
        values = value_series_from_returns([0.1, -0.5])

        assert values.tolist() == pytest.approx([1.0, 1.1, 0.55])
        assert compute_max_drawdown(values)[0] == pytest.approx(0.5)
