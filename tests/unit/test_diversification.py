"""
Unit tests for diversification scoring, pair classification, rolling
correlations and hedge suggestions.
"""

import numpy as np
import pytest

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.models.core import HoldingSnapshot
from portfolio_analytics.models.enums import CorrelationTrend, DiversificationRating
from portfolio_analytics.portfolio.correlation_service import (
    correlation_matrix,
    rolling_correlation,
    top_pairs,
)
from portfolio_analytics.portfolio.diversification import (
    calculate_diversification_score,
    classify_pairs,
    rate_diversification,
)
from portfolio_analytics.portfolio.hedging import PORTFOLIO_TICKER, suggest_hedges


pytestmark = pytest.mark.unit


def _matrix(off_diagonal: float, n: int = 3) -> np.ndarray:
    matrix = np.full((n, n), off_diagonal)
    np.fill_diagonal(matrix, 1.0)
    return matrix


class TestDiversificationScore:
    """Test suite for the 0-100 diversification score."""

    def test_uncorrelated_pair_scores_100(self):
        assert calculate_diversification_score(np.eye(2)) == 100.0

    def test_fully_correlated_scores_0(self):
        assert calculate_diversification_score(np.ones((3, 3))) == 0.0

    def test_negative_correlation_counts_by_magnitude(self):
        assert calculate_diversification_score(_matrix(-0.5)) == pytest.approx(50.0)

    def test_monotonic_in_mean_abs_correlation(self):
        scores = [calculate_diversification_score(_matrix(c)) for c in (0.1, 0.3, 0.6, 0.9)]

        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize(
        ("score", "rating"),
        [
            (100.0, DiversificationRating.EXCELLENT),
            (80.0, DiversificationRating.EXCELLENT),
            (79.9, DiversificationRating.GOOD),
            (60.0, DiversificationRating.GOOD),
            (45.0, DiversificationRating.MODERATE),
            (20.0, DiversificationRating.POOR),
            (0.0, DiversificationRating.VERY_POOR),
        ],
    )
    def test_rating_bands(self, score, rating):
        assert rate_diversification(score) is rating


class TestClassifyPairs:
    """Test suite for high and negative pair classification."""

    def test_levels_and_ordering(self):
        tickers = ["A", "B", "C", "D"]
        matrix = np.eye(4)
        for (i, j), corr in {(0, 1): 0.75, (0, 2): 0.95, (1, 3): -0.8, (2, 3): -0.4}.items():
            matrix[i, j] = matrix[j, i] = corr

        high, negative = classify_pairs(tickers, tickers, matrix, AnalyticsSettings())

        assert [(p.ticker_1, p.ticker_2, p.risk_level) for p in high] == [
            ("A", "C", "Very High"),
            ("A", "B", "High"),
        ]
        assert [(p.ticker_1, p.ticker_2, p.risk_level) for p in negative] == [
            ("B", "D", "Strong Hedge"),
            ("C", "D", "Moderate Hedge"),
        ]

    def test_boundaries_are_inclusive(self):
        matrix = _matrix(0.70, n=2)
        high, _ = classify_pairs(["A", "B"], ["A", "B"], matrix, AnalyticsSettings())

        assert len(high) == 1

    def test_custom_thresholds(self):
        settings = AnalyticsSettings(high_correlation_threshold=0.5, very_high_correlation_threshold=0.6)
        high, _ = classify_pairs(["A", "B"], ["A", "B"], _matrix(0.55, n=2), settings)

        assert high[0].risk_level == "High"


class TestCorrelationMatrix:
    """Test suite for the correlation matrix and rolling windows."""

    def test_symmetric_with_unit_diagonal(self, walk):
        series = [np.diff(walk(60, seed=s)) for s in (1, 2, 3)]

        matrix = correlation_matrix(series)

        assert np.allclose(matrix, matrix.T)
        assert np.allclose(np.diag(matrix), 1.0)
        assert np.all(np.abs(matrix) <= 1.0)

    def test_rolling_windows_need_history(self):
        rng = np.random.default_rng(3)
        returns = rng.standard_normal(50)

        result = rolling_correlation("A", "B", returns, returns * 2.0)

        assert result.correlation_30d == pytest.approx(1.0)
        assert result.correlation_90d is None
        assert result.correlation_1y == pytest.approx(1.0)
        assert result.trend is CorrelationTrend.STABLE
        assert result.key == "A/B"

    def test_short_history_trend_not_available(self):
        returns = np.array([0.01, -0.02, 0.03])

        result = rolling_correlation("A", "B", returns, returns)

        assert result.correlation_30d is None
        assert result.trend is CorrelationTrend.NOT_AVAILABLE

    def test_increasing_trend(self):
        rng = np.random.default_rng(8)
        a = rng.standard_normal(252)
        b = np.concatenate([-a[:222], a[222:]])

        result = rolling_correlation("A", "B", a, b)

        assert result.trend is CorrelationTrend.INCREASING

    def test_top_pairs_by_magnitude(self):
        matrix = np.eye(3)
        matrix[0, 1] = matrix[1, 0] = 0.2
        matrix[0, 2] = matrix[2, 0] = -0.9
        matrix[1, 2] = matrix[2, 1] = 0.5

        assert top_pairs(matrix, 2) == [(0, 2), (1, 2)]


class TestHedgeSuggestions:
    """Test suite for hedge suggestion tables."""

    def test_sector_put_and_portfolio_hedges(self):
        holdings = [
            HoldingSnapshot("AAA", 1, sector="Technology", name="Alpha"),
            HoldingSnapshot("ZZZ", 1, sector="Unlisted"),
        ]

        hedges = suggest_hedges(holdings)

        assert [(h.holding_ticker, h.instrument) for h in hedges] == [
            ("AAA", "SH"),
            ("AAA", "AAA PUT"),
            ("ZZZ", "ZZZ PUT"),
            (PORTFOLIO_TICKER, "VXX"),
            (PORTFOLIO_TICKER, "GLD"),
            (PORTFOLIO_TICKER, "TLT"),
        ]
        assert hedges[0].holding_name == "Alpha"
        assert hedges[1].expected_correlation == -1.0

    def test_no_holdings_no_hedges(self):
        assert suggest_hedges([]) == []
