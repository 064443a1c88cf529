"""Diversification metrics for portfolio correlation analysis.

This module scores how diversified a set of holdings is from the mean
absolute pairwise correlation of their returns, and classifies pairs whose
correlation crosses the configured thresholds.
"""
import logging

import numpy as np
from numpy.typing import NDArray

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.models.correlation import CorrelatedPair
from portfolio_analytics.models.enums import DiversificationRating

logger = logging.getLogger(__name__)

# (minimum score, rating), highest band first
RATING_BANDS: tuple[tuple[float, DiversificationRating], ...] = (
    (80.0, DiversificationRating.EXCELLENT),
    (60.0, DiversificationRating.GOOD),
    (40.0, DiversificationRating.MODERATE),
    (20.0, DiversificationRating.POOR),
)


def mean_abs_off_diagonal(matrix: NDArray[np.float64]) -> float:
    """Mean absolute correlation over the upper triangle (excluding diagonal).

    Args:
        matrix: Square correlation matrix

    Returns:
        Mean |correlation| over all unordered pairs, 0 for fewer than 2 assets
    """
    n = matrix.shape[0]
    if n < 2:
        return 0.0
    upper = matrix[np.triu_indices(n, k=1)]
    return float(np.abs(upper).mean())


def calculate_diversification_score(matrix: NDArray[np.float64]) -> float:
    """Score diversification on a 0-100 scale.

    Formula: clamp(0, 100, (1 - mean|offdiag corr|) * 100)

    Args:
        matrix: Square correlation matrix

    Returns:
        Score in [0, 100]; 100 means pairwise uncorrelated holdings

    Examples:
        >>> calculate_diversification_score(np.eye(2))
        100.0
        >>> calculate_diversification_score(np.ones((2, 2)))
        0.0
    """
    score = (1.0 - mean_abs_off_diagonal(matrix)) * 100.0
    return float(min(100.0, max(0.0, score)))


def rate_diversification(score: float) -> DiversificationRating:
    """Map a diversification score onto its rating band.

    Examples:
        >>> rate_diversification(85.0).value
        'Excellent'
        >>> rate_diversification(19.9).value
        'Very Poor'
    """
    for threshold, rating in RATING_BANDS:
        if score >= threshold:
            return rating
    return DiversificationRating.VERY_POOR


def classify_pairs(
    tickers: list[str],
    names: list[str],
    matrix: NDArray[np.float64],
    settings: AnalyticsSettings,
) -> tuple[list[CorrelatedPair], list[CorrelatedPair]]:
    """Split pairs into highly and negatively correlated groups.

    Highly correlated pairs are sorted by correlation descending, negatively
    correlated pairs ascending (strongest hedge first). Pairs are visited in
    matrix order, so ties keep that order.

    Args:
        tickers: Matrix row/column order
        names: Display names aligned with ``tickers``
        matrix: Symmetric correlation matrix
        settings: Classification thresholds

    Returns:
        Tuple of (highly correlated, negatively correlated) pairs
    """
    high: list[CorrelatedPair] = []
    negative: list[CorrelatedPair] = []
    n = len(tickers)
    for i in range(n):
        for j in range(i + 1, n):
            corr = float(matrix[i, j])
            if corr >= settings.high_correlation_threshold:
                level = "Very High" if corr >= settings.very_high_correlation_threshold else "High"
                high.append(CorrelatedPair(tickers[i], tickers[j], names[i], names[j], corr, level))
            if corr <= settings.negative_correlation_threshold:
                level = "Strong Hedge" if corr <= settings.strong_hedge_threshold else "Moderate Hedge"
                negative.append(
                    CorrelatedPair(tickers[i], tickers[j], names[i], names[j], corr, level)
                )

    high.sort(key=lambda pair: pair.correlation, reverse=True)
    negative.sort(key=lambda pair: pair.correlation)
    logger.debug("Classified %d high and %d negative pairs", len(high), len(negative))
    return high, negative
