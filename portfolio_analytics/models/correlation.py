"""Correlation and hedging result entities.

This module defines the value objects returned by the correlation and
diversification engine.
"""
from dataclasses import dataclass, field

import numpy as np

from portfolio_analytics.models.enums import CorrelationTrend, DiversificationRating


@dataclass(frozen=True)
class CorrelatedPair:
    """A pair of holdings whose correlation crossed a classification threshold.

    Attributes:
        ticker_1: First ticker (matrix order)
        ticker_2: Second ticker (matrix order)
        name_1: Display name of the first holding
        name_2: Display name of the second holding
        correlation: Pearson correlation of daily returns
        risk_level: "Very High"/"High" or "Strong Hedge"/"Moderate Hedge"
    """

    ticker_1: str
    ticker_2: str
    name_1: str
    name_2: str
    correlation: float
    risk_level: str


@dataclass(frozen=True)
class HedgeSuggestion:
    """A suggested instrument for hedging one holding or the whole portfolio.

    Attributes:
        holding_ticker: Ticker being hedged, or "PORTFOLIO"
        holding_name: Display name of the hedged exposure
        hedge_type: "Inverse ETF", "Put Option", "Volatility" or "Uncorrelated Asset"
        instrument: Hedge instrument symbol
        description: Short explanation of the hedge
        expected_correlation: Configured correlation estimate (not derived from data)
    """

    holding_ticker: str
    holding_name: str
    hedge_type: str
    instrument: str
    description: str
    expected_correlation: float


@dataclass(frozen=True)
class RollingCorrelation:
    """Correlation of one pair over trailing windows.

    A window longer than the available history is left as None.
    """

    ticker_1: str
    ticker_2: str
    correlation_30d: float | None
    correlation_90d: float | None
    correlation_1y: float | None
    trend: CorrelationTrend

    @property
    def key(self) -> str:
        return f"{self.ticker_1}/{self.ticker_2}"


@dataclass(frozen=True)
class CorrelationReport:
    """Full correlation analysis for a portfolio.

    Attributes:
        portfolio_id: Analyzed portfolio
        lookback_days: Calendar-day lookback used for price history
        tickers: Matrix row/column order
        ticker_names: Display names aligned with ``tickers``
        matrix: Read-only symmetric correlation matrix with unit diagonal
        highly_correlated_pairs: Pairs >= high threshold, descending
        negatively_correlated_pairs: Pairs <= negative threshold, ascending
        hedge_suggestions: Per-holding and portfolio-wide hedges
        rolling_correlations: Trailing-window correlations for top pairs
        diversification_score: 0-100 score
        diversification_rating: Banded label for the score
        observations: Number of aligned daily returns per ticker
    """

    portfolio_id: str
    lookback_days: int
    tickers: tuple[str, ...]
    ticker_names: tuple[str, ...]
    matrix: np.ndarray
    highly_correlated_pairs: tuple[CorrelatedPair, ...]
    negatively_correlated_pairs: tuple[CorrelatedPair, ...]
    hedge_suggestions: tuple[HedgeSuggestion, ...]
    rolling_correlations: tuple[RollingCorrelation, ...]
    diversification_score: float
    diversification_rating: DiversificationRating
    observations: int
    excluded_tickers: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Freeze a private copy of the matrix so it stays symmetric."""
        matrix = np.array(self.matrix, dtype=np.float64)
        matrix.setflags(write=False)
        object.__setattr__(self, "matrix", matrix)

    @property
    def holding_count(self) -> int:
        return len(self.tickers)

    def rounded_matrix(self, decimals: int = 4) -> list[list[float]]:
        """Return the matrix as nested lists rounded for display."""
        return np.round(self.matrix, decimals).tolist()

    def get_correlation(self, ticker_a: str, ticker_b: str) -> float:
        """Look up the correlation between two tickers in the report."""
        index_a = self.tickers.index(ticker_a)
        index_b = self.tickers.index(ticker_b)
        return float(self.matrix[index_a, index_b])
