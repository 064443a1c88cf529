"""Correlation and diversification analysis for a portfolio.

This module builds the pairwise return-correlation matrix of a portfolio's
stock/ETF holdings and derives from it:
- Highly and negatively correlated pair classification
- Hedge suggestions
- Rolling 30/90/252-day correlations for the most correlated pairs
- A 0-100 diversification score and rating

Return series are trailing-aligned to the shortest history so that the
last index of every series is the same trading day.
"""
import logging
from datetime import date, timedelta

import numpy as np
from numpy.typing import NDArray

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.config.tables import PORTFOLIO_HEDGES, SECTOR_HEDGES
from portfolio_analytics.io.sources import PriceHistorySource
from portfolio_analytics.models.core import HoldingSnapshot
from portfolio_analytics.models.correlation import CorrelationReport, RollingCorrelation
from portfolio_analytics.models.enums import CorrelationTrend
from portfolio_analytics.models.exceptions import DataGapError, InputError
from portfolio_analytics.timeseries.returns import align_trailing, simple_returns, trailing
from portfolio_analytics.timeseries.stats import pearson_correlation
from portfolio_analytics.portfolio.diversification import calculate_diversification_score, classify_pairs, rate_diversification
from portfolio_analytics.portfolio.hedging import suggest_hedges

logger = logging.getLogger(__name__)


def correlation_matrix(return_series: list[NDArray[np.float64]]) -> NDArray[np.float64]:
    """Compute the symmetric Pearson correlation matrix.

    Args:
        return_series: Equal-length return arrays, one per asset

    Returns:
        n x n matrix with unit diagonal; zero-variance pairs get 0

    Examples:
        >>> m = correlation_matrix([np.array([1.0, 2.0, 3.0]), np.array([3.0, 2.0, 1.0])])
        >>> m.tolist()
        [[1.0, -1.0], [-1.0, 1.0]]
    """
    n = len(return_series)
    matrix = np.eye(n, dtype=np.float64)
    for i in range(n):
        for j in range(i + 1, n):
            corr = pearson_correlation(return_series[i], return_series[j])
            matrix[i, j] = corr
            matrix[j, i] = corr
    return matrix


def rolling_correlation(
    ticker_1: str,
    ticker_2: str,
    returns_1: NDArray[np.float64],
    returns_2: NDArray[np.float64],
    windows: tuple[int, int, int] = (30, 90, 252),
    trend_threshold: float = 0.10,
) -> RollingCorrelation:
    """Correlate a pair over trailing short, medium and long windows.

    The short and medium windows are reported only when enough returns
    exist; the long window falls back to the full history. The trend
    compares the short window against the long one.

    Args:
        ticker_1: First ticker
        ticker_2: Second ticker
        returns_1: Aligned returns of the first ticker
        returns_2: Aligned returns of the second ticker
        windows: (short, medium, long) window lengths
        trend_threshold: Difference beyond which the trend is not "Stable"

    Returns:
        RollingCorrelation for the pair
    """
    short, medium, long = windows
    length = min(returns_1.size, returns_2.size)

    def window_corr(size: int) -> float:
        return pearson_correlation(trailing(returns_1, size), trailing(returns_2, size))

    corr_short = window_corr(short) if length >= short else None
    corr_medium = window_corr(medium) if length >= medium else None
    corr_long = window_corr(min(long, length))

    if corr_short is None or corr_long is None:
        trend = CorrelationTrend.NOT_AVAILABLE
    else:
        diff = corr_short - corr_long
        if diff > trend_threshold:
            trend = CorrelationTrend.INCREASING
        elif diff < -trend_threshold:
            trend = CorrelationTrend.DECREASING
        else:
            trend = CorrelationTrend.STABLE

    return RollingCorrelation(ticker_1, ticker_2, corr_short, corr_medium, corr_long, trend)


def top_pairs(matrix: NDArray[np.float64], limit: int) -> list[tuple[int, int]]:
    """Return up to ``limit`` index pairs ordered by |correlation| descending.

    The sort is stable, so pairs with equal |correlation| keep matrix order.
    """
    n = matrix.shape[0]
    pairs = [(i, j) for i in range(n) for j in range(i + 1, n)]
    pairs.sort(key=lambda pair: abs(matrix[pair[0], pair[1]]), reverse=True)
    return pairs[:limit]


class CorrelationService:
    """Runs correlation and diversification analysis for portfolios.

    Attributes:
        prices: Price-history collaborator
        settings: Thresholds and rolling windows
        sector_hedges: Sector to hedge instrument table
        portfolio_hedges: Portfolio-wide hedge table
    """

    def __init__(
        self,
        prices: PriceHistorySource,
        settings: AnalyticsSettings | None = None,
        sector_hedges=SECTOR_HEDGES,
        portfolio_hedges=PORTFOLIO_HEDGES,
    ):
        """Initialize correlation service.

        Args:
            prices: Price-history collaborator
            settings: Optional settings (defaults used when omitted)
            sector_hedges: Optional replacement sector hedge table
            portfolio_hedges: Optional replacement portfolio hedge table
        """
        self.prices = prices
        self.settings = settings or AnalyticsSettings()
        self.sector_hedges = sector_hedges
        self.portfolio_hedges = tuple(portfolio_hedges)

    def analyze(
        self,
        portfolio_id: str,
        holdings: list[HoldingSnapshot],
        lookback_days: int = 252,
        as_of: date | None = None,
    ) -> CorrelationReport:
        """Analyze correlation and diversification of a portfolio.

        Args:
            portfolio_id: Portfolio identifier, carried into the report
            holdings: Holdings of the portfolio (non stock/ETF are ignored)
            lookback_days: Calendar days of price history
            as_of: Analysis date (default today)

        Returns:
            Immutable CorrelationReport

        Raises:
            InputError: Fewer than 2 stock/ETF holdings, or fewer than 2
                with usable price history
        """
        if lookback_days < 2:
            raise InputError(
                "Lookback must be at least 2 days", context={"lookback_days": lookback_days}
            )

        eligible = _unique_by_ticker(
            [h for h in holdings if h.has_ticker and h.asset_class.is_equity_like]
        )
        if len(eligible) < 2:
            raise InputError(
                "Need at least 2 stock/ETF holdings for correlation analysis",
                context={"portfolio_id": portfolio_id, "eligible": len(eligible)},
            )

        end = as_of or date.today()
        start = end - timedelta(days=lookback_days)
        logger.info(
            "Analyzing correlation for portfolio %s: %d holdings, lookback=%d",
            portfolio_id,
            len(eligible),
            lookback_days,
        )

        included: list[HoldingSnapshot] = []
        raw_returns: list[NDArray[np.float64]] = []
        excluded: list[str] = []
        for holding in eligible:
            try:
                raw_returns.append(self._load_returns(holding.ticker, start, end))
                included.append(holding)
            except DataGapError as exc:
                logger.warning("Skipping holding in correlation analysis: %s", exc)
                excluded.append(holding.ticker)

        if len(included) < 2:
            raise InputError(
                "Need price data for at least 2 holdings",
                hint="Sync price history first",
                context={"portfolio_id": portfolio_id},
            )

        aligned = align_trailing(raw_returns)
        tickers = [h.ticker for h in included]
        names = [h.display_name for h in included]
        matrix = correlation_matrix(aligned)

        high, negative = classify_pairs(tickers, names, matrix, self.settings)
        hedges = suggest_hedges(included, self.sector_hedges, self.portfolio_hedges)

        rolling = tuple(
            rolling_correlation(
                tickers[i],
                tickers[j],
                aligned[i],
                aligned[j],
                windows=self.settings.rolling_windows,
                trend_threshold=self.settings.trend_threshold,
            )
            for i, j in top_pairs(matrix, self.settings.rolling_top_pairs)
        )

        score = calculate_diversification_score(matrix)
        rating = rate_diversification(score)

        logger.info(
            "Correlation analysis for %s: %d tickers, %d observations, score=%.1f (%s)",
            portfolio_id,
            len(tickers),
            aligned[0].size,
            score,
            rating.value,
        )

        return CorrelationReport(
            portfolio_id=portfolio_id,
            lookback_days=lookback_days,
            tickers=tuple(tickers),
            ticker_names=tuple(names),
            matrix=matrix,
            highly_correlated_pairs=tuple(high),
            negatively_correlated_pairs=tuple(negative),
            hedge_suggestions=tuple(hedges),
            rolling_correlations=rolling,
            diversification_score=score,
            diversification_rating=rating,
            observations=int(aligned[0].size),
            excluded_tickers=tuple(excluded),
        )

    def _load_returns(self, ticker: str, start: date, end: date) -> NDArray[np.float64]:
        series = self.prices.get_closing_prices(ticker, start, end)
        if len(series) <= 1:
            raise DataGapError("Insufficient price data", ticker=ticker, points=len(series))
        return simple_returns(series.closes)


def _unique_by_ticker(holdings: list[HoldingSnapshot]) -> list[HoldingSnapshot]:
    seen: set[str] = set()
    unique = []
    for holding in holdings:
        if holding.ticker not in seen:
            seen.add(holding.ticker)
            unique.append(holding)
    return unique
