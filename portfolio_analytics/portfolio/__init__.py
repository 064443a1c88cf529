"""Correlation, hedging and diversification analysis."""

from portfolio_analytics.portfolio.correlation_service import CorrelationService, correlation_matrix, rolling_correlation
from portfolio_analytics.portfolio.diversification import calculate_diversification_score, rate_diversification
from portfolio_analytics.portfolio.hedging import suggest_hedges

__all__ = [
    "CorrelationService",
    "calculate_diversification_score",
    "correlation_matrix",
    "rate_diversification",
    "rolling_correlation",
    "suggest_hedges",
]
