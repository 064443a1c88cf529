"""Return computation, trailing alignment and descriptive statistics."""

from portfolio_analytics.timeseries.returns import align_trailing, simple_returns, total_return_pct, trailing
from portfolio_analytics.timeseries.stats import (
    clamp_index,
    downside_deviation,
    mean,
    ols_beta,
    pearson_correlation,
    percentile,
    stddev,
)

__all__ = [
    "align_trailing",
    "clamp_index",
    "downside_deviation",
    "mean",
    "ols_beta",
    "pearson_correlation",
    "percentile",
    "simple_returns",
    "stddev",
    "total_return_pct",
    "trailing",
]
