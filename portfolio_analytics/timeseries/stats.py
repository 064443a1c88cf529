"""
Descriptive statistics over return series.

All functions return 0 on empty or degenerate input instead of raising.
Callers that divide by one of these values must check it first.
"""

import math

import numpy as np
from numpy.typing import ArrayLike


def mean(values: ArrayLike) -> float:
    """Arithmetic mean, 0 for an empty input."""
    array = np.asarray(values, dtype=np.float64)
    if array.size == 0:
        return 0.0
    return float(array.mean())


def stddev(values: ArrayLike) -> float:
    """
    Sample standard deviation (n-1 denominator).

    Examples:
        >>> round(stddev([1.0, 2.0, 3.0, 4.0]), 6)
        1.290994
        >>> stddev([5.0])
        0.0
    """
    array = np.asarray(values, dtype=np.float64)
    if array.size < 2:
        return 0.0
    return float(array.std(ddof=1))


def downside_deviation(returns: ArrayLike, target: float = 0.0) -> float:
    """
    Sample deviation of returns falling below ``target``.

    Only negative deviations ``r - target`` contribute; the sum of their
    squares is divided by ``count - 1``. Fewer than two such returns yield 0.

    Args:
        returns: Period returns.
        target: Minimum acceptable return per period.

    Returns:
        Downside deviation per period.
    """
    array = np.asarray(returns, dtype=np.float64)
    shortfall = array - target
    below = shortfall[shortfall < 0]
    if below.size < 2:
        return 0.0
    return math.sqrt(float(np.sum(below**2)) / (below.size - 1))


def percentile(sorted_values: ArrayLike, pct: float) -> float:
    """
    Percentile of an ascending array by linear interpolation.

    The fractional rank is ``pct / 100 * (n - 1)``; the result interpolates
    between the two bracketing order statistics. The rank is clamped into
    ``[0, n - 1]``.

    Args:
        sorted_values: Values sorted ascending.
        pct: Percentile in ``[0, 100]``.

    Returns:
        Interpolated value (0 for an empty input).

    Examples:
        >>> percentile([1.0, 2.0, 3.0, 4.0], 50)
        2.5
        >>> percentile([1.0, 2.0, 3.0, 4.0], 100)
        4.0
    """
    array = np.asarray(sorted_values, dtype=np.float64)
    n = array.size
    if n == 0:
        return 0.0
    rank = min(max(pct / 100.0 * (n - 1), 0.0), n - 1.0)
    lower = int(math.floor(rank))
    upper = min(lower + 1, n - 1)
    fraction = rank - lower
    return float(array[lower] + fraction * (array[upper] - array[lower]))


def clamp_index(index: int, n: int) -> int:
    """Clamp a probability-derived index into ``[0, n - 1]``."""
    return max(0, min(index, n - 1))


def pearson_correlation(x: ArrayLike, y: ArrayLike) -> float:
    """
    Pearson correlation of two equal-length series.

    ``sum(dx*dy) / sqrt(sum(dx^2) * sum(dy^2))``. Returns 0 for fewer than
    two points or when either series has zero variance. Inputs of different
    lengths are aligned on their trailing values first.

    Examples:
        >>> pearson_correlation([1.0, 2.0, 3.0], [2.0, 4.0, 6.0])
        1.0
        >>> pearson_correlation([1.0, 1.0, 1.0], [2.0, 4.0, 6.0])
        0.0
    """
    a = np.asarray(x, dtype=np.float64)
    b = np.asarray(y, dtype=np.float64)
    n = min(a.size, b.size)
    if n < 2:
        return 0.0
    a = a[a.size - n :]
    b = b[b.size - n :]
    dx = a - a.mean()
    dy = b - b.mean()
    denominator = math.sqrt(float(np.sum(dx * dx)) * float(np.sum(dy * dy)))
    if denominator == 0:
        return 0.0
    value = float(np.sum(dx * dy)) / denominator
    return max(-1.0, min(1.0, value))


def ols_beta(asset_returns: ArrayLike, benchmark_returns: ArrayLike) -> float:
    """
    OLS slope of asset returns on benchmark returns.

    ``cov(asset, bench) / var(bench)`` over the trailing common length.
    Defaults to 1.0 with fewer than two points or a flat benchmark.

    Examples:
        >>> round(ols_beta([0.02, -0.02, 0.04], [0.01, -0.01, 0.02]), 6)
        2.0
        >>> ols_beta([0.01], [0.02])
        1.0
    """
    a = np.asarray(asset_returns, dtype=np.float64)
    b = np.asarray(benchmark_returns, dtype=np.float64)
    n = min(a.size, b.size)
    if n < 2:
        return 1.0
    a = a[a.size - n :]
    b = b[b.size - n :]
    mean_b = b.mean()
    variance = float(np.sum((b - mean_b) ** 2)) / (n - 1)
    if abs(variance) < 1e-15:
        return 1.0
    covariance = float(np.sum((a - a.mean()) * (b - mean_b))) / (n - 1)
    return covariance / variance
