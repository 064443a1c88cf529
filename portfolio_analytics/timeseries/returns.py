"""
Return computation and series alignment.

Every array that is combined with another (portfolio weighting, beta,
correlation) is first truncated to a common length keeping its most recent
observations, so index ``-1`` is always "today" across all of them.
"""

import logging
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray


logger = logging.getLogger(__name__)


def simple_returns(prices: ArrayLike) -> NDArray[np.float64]:
    """
    Compute simple period returns from a price array.

    ``r[i] = (p[i+1] - p[i]) / p[i]``; a zero previous price yields 0.

    Args:
        prices: Prices ordered oldest to newest.

    Returns:
        Array of length ``len(prices) - 1`` (empty for fewer than 2 prices).

    Examples:
        >>> simple_returns([100.0, 110.0, 99.0]).round(4).tolist()
        [0.1, -0.1]
        >>> simple_returns([0.0, 5.0]).tolist()
        [0.0]
    """
    values = np.asarray(prices, dtype=np.float64)
    if values.size < 2:
        return np.array([], dtype=np.float64)

    previous = values[:-1]
    change = values[1:] - previous
    out = np.zeros_like(change)
    np.divide(change, previous, out=out, where=previous != 0)
    return out


def align_trailing(series_list: Sequence[ArrayLike]) -> list[NDArray[np.float64]]:
    """
    Truncate every series to the shortest length, keeping trailing values.

    Args:
        series_list: Arrays ordered oldest to newest.

    Returns:
        New arrays, all of the minimum input length, each holding the last
        elements of its source.

    Examples:
        >>> aligned = align_trailing([[1, 2, 3, 4, 5], [1, 2, 3, 4, 5, 6, 7, 8], [7, 8, 9]])
        >>> [a.tolist() for a in aligned]
        [[3.0, 4.0, 5.0], [6.0, 7.0, 8.0], [7.0, 8.0, 9.0]]
    """
    arrays = [np.asarray(series, dtype=np.float64) for series in series_list]
    if not arrays:
        return []
    common = min(array.size for array in arrays)
    return [array[array.size - common :].copy() for array in arrays]


def trailing(values: ArrayLike, length: int) -> NDArray[np.float64]:
    """Return the last ``length`` elements (the whole array if shorter)."""
    array = np.asarray(values, dtype=np.float64)
    if length <= 0:
        return array[:0].copy()
    return array[max(0, array.size - length) :].copy()


def total_return_pct(prices: ArrayLike) -> float:
    """
    Buy-and-hold return in percent from the first to the last price.

    Returns 0 for fewer than 2 prices or a zero starting price.
    """
    values = np.asarray(prices, dtype=np.float64)
    if values.size < 2 or values[0] == 0:
        return 0.0
    return float((values[-1] - values[0]) / values[0] * 100.0)
