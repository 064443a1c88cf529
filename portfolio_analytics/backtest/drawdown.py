"""
Drawdown computation for price and value series.

This module provides the peak-to-trough drawdown measures shared by the
risk engine (compounded portfolio value series) and the backtest engine
(raw ticker prices).

All functions handle empty sequences gracefully and return 0 drawdown.
"""

import logging

import numpy as np
from numpy.typing import ArrayLike, NDArray


logger = logging.getLogger(__name__)


def compute_drawdown_curve(values: ArrayLike) -> NDArray[np.float64]:
    """
    Compute the fractional drawdown at every point of a value series.

    The drawdown at each point is ``(running_peak - value) / running_peak``.
    All values are >= 0. A non-positive running peak gives 0.

    Args:
        values: Price or equity values ordered oldest to newest.

    Returns:
        NumPy array of drawdown fractions. Empty if no values provided.

    Examples:
        >>> compute_drawdown_curve([100.0, 120.0, 90.0, 95.0]).round(4).tolist()
        [0.0, 0.0, 0.25, 0.2083]
    """
    series = np.asarray(values, dtype=np.float64)
    if series.size == 0:
        logger.debug("No values provided for drawdown computation")
        return np.array([], dtype=np.float64)

    running_max = np.maximum.accumulate(series)
    curve = np.zeros_like(series)
    np.divide(running_max - series, running_max, out=curve, where=running_max > 0)
    return curve


def compute_max_drawdown(values: ArrayLike) -> tuple[float, int, int]:
    """
    Locate the largest peak-to-trough decline of a value series.

    Args:
        values: Price or equity values ordered oldest to newest.

    Returns:
        Tuple ``(max_drawdown, peak_index, trough_index)``. The drawdown is a
        fraction of the peak; both indices are 0 when no decline occurred.
        The peak is the first index reaching the running maximum in force at
        the trough.

    Examples:
        >>> compute_max_drawdown([100.0, 120.0, 90.0, 95.0])
        (0.25, 1, 2)
        >>> compute_max_drawdown([1.0, 2.0, 3.0])
        (0.0, 0, 0)
    """
    curve = compute_drawdown_curve(values)
    if curve.size == 0:
        return 0.0, 0, 0

    trough_index = int(np.argmax(curve))
    max_dd = float(curve[trough_index])
    if max_dd <= 0:
        return 0.0, 0, 0

    series = np.asarray(values, dtype=np.float64)
    peak_index = int(np.argmax(series[: trough_index + 1]))

    logger.debug(
        "Max drawdown %.4f from index %d to %d", max_dd, peak_index, trough_index
    )
    return max_dd, peak_index, trough_index


def value_series_from_returns(returns: ArrayLike, base: float = 1.0) -> NDArray[np.float64]:
    """
    Compound period returns into a value series starting at ``base``.

    Examples:
        >>> value_series_from_returns([0.1, -0.5]).round(4).tolist()
        [1.0, 1.1, 0.55]
    """
    rets = np.asarray(returns, dtype=np.float64)
    return base * np.concatenate([[1.0], np.cumprod(1.0 + rets)])
