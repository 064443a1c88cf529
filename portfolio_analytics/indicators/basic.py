"""
Basic technical indicators for strategies, signals and the advisor.

This module implements the indicators with numpy and pandas for vectorized
computation. Moving averages use partial windows at the start of a series
(the window is whatever history exists), so an indicator value is defined
for every index.

Indicators:
- SMA (Simple Moving Average): Trend identification
- Rolling standard deviation: Bollinger band width
- EMA (Exponential Moving Average): Trend and MACD
- RSI (Relative Strength Index): Momentum oscillator, Wilder smoothed
  and simple variants
- MACD: Fast minus slow EMA
"""

import logging

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray


logger = logging.getLogger(__name__)


def sma(prices: ArrayLike, period: int) -> NDArray[np.float64]:
    """
    Calculate the Simple Moving Average at every index.

    The window ending at index ``i`` starts at ``max(0, i - period + 1)``,
    so the first ``period - 1`` values average the shorter available history.

    Args:
        prices: Array of price values (typically close prices).
        period: Number of periods in the full window.

    Returns:
        Array of SMA values with same length as input.

    Raises:
        ValueError: If period < 1.

    Examples:
        >>> sma([1.0, 2.0, 3.0, 4.0], period=2).tolist()
        [1.0, 1.5, 2.5, 3.5]
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    series = pd.Series(np.asarray(prices, dtype=np.float64))
    return series.rolling(window=period, min_periods=1).mean().to_numpy()


def sma_at(prices: ArrayLike, end_index: int, period: int) -> float:
    """
    Simple moving average of the window ending at ``end_index``.

    Examples:
        >>> sma_at([1.0, 2.0, 3.0, 4.0], 3, 2)
        3.5
        >>> sma_at([1.0, 2.0, 3.0, 4.0], 0, 3)
        1.0
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    values = np.asarray(prices, dtype=np.float64)
    start = max(0, end_index - period + 1)
    return float(values[start : end_index + 1].mean())


def rolling_std(prices: ArrayLike, period: int) -> NDArray[np.float64]:
    """
    Sample standard deviation of the window ending at every index.

    Windows holding fewer than two values give 0.

    Examples:
        >>> rolling_std([2.0, 4.0, 4.0, 4.0], period=2).round(4).tolist()
        [0.0, 1.4142, 0.0, 0.0]
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    series = pd.Series(np.asarray(prices, dtype=np.float64))
    return series.rolling(window=period, min_periods=1).std(ddof=1).fillna(0.0).to_numpy()


def ema(prices: ArrayLike, period: int) -> NDArray[np.float64]:
    """
    Calculate Exponential Moving Average using standard smoothing factor.

    Uses pandas' ewm() with ``span=period`` (alpha = 2 / (period + 1)),
    seeded with the first price, so every index carries a value.

    Args:
        prices: Array of price values (typically close prices).
        period: Number of periods for the EMA calculation.

    Returns:
        Array of EMA values with same length as input.

    Raises:
        ValueError: If period < 1 or prices array is empty.

    Examples:
        >>> ema([10.0, 10.0, 10.0], period=3).tolist()
        [10.0, 10.0, 10.0]
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    values = np.asarray(prices, dtype=np.float64)
    if values.size == 0:
        raise ValueError("Prices array cannot be empty")
    return pd.Series(values).ewm(span=period, adjust=False).mean().to_numpy()


def wilder_rsi(prices: ArrayLike, period: int = 14) -> NDArray[np.float64]:
    """
    Calculate Wilder-smoothed Relative Strength Index.

    The first average gain/loss is the plain mean of the first ``period``
    price changes; later values use Wilder smoothing
    ``avg = (avg * (period - 1) + current) / period``. A zero average loss
    gives ``RS = 100``.

    Output value ``k`` belongs to price index ``period + k``.

    Args:
        prices: Array of price values (typically close prices).
        period: Number of periods for RSI calculation (default: 14).

    Returns:
        Array of RSI values (0-100) of length ``len(prices) - period``;
        empty when there are not more than ``period`` prices.

    Raises:
        ValueError: If period < 1.

    Examples:
        >>> values = wilder_rsi([1.0, 2.0, 3.0, 2.0, 3.0], period=2)
        >>> len(values)
        3
        >>> bool(np.all((values >= 0) & (values <= 100)))
        True
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    values = np.asarray(prices, dtype=np.float64)
    if values.size <= period:
        return np.array([], dtype=np.float64)

    deltas = np.diff(values)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    rsi_values = np.empty(values.size - period, dtype=np.float64)
    avg_gain = gains[:period].mean()
    avg_loss = losses[:period].mean()
    for k in range(rsi_values.size):
        if k > 0:
            idx = period - 1 + k
            avg_gain = (avg_gain * (period - 1) + gains[idx]) / period
            avg_loss = (avg_loss * (period - 1) + losses[idx]) / period
        rs = 100.0 if avg_loss == 0 else avg_gain / avg_loss
        rsi_values[k] = 100.0 - 100.0 / (1.0 + rs)

    return rsi_values


def simple_rsi(prices: ArrayLike, period: int = 14) -> float:
    """
    Unsmoothed RSI over the last ``period`` price changes.

    Gains and losses are summed over the trailing window (zero changes count
    as gains). Returns 100 when the window holds no losses.

    Examples:
        >>> simple_rsi([1.0, 2.0, 3.0], period=14)
        100.0
        >>> simple_rsi([3.0, 2.0, 3.0], period=2)
        50.0
    """
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    values = np.asarray(prices, dtype=np.float64)
    start = max(1, values.size - period)
    deltas = values[start:] - values[start - 1 : -1]
    gain = float(deltas[deltas >= 0].sum())
    loss = float(-deltas[deltas < 0].sum())
    if loss == 0:
        return 100.0
    rs = (gain / period) / (loss / period)
    return 100.0 - 100.0 / (1.0 + rs)


def macd(prices: ArrayLike, fast: int = 12, slow: int = 26) -> NDArray[np.float64]:
    """
    MACD line: fast EMA minus slow EMA at every index.

    Examples:
        >>> macd([5.0, 5.0, 5.0]).tolist()
        [0.0, 0.0, 0.0]
    """
    if fast >= slow:
        raise ValueError(f"Fast period must be < slow period, got {fast} >= {slow}")
    return ema(prices, fast) - ema(prices, slow)


def validate_indicator_inputs(prices: ArrayLike, period: int, min_length: int = 2) -> None:
    """
    Validate common indicator input parameters.

    Args:
        prices: Price array to validate.
        period: Period parameter to validate.
        min_length: Minimum required array length.

    Raises:
        ValueError: If validation fails.

    Examples:
        >>> validate_indicator_inputs([1.0, 2.0, 3.0], period=2, min_length=2)
    """
    values = np.asarray(prices, dtype=np.float64)
    if values.size < min_length:
        raise ValueError(
            f"Prices array must have at least {min_length} elements, got {values.size}"
        )
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    if np.any(np.isnan(values)):
        raise ValueError("Prices array contains NaN values")
    if np.any(np.isinf(values)):
        raise ValueError("Prices array contains infinite values")
