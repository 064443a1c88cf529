"""Bollinger-band mean reversion backtest rule."""

import logging
from collections.abc import Sequence
from datetime import date

from portfolio_analytics.backtest.execution import PositionTracker
from portfolio_analytics.config.parameters import MeanReversionParameters
from portfolio_analytics.indicators.basic import rolling_std, sma
from portfolio_analytics.models.backtest import TradeRecord


logger = logging.getLogger(__name__)


def run_mean_reversion(
    prices: Sequence[float],
    dates: Sequence[date],
    params: MeanReversionParameters,
) -> list[TradeRecord]:
    """
    Buy at or below the lower band, sell at or above the upper band.

    Bands are ``mean +/- std_dev * stdev`` of the window of ``period``
    closes ending at the current bar (sample stdev).

    Args:
        prices: Closing prices ordered oldest to newest.
        dates: Bar dates aligned with ``prices``.
        params: Window length and band width.

    Returns:
        Closed trades, the last one force-closed if still open.
    """
    tracker = PositionTracker(prices, dates)
    if len(prices) <= params.period:
        return []

    means = sma(prices, params.period)
    stds = rolling_std(prices, params.period)

    for i in range(params.period, len(prices)):
        lower = means[i] - params.std_dev * stds[i]
        upper = means[i] + params.std_dev * stds[i]
        if tracker.is_flat and prices[i] <= lower:
            tracker.enter(i)
        elif tracker.is_long and prices[i] >= upper:
            tracker.exit(i)

    return tracker.finish()
