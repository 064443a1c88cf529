"""SMA crossover backtest rule.

Buy when the short SMA crosses above the long SMA, sell on the reverse
cross. Evaluation starts at the bar index equal to the longer period.
"""

import logging
from collections.abc import Sequence
from datetime import date

from portfolio_analytics.backtest.execution import PositionTracker
from portfolio_analytics.config.parameters import SmaCrossoverParameters
from portfolio_analytics.indicators.basic import sma
from portfolio_analytics.models.backtest import TradeRecord


logger = logging.getLogger(__name__)


def run_sma_crossover(
    prices: Sequence[float],
    dates: Sequence[date],
    params: SmaCrossoverParameters,
) -> list[TradeRecord]:
    """
    Backtest a golden-cross / death-cross rule.

    A golden cross is ``prev_short <= prev_long`` and ``short > long``; a
    death cross is the mirror image. Moving averages use partial windows at
    the start of the series.

    Args:
        prices: Closing prices ordered oldest to newest.
        dates: Bar dates aligned with ``prices``.
        params: Short and long SMA periods.

    Returns:
        Closed trades, the last one force-closed if still open.
    """
    tracker = PositionTracker(prices, dates)
    start = max(params.short_period, params.long_period)
    if len(prices) <= start:
        logger.debug("Series of %d bars too short for SMA(%d)", len(prices), start)
        return []

    short_sma = sma(prices, params.short_period)
    long_sma = sma(prices, params.long_period)

    for i in range(start, len(prices)):
        prev_short, prev_long = short_sma[i - 1], long_sma[i - 1]
        if tracker.is_flat and prev_short <= prev_long and short_sma[i] > long_sma[i]:
            tracker.enter(i)
        elif tracker.is_long and prev_short >= prev_long and short_sma[i] < long_sma[i]:
            tracker.exit(i)

    return tracker.finish()
