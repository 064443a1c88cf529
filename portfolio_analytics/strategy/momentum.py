"""RSI momentum backtest rule."""

import logging
from collections.abc import Sequence
from datetime import date

from portfolio_analytics.backtest.execution import PositionTracker
from portfolio_analytics.config.parameters import MomentumParameters
from portfolio_analytics.indicators.basic import wilder_rsi
from portfolio_analytics.models.backtest import TradeRecord


logger = logging.getLogger(__name__)


def run_momentum(
    prices: Sequence[float],
    dates: Sequence[date],
    params: MomentumParameters,
) -> list[TradeRecord]:
    """
    Buy when RSI drops below the buy threshold, sell when it rises above
    the sell threshold.

    RSI value ``k`` is evaluated at price index ``rsi_period + k``.

    Args:
        prices: Closing prices ordered oldest to newest.
        dates: Bar dates aligned with ``prices``.
        params: RSI period and thresholds.

    Returns:
        Closed trades, the last one force-closed if still open.
    """
    tracker = PositionTracker(prices, dates)
    if len(prices) <= params.rsi_period + 1:
        return []

    rsi_values = wilder_rsi(prices, params.rsi_period)
    for k, value in enumerate(rsi_values):
        index = params.rsi_period + k
        if tracker.is_flat and value < params.buy_threshold:
            tracker.enter(index)
        elif tracker.is_long and value > params.sell_threshold:
            tracker.exit(index)

    return tracker.finish()
