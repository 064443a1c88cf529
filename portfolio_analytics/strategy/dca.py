"""Dollar-cost-averaging backtest rule.

A fixed cash amount buys at every ``interval_days``-th bar; nothing is ever
sold. Each purchase is recorded as a zero-return lot and the final lot
carries the mark-to-market return of the whole programme at the last price.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import date

from portfolio_analytics.backtest.execution import trade_return_pct
from portfolio_analytics.config.parameters import DcaParameters
from portfolio_analytics.models.backtest import TradeRecord
from portfolio_analytics.models.enums import SignalAction


logger = logging.getLogger(__name__)


def run_dca(
    prices: Sequence[float],
    dates: Sequence[date],
    params: DcaParameters,
    amount: float = 1000.0,
) -> list[TradeRecord]:
    """
    Simulate periodic fixed-amount purchases.

    Args:
        prices: Closing prices ordered oldest to newest.
        dates: Bar dates aligned with ``prices``.
        params: Purchase interval in bars.
        amount: Cash invested per purchase.

    Returns:
        One record per purchase; the last one marked to the final price.
    """
    lots: list[TradeRecord] = []
    shares = 0.0
    invested = 0.0
    for i in range(0, len(prices), params.interval_days):
        price = float(prices[i])
        if price <= 0:
            logger.warning("Skipping DCA purchase at non-positive price %.4f", price)
            continue
        shares += amount / price
        invested += amount
        lots.append(
            TradeRecord(
                entry_date=dates[i],
                exit_date=dates[i],
                entry_price=price,
                exit_price=price,
                return_pct=0.0,
                signal=SignalAction.BUY,
            )
        )

    if lots and invested > 0:
        last_price = float(prices[-1])
        final_value = shares * last_price
        lots[-1] = replace(
            lots[-1],
            exit_price=last_price,
            return_pct=trade_return_pct(invested, final_value),
        )
        logger.debug("DCA: %d purchases, invested %.2f, worth %.2f", len(lots), invested, final_value)
    return lots
