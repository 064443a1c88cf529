"""Base backtest rule interface.

A rule walks one ticker's closing prices and reports the trades its
position state machine produced. Rules are plain functions; each one is
paired in the registry with the pydantic model of its parameters.
"""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from portfolio_analytics.models.backtest import TradeRecord


class BacktestRule(Protocol):
    """Protocol every backtest rule callable satisfies."""

    def __call__(
        self,
        prices: Sequence[float],
        dates: Sequence[date],
        params,
    ) -> list[TradeRecord]:
        """Run the rule.

        Args:
            prices: Closing prices ordered oldest to newest.
            dates: Bar dates aligned with ``prices``.
            params: Validated parameter model of the rule.

        Returns:
            Trades in chronological order; an open position is force-closed
            at the last bar.
        """
