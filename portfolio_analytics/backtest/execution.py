"""
Position state machine for long-only rule backtests.

A position is either FLAT or LONG one unit. Rules ask the tracker to
``enter`` or ``exit`` at a bar index; the tracker validates the transition,
keeps the entry metadata and emits a TradeRecord on every exit. Any open
position is force-closed at the last bar by ``finish``.
"""

import logging
from collections.abc import Sequence
from datetime import date

from portfolio_analytics.models.backtest import TradeRecord
from portfolio_analytics.models.enums import PositionState, SignalAction


logger = logging.getLogger(__name__)


def trade_return_pct(entry_price: float, exit_price: float) -> float:
    """
    Per-trade return in percent; 0 for a zero entry price.

    Examples:
        >>> trade_return_pct(100.0, 110.0)
        10.0
    """
    if entry_price == 0:
        return 0.0
    return (exit_price - entry_price) / entry_price * 100.0


class PositionTracker:
    """
    Two-state (FLAT/LONG) trade tracker over one price series.

    Args:
        prices: Closing prices ordered oldest to newest.
        dates: Bar dates aligned with ``prices``.

    Examples:
        >>> from datetime import date, timedelta
        >>> days = [date(2025, 1, 1) + timedelta(days=i) for i in range(3)]
        >>> tracker = PositionTracker([10.0, 11.0, 12.0], days)
        >>> tracker.enter(0)
        >>> trades = tracker.finish()
        >>> trades[0].return_pct, trades[0].forced_exit
        (20.0, True)
    """

    def __init__(self, prices: Sequence[float], dates: Sequence[date]):
        if len(prices) != len(dates):
            raise ValueError(
                f"Prices and dates must have the same length, got {len(prices)} and {len(dates)}"
            )
        self.prices = prices
        self.dates = dates
        self.state = PositionState.FLAT
        self.trades: list[TradeRecord] = []
        self._entry_index: int | None = None

    @property
    def is_flat(self) -> bool:
        return self.state is PositionState.FLAT

    @property
    def is_long(self) -> bool:
        return self.state is PositionState.LONG

    def enter(self, index: int) -> None:
        """Open a long position at bar ``index`` (FLAT -> LONG)."""
        if self.state is not PositionState.FLAT:
            raise RuntimeError(f"Cannot enter while {self.state.value}")
        self.state = PositionState.LONG
        self._entry_index = index
        logger.debug("Entered LONG at index %d price %.4f", index, self.prices[index])

    def exit(self, index: int, forced: bool = False) -> TradeRecord:
        """Close the open position at bar ``index`` (LONG -> FLAT)."""
        if self.state is not PositionState.LONG or self._entry_index is None:
            raise RuntimeError(f"Cannot exit while {self.state.value}")
        entry_price = float(self.prices[self._entry_index])
        exit_price = float(self.prices[index])
        trade = TradeRecord(
            entry_date=self.dates[self._entry_index],
            exit_date=self.dates[index],
            entry_price=entry_price,
            exit_price=exit_price,
            return_pct=trade_return_pct(entry_price, exit_price),
            signal=SignalAction.BUY,
            forced_exit=forced,
        )
        self.trades.append(trade)
        self.state = PositionState.FLAT
        self._entry_index = None
        logger.debug("Exited at index %d: %.2f%%", index, trade.return_pct)
        return trade

    def finish(self) -> list[TradeRecord]:
        """Force-close any open position at the last bar and return all trades."""
        if self.is_long:
            self.exit(len(self.prices) - 1, forced=True)
        return list(self.trades)
