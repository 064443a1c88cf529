"""
Core input models for the analytics engines.

This module defines immutable dataclasses for the data the core consumes
from its collaborators: daily price bars, per-ticker price series, and
read-only holding snapshots.

All dataclasses are frozen so that a single input can be shared safely
across concurrent analytics requests.
"""

from dataclasses import dataclass, field
from datetime import date

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from portfolio_analytics.models.enums import AssetClass
from portfolio_analytics.models.exceptions import DataIntegrityError


@dataclass(frozen=True)
class PriceBar:
    """
    A single daily OHLCV bar.

    Attributes:
        date: Trading date of the bar.
        open: Opening price.
        high: Highest price of the day.
        low: Lowest price of the day.
        close: Closing price.
        volume: Traded volume.
    """

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0


@dataclass(frozen=True)
class PriceSeries:
    """
    Ordered daily price history for one ticker.

    Dates are strictly increasing with no duplicates. Non-trading days are
    simply absent; they are never zero-filled.

    Attributes:
        ticker: Instrument symbol.
        bars: Bars ordered oldest to newest.

    Examples:
        >>> series = PriceSeries.from_closes("AAA", [100.0, 102.0, 101.0])
        >>> len(series)
        3
        >>> series.last_close
        101.0
    """

    ticker: str
    bars: tuple[PriceBar, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate date ordering."""
        object.__setattr__(self, "bars", tuple(self.bars))
        for index in range(1, len(self.bars)):
            if self.bars[index].date <= self.bars[index - 1].date:
                raise DataIntegrityError(
                    "Price dates must be strictly increasing",
                    context={"ticker": self.ticker, "index": index},
                )

    def __len__(self) -> int:
        return len(self.bars)

    @property
    def is_empty(self) -> bool:
        return not self.bars

    @property
    def closes(self) -> NDArray[np.float64]:
        """Closing prices as a float array (oldest first)."""
        return np.array([bar.close for bar in self.bars], dtype=np.float64)

    @property
    def dates(self) -> list[date]:
        return [bar.date for bar in self.bars]

    @property
    def last_close(self) -> float | None:
        return self.bars[-1].close if self.bars else None

    def between(self, start: date, end: date) -> "PriceSeries":
        """Return the bars dated within ``[start, end]`` inclusive."""
        return PriceSeries(
            ticker=self.ticker,
            bars=tuple(bar for bar in self.bars if start <= bar.date <= end),
        )

    @classmethod
    def from_closes(
        cls,
        ticker: str,
        closes,
        end: date | None = None,
    ) -> "PriceSeries":
        """
        Build a series from closing prices on consecutive business days.

        Open, high and low are set to the close and volume to zero. The last
        close falls on ``end`` (or the most recent business day on or before
        today when omitted).

        Args:
            ticker: Instrument symbol.
            closes: Iterable of closing prices, oldest first.
            end: Date of the final close.

        Returns:
            PriceSeries with one bar per close.
        """
        values = [float(value) for value in closes]
        if not values:
            return cls(ticker=ticker)
        end_ts = pd.Timestamp(end or date.today())
        trading_days = pd.bdate_range(end=end_ts, periods=len(values))
        bars = tuple(
            PriceBar(date=day.date(), open=value, high=value, low=value, close=value)
            for day, value in zip(trading_days, values)
        )
        return cls(ticker=ticker, bars=bars)

    @classmethod
    def from_frame(cls, ticker: str, frame: pd.DataFrame) -> "PriceSeries":
        """
        Build a series from a DataFrame with OHLCV columns.

        The frame must contain ``date`` and ``close``; missing ``open``,
        ``high`` and ``low`` default to the close and missing ``volume`` to
        zero. Rows are sorted by date before conversion.

        Raises:
            DataIntegrityError: If required columns are missing or dates repeat.
        """
        missing = {"date", "close"} - set(frame.columns)
        if missing:
            raise DataIntegrityError(
                "Price frame is missing required columns",
                context={"ticker": ticker, "missing": sorted(missing)},
            )
        ordered = frame.assign(date=pd.to_datetime(frame["date"])).sort_values("date")
        close = ordered["close"].astype(float)
        bars = tuple(
            PriceBar(
                date=row_date.date(),
                open=float(row_open),
                high=float(row_high),
                low=float(row_low),
                close=float(row_close),
                volume=float(row_volume),
            )
            for row_date, row_open, row_high, row_low, row_close, row_volume in zip(
                ordered["date"],
                ordered.get("open", close),
                ordered.get("high", close),
                ordered.get("low", close),
                close,
                ordered.get("volume", pd.Series(0.0, index=ordered.index)),
            )
        )
        return cls(ticker=ticker, bars=bars)


@dataclass(frozen=True)
class HoldingSnapshot:
    """
    Read-only view of a portfolio holding at analysis time.

    Attributes:
        ticker: Instrument symbol.
        quantity: Units held.
        purchase_price: Average purchase price per unit, if known.
        purchase_date: Date of purchase, if known.
        currency: Currency the instrument is quoted in.
        sector: Sector label used for hedge suggestions.
        asset_class: Asset class of the instrument.
        name: Display name; the ticker is used when absent.
        current_price: Pre-resolved current price, if the caller has one.
    """

    ticker: str
    quantity: float
    purchase_price: float | None = None
    purchase_date: date | None = None
    currency: str = "USD"
    sector: str | None = None
    asset_class: AssetClass = AssetClass.STOCK
    name: str | None = None
    current_price: float | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.ticker

    @property
    def has_ticker(self) -> bool:
        return bool(self.ticker and self.ticker.strip())
