"""Single-ticker advisory summary.

Computes a small indicator snapshot (SMA20, EMA20, RSI14, MACD 12/26,
annualized volatility), the historical one-day VaR of a position and a
BUY/SELL/HOLD recommendation from a fixed decision table:

==========  ==============================================
BUY         price > SMA20 and MACD > 0 and RSI < 70
SELL        price < SMA20 and MACD < 0 and RSI > 30
HOLD        anything else
==========  ==============================================

The advisor uses the unsmoothed RSI and a simplified MACD signal line (the
MACD value itself).
"""

import logging
import math
from datetime import date, timedelta

import numpy as np
from numpy.typing import ArrayLike

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.indicators.basic import ema, macd, simple_rsi, sma_at
from portfolio_analytics.io.pricing import resolve_current_price
from portfolio_analytics.io.sources import PriceHistorySource, QuoteSource
from portfolio_analytics.models.enums import SignalAction
from portfolio_analytics.models.exceptions import InputError
from portfolio_analytics.models.signal import (
    AdvisoryIndicators,
    AdvisoryRisk,
    AdvisorySummary,
    ChartPoint,
)
from portfolio_analytics.timeseries.returns import simple_returns
from portfolio_analytics.timeseries.stats import stddev


logger = logging.getLogger(__name__)

DEFAULT_POSITION_VALUE = 10_000.0

BUY_RATIONALE = "Price above trend (SMA20), positive momentum (MACD), RSI not overbought."
SELL_RATIONALE = "Price below trend with negative momentum."
HOLD_RATIONALE = "Signals are mixed; wait for clearer setup."


def position_var(returns: ArrayLike, confidence: float, position_value: float) -> float:
    """
    Historical one-day VaR of a position as a positive amount.

    Takes the sorted return at index ``floor((1 - confidence) * n) - 1``
    (at least 0); a non-negative tail return gives 0.

    Examples:
        >>> position_var([-0.05, -0.02, 0.01, 0.03], 0.5, 1000.0)
        20.0
        >>> position_var([0.01, 0.02], 0.95, 1000.0)
        0.0
        >>> position_var([], 0.95, 1000.0)
        0.0
    """
    ordered = np.sort(np.asarray(returns, dtype=np.float64))
    if ordered.size == 0:
        return 0.0
    index = max(0, math.floor((1.0 - confidence) * ordered.size) - 1)
    return abs(min(float(ordered[index]), 0.0)) * position_value


def recommend(price: float, sma20: float, macd_value: float, rsi: float) -> tuple[SignalAction, str]:
    """
    Apply the advisory decision table.

    Examples:
        >>> recommend(105.0, 100.0, 1.2, 55.0)[0].value
        'BUY'
        >>> recommend(95.0, 100.0, -1.2, 45.0)[0].value
        'SELL'
        >>> recommend(105.0, 100.0, 1.2, 75.0)[0].value
        'HOLD'
    """
    if price > sma20 and macd_value > 0 and rsi < 70:
        return SignalAction.BUY, BUY_RATIONALE
    if price < sma20 and macd_value < 0 and rsi > 30:
        return SignalAction.SELL, SELL_RATIONALE
    return SignalAction.HOLD, HOLD_RATIONALE


class TickerAdvisor:
    """Builds advisory summaries for single tickers.

    Attributes:
        prices: Price-history collaborator
        quotes: Quote collaborator for the current price
        settings: Minimum lookback/history and annualization factor
    """

    def __init__(
        self,
        prices: PriceHistorySource,
        quotes: QuoteSource | None = None,
        settings: AnalyticsSettings | None = None,
    ):
        self.prices = prices
        self.quotes = quotes
        self.settings = settings or AnalyticsSettings()

    def analyze(
        self,
        ticker: str,
        position_value: float = DEFAULT_POSITION_VALUE,
        lookback_days: int = 365,
        as_of: date | None = None,
    ) -> AdvisorySummary:
        """
        Analyze one ticker.

        Args:
            ticker: Instrument symbol (case-insensitive).
            position_value: Position size the VaR figures apply to.
            lookback_days: Calendar days of history; raised to the minimum
                advisor lookback when shorter.
            as_of: Last day of the window (default: today).

        Returns:
            AdvisorySummary for the ticker.

        Raises:
            InputError: If the ticker is blank or has too little history.
        """
        settings = self.settings
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise InputError("Ticker is required")

        end = as_of or date.today()
        start = end - timedelta(days=max(lookback_days, settings.advisor_min_lookback_days))
        series = self.prices.get_closing_prices(ticker, start, end)
        if len(series) < settings.advisor_min_history:
            raise InputError(
                f"Not enough historical data for {ticker}",
                hint="Sync price history first",
                context={"points": len(series)},
            )

        closes = series.closes
        last = float(closes[-1])
        macd_value = float(macd(closes, 12, 26)[-1])
        returns = simple_returns(closes)
        volatility = (
            stddev(returns) * math.sqrt(settings.trading_days_per_year) if returns.size >= 2 else 0.0
        )
        indicators = AdvisoryIndicators(
            sma20=sma_at(closes, closes.size - 1, 20),
            ema20=float(ema(closes, 20)[-1]),
            rsi14=simple_rsi(closes, 14),
            macd=macd_value,
            signal9=macd_value,
            annualized_volatility=volatility,
        )
        risk = AdvisoryRisk(
            position_value=position_value,
            var_95=position_var(returns, 0.95, position_value),
            var_99=position_var(returns, 0.99, position_value),
        )
        action, rationale = recommend(last, indicators.sma20, indicators.macd, indicators.rsi14)

        current = resolve_current_price(ticker, self.quotes, series)
        previous = float(closes[-2])
        change_pct = (last - previous) / previous * 100.0 if previous != 0 else None

        logger.info(
            "Advisory for %s: %s (price=%.2f, rsi=%.1f, macd=%.4f)",
            ticker,
            action.value,
            last,
            indicators.rsi14,
            macd_value,
        )
        return AdvisorySummary(
            ticker=ticker,
            current_price=current if current is not None else last,
            change_pct=change_pct,
            indicators=indicators,
            risk=risk,
            recommendation=action,
            rationale=rationale,
            chart=tuple(ChartPoint(day, close) for day, close in zip(series.dates, closes.tolist())),
        )
