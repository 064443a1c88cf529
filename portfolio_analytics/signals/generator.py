"""Live trade signals and tax-loss harvesting candidates for a portfolio.

Two independent rules are evaluated on every stock/ETF holding with enough
history:

- SMA crossover (20/50): golden cross BUY, death cross SELL, trend-following
  HOLD while price sits above a rising short average.
- RSI (14): oversold BUY, overbought SELL.

Each rule may fire or abstain. Confidence values are fixed per rule and
outcome; they are not derived from the data. Signals are ordered BUY, SELL,
HOLD and then by descending confidence.
"""

import logging
from datetime import date, timedelta

from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.indicators.basic import sma_at, wilder_rsi
from portfolio_analytics.io.pricing import resolve_current_price
from portfolio_analytics.io.sources import PriceHistorySource, QuoteSource
from portfolio_analytics.models.core import HoldingSnapshot, PriceSeries
from portfolio_analytics.models.enums import SignalAction
from portfolio_analytics.models.signal import PortfolioSignals, TaxLossCandidate, TradeSignal


logger = logging.getLogger(__name__)

SMA_SOURCE = "SMA Crossover (20/50)"
RSI_SOURCE = "RSI (14-period)"
SMA_SHORT = 20
SMA_LONG = 50
RSI_PERIOD = 14
RSI_MIN_HISTORY = 20
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0

STRONG_HARVEST_SUGGESTION = (
    "Strong candidate: sell to harvest loss and buy similar ETF after 30-day wash sale period"
)
HARVEST_SUGGESTION = (
    "Consider selling to offset capital gains; replace with sector ETF to maintain exposure"
)


def sma_crossover_signal(holding: HoldingSnapshot, closes) -> TradeSignal | None:
    """
    Evaluate the 20/50-day SMA crossover rule at the last close.

    Needs at least 50 closes; returns None when the rule abstains.
    """
    n = len(closes)
    if n < SMA_LONG:
        return None

    price = float(closes[-1])
    sma20 = sma_at(closes, n - 1, SMA_SHORT)
    sma50 = sma_at(closes, n - 1, SMA_LONG)
    prev_sma20 = sma_at(closes, n - 2, SMA_SHORT)
    prev_sma50 = sma_at(closes, n - 2, SMA_LONG)

    if prev_sma20 <= prev_sma50 and sma20 > sma50:
        return _signal(
            holding, SignalAction.BUY, SMA_SOURCE,
            "Golden cross: 20-day SMA crossed above 50-day SMA, indicating bullish momentum",
            0.75, price, price * 1.10, price * 0.95,
        )
    if prev_sma20 >= prev_sma50 and sma20 < sma50:
        return _signal(
            holding, SignalAction.SELL, SMA_SOURCE,
            "Death cross: 20-day SMA crossed below 50-day SMA, indicating bearish momentum",
            0.70, price, price * 0.90, price * 1.03,
        )
    if sma20 > sma50 and price > sma20:
        return _signal(
            holding, SignalAction.HOLD, SMA_SOURCE,
            "Price above both SMAs with positive trend, maintain position",
            0.60, price,
        )
    return None


def rsi_signal(holding: HoldingSnapshot, closes) -> TradeSignal | None:
    """
    Evaluate the 14-period RSI rule at the last close.

    Needs at least 20 closes; returns None when RSI is between the bands.
    """
    if len(closes) < RSI_MIN_HISTORY:
        return None
    values = wilder_rsi(closes, RSI_PERIOD)
    if values.size == 0:
        return None

    rsi = float(values[-1])
    price = float(closes[-1])
    if rsi < RSI_OVERSOLD:
        return _signal(
            holding, SignalAction.BUY, RSI_SOURCE,
            f"RSI at {rsi:.1f} (oversold < 30), potential bounce opportunity",
            0.70, price, price * 1.08, price * 0.95,
        )
    if rsi > RSI_OVERBOUGHT:
        return _signal(
            holding, SignalAction.SELL, RSI_SOURCE,
            f"RSI at {rsi:.1f} (overbought > 70), consider taking profits",
            0.65, price, price * 0.92, price * 1.03,
        )
    return None


def rank_signals(signals: list[TradeSignal]) -> list[TradeSignal]:
    """Order signals BUY, SELL, HOLD, then by descending confidence."""
    return sorted(signals, key=lambda s: (s.action.rank, -s.confidence))


def tax_loss_candidate(
    holding: HoldingSnapshot,
    current_price: float | None,
    threshold: float = -0.05,
    strong_threshold: float = -0.20,
) -> TaxLossCandidate | None:
    """
    Check whether a holding qualifies for tax-loss harvesting.

    Args:
        holding: Holding with its purchase price.
        current_price: Resolved current price.
        threshold: Loss fraction that qualifies (default: -5%).
        strong_threshold: Loss fraction marking a strong candidate (default: -20%).

    Returns:
        TaxLossCandidate, or None when the holding does not qualify.

    Examples:
        >>> h = HoldingSnapshot(ticker="AAA", quantity=10, purchase_price=100.0)
        >>> tax_loss_candidate(h, 90.0).unrealized_loss
        -100.0
        >>> tax_loss_candidate(h, 97.0) is None
        True
    """
    purchase = holding.purchase_price
    if purchase is None or purchase <= 0 or current_price is None or current_price >= purchase:
        return None
    loss_fraction = (current_price - purchase) / purchase
    if loss_fraction > threshold:
        return None
    strong = loss_fraction <= strong_threshold
    return TaxLossCandidate(
        ticker=holding.ticker,
        name=holding.display_name,
        purchase_price=purchase,
        current_price=current_price,
        unrealized_loss=(current_price - purchase) * holding.quantity,
        unrealized_loss_pct=loss_fraction * 100.0,
        strong_candidate=strong,
        suggestion=STRONG_HARVEST_SUGGESTION if strong else HARVEST_SUGGESTION,
    )


def _signal(
    holding: HoldingSnapshot,
    action: SignalAction,
    source: str,
    rationale: str,
    confidence: float,
    price: float,
    target: float | None = None,
    stop: float | None = None,
) -> TradeSignal:
    return TradeSignal(
        ticker=holding.ticker,
        holding_name=holding.display_name,
        action=action,
        strategy_source=source,
        rationale=rationale,
        confidence=confidence,
        current_price=price,
        target_price=target,
        stop_loss=stop,
    )


class SignalGenerator:
    """Generates ranked signals and tax-loss candidates for portfolios.

    Attributes:
        prices: Price-history collaborator
        quotes: Quote collaborator used for tax-loss current prices
        settings: Lookback, minimum history and tax-loss thresholds
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

    def generate(
        self,
        portfolio_id: str,
        holdings: list[HoldingSnapshot],
        as_of: date | None = None,
    ) -> PortfolioSignals:
        """
        Evaluate signal rules and tax-loss candidates for every holding.

        Holdings without enough history are skipped for signals but still
        checked for tax-loss harvesting.

        Args:
            portfolio_id: Portfolio identifier, carried into the result.
            holdings: Holdings of the portfolio.
            as_of: Evaluation date (default: today).

        Returns:
            PortfolioSignals with ranked signals and candidates sorted by
            most negative loss percent first.
        """
        settings = self.settings
        end = as_of or date.today()
        start = end - timedelta(days=settings.signal_lookback_days)

        signals: list[TradeSignal] = []
        candidates: list[TaxLossCandidate] = []
        for holding in holdings:
            series = None
            if holding.has_ticker and holding.asset_class.is_equity_like:
                series = self.prices.get_closing_prices(holding.ticker, start, end)
                signals.extend(self._evaluate(holding, series))

            candidate = self._tax_loss(holding, series)
            if candidate is not None:
                candidates.append(candidate)

        candidates.sort(key=lambda c: c.unrealized_loss_pct)
        ranked = rank_signals(signals)
        logger.info(
            "Signals for portfolio %s: %d signals, %d tax-loss candidates",
            portfolio_id,
            len(ranked),
            len(candidates),
        )
        return PortfolioSignals(
            portfolio_id=portfolio_id,
            signals=tuple(ranked),
            tax_loss_candidates=tuple(candidates),
        )

    def _evaluate(self, holding: HoldingSnapshot, series: PriceSeries) -> list[TradeSignal]:
        if len(series) < self.settings.min_signal_history:
            logger.debug(
                "Skipping signals for %s: %d closes", holding.ticker, len(series)
            )
            return []
        closes = series.closes
        fired = [sma_crossover_signal(holding, closes), rsi_signal(holding, closes)]
        return [signal for signal in fired if signal is not None]

    def _tax_loss(
        self, holding: HoldingSnapshot, series: PriceSeries | None
    ) -> TaxLossCandidate | None:
        if holding.purchase_price is None:
            return None
        if holding.has_ticker:
            price = resolve_current_price(holding.ticker, self.quotes, series, holding)
        else:
            price = holding.current_price
        return tax_loss_candidate(
            holding,
            price,
            self.settings.tax_loss_threshold,
            self.settings.strong_tax_loss_threshold,
        )
