"""
Advisory signal models.

Signals are advisory records only: nothing in the core acts on them.
"""

from dataclasses import dataclass
from datetime import date

from portfolio_analytics.models.enums import SignalAction


@dataclass(frozen=True)
class TradeSignal:
    """
    Per-holding advisory signal from one rule.

    Attributes:
        ticker: Holding ticker.
        holding_name: Display name of the holding.
        action: BUY, SELL or HOLD.
        strategy_source: Rule that produced the signal.
        rationale: Human-readable explanation.
        confidence: Fixed confidence constant of the rule (0-1).
        current_price: Price the signal was evaluated at.
        target_price: Suggested target, when the rule defines one.
        stop_loss: Suggested stop, when the rule defines one.
    """

    ticker: str
    holding_name: str
    action: SignalAction
    strategy_source: str
    rationale: str
    confidence: float
    current_price: float
    target_price: float | None = None
    stop_loss: float | None = None


@dataclass(frozen=True)
class TaxLossCandidate:
    """
    Holding trading far enough below cost to harvest a tax loss.

    Attributes:
        unrealized_loss: ``(current - purchase) * quantity`` (negative).
        unrealized_loss_pct: Loss in percent of purchase price (negative).
        strong_candidate: True when the loss is at or beyond the strong threshold.
    """

    ticker: str
    name: str
    purchase_price: float
    current_price: float
    unrealized_loss: float
    unrealized_loss_pct: float
    strong_candidate: bool
    suggestion: str


@dataclass(frozen=True)
class PortfolioSignals:
    """Ranked signals and tax-loss candidates for one portfolio."""

    portfolio_id: str
    signals: tuple[TradeSignal, ...]
    tax_loss_candidates: tuple[TaxLossCandidate, ...]


@dataclass(frozen=True)
class AdvisoryIndicators:
    """Indicator snapshot used by the single-ticker advisor."""

    sma20: float
    ema20: float
    rsi14: float
    macd: float
    signal9: float
    annualized_volatility: float


@dataclass(frozen=True)
class AdvisoryRisk:
    """Historical one-day VaR of a position, as positive amounts."""

    position_value: float
    var_95: float
    var_99: float


@dataclass(frozen=True)
class ChartPoint:
    date: date
    close: float


@dataclass(frozen=True)
class AdvisorySummary:
    """
    Indicators, risk and recommendation for one ticker.

    Attributes:
        ticker: Normalized (upper-case) ticker.
        current_price: Live quote, or the last close when no quote exists.
        change_pct: Day-over-day change in percent, if computable.
        recommendation: BUY, SELL or HOLD from the decision table.
        rationale: Explanation of the recommendation.
        chart: Closing prices used for the analysis.
    """

    ticker: str
    current_price: float
    change_pct: float | None
    indicators: AdvisoryIndicators
    risk: AdvisoryRisk
    recommendation: SignalAction
    rationale: str
    chart: tuple[ChartPoint, ...]
