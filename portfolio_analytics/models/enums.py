"""
Enumerations shared across the analytics engines.

All enumerations inherit from str so that values serialize directly to JSON
and compare equal to their plain string labels.
"""

from enum import Enum


class AssetClass(str, Enum):
    """
    Asset class of a portfolio holding.

    Examples:
        >>> AssetClass.ETF.value
        'ETF'
        >>> AssetClass.STOCK.is_equity_like
        True
        >>> AssetClass.BOND.is_equity_like
        False
    """

    STOCK = "STOCK"
    BOND = "BOND"
    OPTION = "OPTION"
    CASH = "CASH"
    REAL_ESTATE = "REAL_ESTATE"
    RETIREMENT_FUND = "RETIREMENT_FUND"
    CRYPTOCURRENCY = "CRYPTOCURRENCY"
    REIT = "REIT"
    ETF = "ETF"
    MUTUAL_FUND = "MUTUAL_FUND"

    @property
    def is_equity_like(self) -> bool:
        """True for instruments eligible for correlation and signal analysis."""
        return self in (AssetClass.STOCK, AssetClass.ETF)


class SignalAction(str, Enum):
    """
    Advisory action attached to a trade signal or recommendation.

    Attributes:
        BUY: Open or add to a position.
        SELL: Reduce or close a position.
        HOLD: Keep the current position.
    """

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"

    @property
    def rank(self) -> int:
        """Sort rank used when ordering signals (BUY first, HOLD last)."""
        return {"BUY": 0, "SELL": 1}.get(self.value, 2)


class PositionState(str, Enum):
    """Backtest position state: either flat or long one unit."""

    FLAT = "FLAT"
    LONG = "LONG"


class CorrelationTrend(str, Enum):
    """Direction of the short-window correlation relative to the long window."""

    INCREASING = "Increasing"
    DECREASING = "Decreasing"
    STABLE = "Stable"
    NOT_AVAILABLE = "N/A"


class DiversificationRating(str, Enum):
    """Banded diversification score label."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    VERY_POOR = "Very Poor"


class OutputFormat(str, Enum):
    """
    CLI output format enumeration.

    Attributes:
        TEXT: Human-readable tables (default).
        JSON: Machine-readable JSON for programmatic use.
    """

    TEXT = "text"
    JSON = "json"
