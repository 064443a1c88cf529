"""Data models and entities."""

from portfolio_analytics.models.backtest import BacktestResult, StrategyDefinition, StrategyParameterSpec, TradeRecord
from portfolio_analytics.models.core import HoldingSnapshot, PriceBar, PriceSeries
from portfolio_analytics.models.correlation import CorrelatedPair, CorrelationReport, HedgeSuggestion, RollingCorrelation
from portfolio_analytics.models.enums import AssetClass, PositionState, SignalAction
from portfolio_analytics.models.exceptions import (
    AccessError,
    AnalyticsError,
    DataGapError,
    DataIntegrityError,
    InputError,
)
from portfolio_analytics.models.risk_report import RiskReport
from portfolio_analytics.models.signal import AdvisorySummary, PortfolioSignals, TaxLossCandidate, TradeSignal

__all__ = [
    "AccessError",
    "AdvisorySummary",
    "AnalyticsError",
    "AssetClass",
    "BacktestResult",
    "CorrelatedPair",
    "CorrelationReport",
    "DataGapError",
    "DataIntegrityError",
    "HedgeSuggestion",
    "HoldingSnapshot",
    "InputError",
    "PortfolioSignals",
    "PositionState",
    "PriceBar",
    "PriceSeries",
    "RiskReport",
    "RollingCorrelation",
    "SignalAction",
    "StrategyDefinition",
    "StrategyParameterSpec",
    "TaxLossCandidate",
    "TradeRecord",
    "TradeSignal",
]
