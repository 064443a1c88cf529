"""Live trade signals, tax-loss harvesting and the single-ticker advisor."""

from portfolio_analytics.signals.advisor import TickerAdvisor, position_var, recommend
from portfolio_analytics.signals.generator import (
    SignalGenerator,
    rank_signals,
    rsi_signal,
    sma_crossover_signal,
    tax_loss_candidate,
)


__all__ = [
    "SignalGenerator",
    "TickerAdvisor",
    "position_var",
    "rank_signals",
    "recommend",
    "rsi_signal",
    "sma_crossover_signal",
    "tax_loss_candidate",
]
