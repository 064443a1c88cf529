"""Risk analytics: VaR, CVaR, beta, ratios, drawdown and stress tests."""

from portfolio_analytics.risk.engine import RiskAnalyticsEngine
from portfolio_analytics.risk.stress import apply_stress_scenarios
from portfolio_analytics.risk.var import (
    conditional_var,
    historical_var,
    monte_carlo_distribution,
    monte_carlo_var,
    parametric_var,
    simulate_horizon_returns,
)

__all__ = [
    "RiskAnalyticsEngine",
    "apply_stress_scenarios",
    "conditional_var",
    "historical_var",
    "monte_carlo_distribution",
    "monte_carlo_var",
    "parametric_var",
    "simulate_horizon_returns",
]
