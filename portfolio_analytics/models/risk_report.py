"""
Risk report value objects.

A RiskReport is computed fresh for every request and never mutated
afterwards. Monetary figures are in the report's base currency; ratios and
returns are plain fractions unless a field name ends in ``_pct``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType


@dataclass(frozen=True)
class VaRMetrics:
    """
    Value at Risk estimated three ways, as positive loss amounts.

    Attributes:
        historical: Historical simulation VaR.
        parametric: Variance-covariance (z-score) VaR.
        monte_carlo: Monte Carlo VaR from seeded normal paths.
    """

    historical: float
    parametric: float
    monte_carlo: float


@dataclass(frozen=True)
class HoldingBeta:
    """Beta of one holding against the benchmark, with its portfolio weight."""

    ticker: str
    name: str
    beta: float
    weight: float


@dataclass(frozen=True)
class DrawdownSummary:
    """
    Largest peak-to-trough decline of a compounded value series.

    Attributes:
        max_drawdown: Decline as a fraction of the peak (0.25 == 25%).
        peak_index: Index of the peak in the value series.
        trough_index: Index of the trough in the value series.
        peak_date: Calendar date assigned to the peak index.
        trough_date: Calendar date assigned to the trough index.
    """

    max_drawdown: float
    peak_index: int
    trough_index: int
    peak_date: date | None = None
    trough_date: date | None = None


@dataclass(frozen=True)
class StressScenarioResult:
    """
    Estimated impact of a historical market shock on the portfolio.

    Attributes:
        name: Scenario label.
        description: What the scenario replays.
        market_shock_pct: Benchmark shock in percent (negative for declines).
        estimated_loss: Loss amount (positive) in base currency.
        estimated_loss_pct: Beta-scaled portfolio move in percent.
    """

    name: str
    description: str
    market_shock_pct: float
    estimated_loss: float
    estimated_loss_pct: float


@dataclass(frozen=True)
class MonteCarloDistribution:
    """Summary of simulated cumulative horizon returns."""

    simulations: int
    horizon_days: int
    mean_return: float
    percentile_5: float
    percentile_25: float
    median: float
    percentile_75: float
    percentile_95: float


@dataclass(frozen=True)
class RiskReport:
    """
    Complete risk analytics for one portfolio.

    Benchmark-dependent fields (``portfolio_beta``, ``holding_betas``,
    ``alpha``, ``treynor_ratio``) are None or empty when benchmark history
    is unavailable. Ratios are None when their denominator is ~0.
    """

    portfolio_id: str
    portfolio_value: float
    base_currency: str
    confidence_level: float
    horizon_days: int
    lookback_days: int
    var: VaRMetrics
    cvar_95: float
    cvar_99: float
    daily_volatility: float
    annualized_volatility: float
    max_drawdown: DrawdownSummary
    stress_tests: tuple[StressScenarioResult, ...]
    monte_carlo: MonteCarloDistribution
    observations: int
    weights: Mapping[str, float] = field(default_factory=dict)
    portfolio_beta: float | None = None
    holding_betas: tuple[HoldingBeta, ...] = ()
    alpha: float | None = None
    sharpe_ratio: float | None = None
    sortino_ratio: float | None = None
    treynor_ratio: float | None = None
    excluded_tickers: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    @property
    def has_benchmark(self) -> bool:
        return self.portfolio_beta is not None
