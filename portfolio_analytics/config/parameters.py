"""
Analytics settings and strategy parameter configuration using Pydantic.

This module provides type-safe validation and loading for the engine-wide
settings (risk-free rate, thresholds, simulation size) and for the
per-strategy backtest parameters.

Strategy parameters arrive from callers as loosely typed ``{key: value}``
maps using camelCase keys (``shortPeriod``, ``stdDev``...). A value that
cannot be parsed, or that falls outside its valid range, is replaced by its
documented default and a warning is logged; it never fails the request.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)


class AnalyticsSettings(BaseModel):
    """
    Engine-wide configuration shared by all analytics components.

    Attributes:
        risk_free_rate: Annual risk-free rate used in alpha and ratios (default: 0.05).
        trading_days_per_year: Annualization factor (default: 252).
        benchmark_ticker: Benchmark instrument (default: "SPY").
        base_currency: Currency risk reports are expressed in (default: "USD").
        monte_carlo_simulations: Number of simulated paths (default: 10000).
        monte_carlo_seed: Seed for the simulation generator (default: 42).
        high_correlation_threshold: Lower bound of "highly correlated" (default: 0.70).
        very_high_correlation_threshold: Lower bound of "Very High" (default: 0.90).
        negative_correlation_threshold: Upper bound of "negatively correlated" (default: -0.30).
        strong_hedge_threshold: Upper bound of "Strong Hedge" (default: -0.70).
        rolling_windows: Short, medium and long rolling windows (default: (30, 90, 252)).
        rolling_top_pairs: Pairs that get rolling correlations (default: 5).
        trend_threshold: Short-minus-long difference that marks a trend (default: 0.10).
        signal_lookback_days: Calendar days of history for live signals (default: 100).
        min_signal_history: Closes required before signals are evaluated (default: 30).
        min_backtest_points: Closes required for a backtest (default: 50).
        advisor_min_lookback_days: Minimum advisor lookback (default: 60).
        advisor_min_history: Closes required by the advisor (default: 30).
        tax_loss_threshold: Loss fraction that qualifies for harvesting (default: -0.05).
        strong_tax_loss_threshold: Loss fraction marking a strong candidate (default: -0.20).
        dca_amount: Cash invested per dollar-cost-averaging period (default: 1000).
    """

    risk_free_rate: float = Field(default=0.05, ge=0.0, le=0.5)
    trading_days_per_year: int = Field(default=252, gt=0, le=366)
    benchmark_ticker: str = Field(default="SPY", min_length=1)
    base_currency: str = Field(default="USD", min_length=3, max_length=3)

    # Monte Carlo
    monte_carlo_simulations: int = Field(default=10_000, gt=0, le=1_000_000)
    monte_carlo_seed: int = Field(default=42, ge=0)

    # Correlation classification
    high_correlation_threshold: float = Field(default=0.70, ge=0.0, le=1.0)
    very_high_correlation_threshold: float = Field(default=0.90, ge=0.0, le=1.0)
    negative_correlation_threshold: float = Field(default=-0.30, ge=-1.0, le=0.0)
    strong_hedge_threshold: float = Field(default=-0.70, ge=-1.0, le=0.0)
    rolling_windows: tuple[int, int, int] = (30, 90, 252)
    rolling_top_pairs: int = Field(default=5, ge=0, le=100)
    trend_threshold: float = Field(default=0.10, ge=0.0, le=2.0)

    # Signals and backtests
    signal_lookback_days: int = Field(default=100, gt=0)
    min_signal_history: int = Field(default=30, gt=1)
    min_backtest_points: int = Field(default=50, gt=1)
    advisor_min_lookback_days: int = Field(default=60, gt=0)
    advisor_min_history: int = Field(default=30, gt=1)
    tax_loss_threshold: float = Field(default=-0.05, ge=-1.0, le=0.0)
    strong_tax_loss_threshold: float = Field(default=-0.20, ge=-1.0, le=0.0)
    dca_amount: float = Field(default=1000.0, gt=0.0)

    @field_validator("very_high_correlation_threshold")
    @classmethod
    def very_high_must_exceed_high(cls, v, info):
        """Validate that the very-high band sits above the high band."""
        if "high_correlation_threshold" in info.data and v < info.data["high_correlation_threshold"]:
            raise ValueError(
                "very_high_correlation_threshold must be >= high_correlation_threshold"
            )
        return v

    @field_validator("strong_hedge_threshold")
    @classmethod
    def strong_hedge_must_be_below_negative(cls, v, info):
        """Validate that the strong-hedge band sits below the negative band."""
        if (
            "negative_correlation_threshold" in info.data
            and v > info.data["negative_correlation_threshold"]
        ):
            raise ValueError(
                "strong_hedge_threshold must be <= negative_correlation_threshold"
            )
        return v

    @field_validator("rolling_windows")
    @classmethod
    def windows_must_be_positive(cls, v):
        """Validate that every rolling window holds at least two returns."""
        if any(window < 2 for window in v):
            raise ValueError("rolling windows must be >= 2")
        return v

    @field_validator("strong_tax_loss_threshold")
    @classmethod
    def strong_loss_must_exceed_loss(cls, v, info):
        """Validate that the strong threshold is a deeper loss."""
        if "tax_loss_threshold" in info.data and v > info.data["tax_loss_threshold"]:
            raise ValueError("strong_tax_loss_threshold must be <= tax_loss_threshold")
        return v

    @property
    def daily_risk_free_rate(self) -> float:
        return self.risk_free_rate / self.trading_days_per_year


def load_settings(config_dict: dict | None = None) -> AnalyticsSettings:
    """
    Load and validate analytics settings from a configuration dictionary.

    Args:
        config_dict: Optional dictionary of setting overrides. If None,
            default values are used.

    Returns:
        Validated AnalyticsSettings instance.

    Raises:
        ValidationError: If any setting values are invalid.

    Examples:
        >>> settings = load_settings()
        >>> settings.benchmark_ticker
        'SPY'

        >>> load_settings({"monte_carlo_seed": 7}).monte_carlo_seed
        7
    """
    if config_dict is None:
        config_dict = {}
    return AnalyticsSettings(**config_dict)


class _StrategyParams(BaseModel):
    """Base for strategy parameter models accepting camelCase aliases."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    def as_dict(self) -> dict[str, float]:
        """Return parameters keyed by their camelCase names."""
        return self.model_dump(by_alias=True)


class SmaCrossoverParameters(_StrategyParams):
    """
    SMA crossover parameters.

    Attributes:
        short_period: Short moving average window (default: 20).
        long_period: Long moving average window (default: 50).
    """

    short_period: int = Field(default=20, alias="shortPeriod", gt=0, le=500)
    long_period: int = Field(default=50, alias="longPeriod", gt=0, le=1000)


class MeanReversionParameters(_StrategyParams):
    """
    Bollinger-band mean reversion parameters.

    Attributes:
        period: Rolling window (default: 20).
        std_dev: Band width in standard deviations (default: 2.0).
    """

    period: int = Field(default=20, gt=1, le=500)
    std_dev: float = Field(default=2.0, alias="stdDev", gt=0.0, le=10.0)


class MomentumParameters(_StrategyParams):
    """
    RSI momentum parameters.

    Attributes:
        rsi_period: RSI lookback (default: 14).
        buy_threshold: Buy when RSI drops below this (default: 30).
        sell_threshold: Sell when RSI rises above this (default: 70).
    """

    rsi_period: int = Field(default=14, alias="rsiPeriod", gt=0, le=200)
    buy_threshold: float = Field(default=30.0, alias="buyThreshold", ge=0.0, le=100.0)
    sell_threshold: float = Field(default=70.0, alias="sellThreshold", ge=0.0, le=100.0)


class DcaParameters(_StrategyParams):
    """
    Dollar-cost-averaging parameters.

    Attributes:
        interval_days: Trading days between purchases (default: 30).
    """

    interval_days: int = Field(default=30, alias="intervalDays", gt=0, le=1000)


def load_strategy_parameters(model: type[_StrategyParams], raw: dict | None = None):
    """
    Build a strategy parameter model, falling back to defaults per field.

    Each supplied field is validated on its own; an invalid one is dropped
    and logged so the remaining overrides still apply. Unknown keys are
    ignored.

    Args:
        model: Parameter model class to build.
        raw: Caller-supplied parameters keyed by camelCase or snake_case name.

    Returns:
        Validated parameter model instance.

    Examples:
        >>> load_strategy_parameters(SmaCrossoverParameters, {"shortPeriod": "5"}).short_period
        5
        >>> load_strategy_parameters(SmaCrossoverParameters, {"shortPeriod": "abc"}).short_period
        20
    """
    accepted: dict = {}
    for key, value in (raw or {}).items():
        field_name = _resolve_field(model, key)
        if field_name is None:
            logger.debug("Ignoring unknown parameter %s for %s", key, model.__name__)
            continue
        try:
            model.model_validate({field_name: value})
        except ValidationError:
            default = model.model_fields[field_name].default
            logger.warning(
                "Invalid value %r for parameter %s; using default %s", value, key, default
            )
            continue
        accepted[field_name] = value
    return model.model_validate(accepted)


def _resolve_field(model: type[_StrategyParams], key: str) -> str | None:
    for name, info in model.model_fields.items():
        if key == name or key == info.alias:
            return name
    return None
