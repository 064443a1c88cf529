"""Technical indicators used by strategies, signals and the advisor."""

from portfolio_analytics.indicators.basic import (
    ema,
    macd,
    rolling_std,
    simple_rsi,
    sma,
    sma_at,
    validate_indicator_inputs,
    wilder_rsi,
)


__all__ = [
    "ema",
    "macd",
    "rolling_std",
    "simple_rsi",
    "sma",
    "sma_at",
    "validate_indicator_inputs",
    "wilder_rsi",
]
