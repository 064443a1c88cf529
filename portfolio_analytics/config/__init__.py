"""Settings, strategy parameters and fixed lookup tables."""

from portfolio_analytics.config.parameters import AnalyticsSettings, load_settings, load_strategy_parameters
from portfolio_analytics.config.tables import PORTFOLIO_HEDGES, SECTOR_HEDGES, STRESS_SCENARIOS, Z_SCORES

__all__ = [
    "AnalyticsSettings",
    "PORTFOLIO_HEDGES",
    "SECTOR_HEDGES",
    "STRESS_SCENARIOS",
    "Z_SCORES",
    "load_settings",
    "load_strategy_parameters",
]
