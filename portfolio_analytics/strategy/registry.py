"""Strategy registry and catalogue.

This module provides:
- The catalogue of predefined strategies (descriptions, risk level and
  tunable parameters) offered to callers
- A lightweight in-memory registry mapping strategy ids to backtest rule
  callables and their parameter models

Strategies listed in the catalogue without a rule of their own
(dividend_yield, risk_parity) and unknown ids are backtested with the SMA
crossover rule at its default parameters.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List

from portfolio_analytics.config.parameters import (
    DcaParameters,
    MeanReversionParameters,
    MomentumParameters,
    SmaCrossoverParameters,
    _StrategyParams,
)
from portfolio_analytics.models.backtest import StrategyDefinition, StrategyParameterSpec
from portfolio_analytics.strategy.dca import run_dca
from portfolio_analytics.strategy.mean_reversion import run_mean_reversion
from portfolio_analytics.strategy.momentum import run_momentum
from portfolio_analytics.strategy.sma_crossover import run_sma_crossover

logger = logging.getLogger(__name__)

FALLBACK_STRATEGY_ID = "sma_crossover"


def _param(key: str, label: str, type_: str, default: str, description: str) -> StrategyParameterSpec:
    return StrategyParameterSpec(key=key, label=label, type=type_, default=default, description=description)


STRATEGY_CATALOGUE: tuple[StrategyDefinition, ...] = (
    StrategyDefinition(
        id="sma_crossover",
        name="SMA Crossover",
        category="Trend Following",
        description="Buy when short-term SMA crosses above long-term SMA, sell on reverse cross.",
        risk_level="Medium",
        suitable_for=("Growth-oriented", "Trend traders"),
        parameters=(
            _param("shortPeriod", "Short SMA Period", "int", "20", "Short moving average window"),
            _param("longPeriod", "Long SMA Period", "int", "50", "Long moving average window"),
        ),
    ),
    StrategyDefinition(
        id="mean_reversion",
        name="Mean Reversion",
        category="Mean Reversion",
        description="Buy when price drops below lower Bollinger Band, sell when above upper band.",
        risk_level="Medium",
        suitable_for=("Value investors", "Range-bound markets"),
        parameters=(
            _param("period", "Bollinger Period", "int", "20", "Lookback window"),
            _param("stdDev", "Std Dev Multiplier", "double", "2.0", "Band width"),
        ),
    ),
    StrategyDefinition(
        id="momentum",
        name="Momentum",
        category="Momentum",
        description="Buy assets with strong recent performance (high RSI trend), sell weak performers.",
        risk_level="High",
        suitable_for=("Aggressive traders", "Bull markets"),
        parameters=(
            _param("rsiPeriod", "RSI Period", "int", "14", "RSI lookback"),
            _param("buyThreshold", "Buy RSI Threshold", "int", "30", "Buy when RSI below this"),
            _param("sellThreshold", "Sell RSI Threshold", "int", "70", "Sell when RSI above this"),
        ),
    ),
    StrategyDefinition(
        id="dividend_yield",
        name="Dividend Yield",
        category="Income",
        description="Focus on high-dividend stocks, buy when yield exceeds threshold.",
        risk_level="Low",
        suitable_for=("Income seekers", "Conservative investors"),
        parameters=(
            _param("minYield", "Min Dividend Yield %", "double", "3.0", "Minimum annual yield"),
        ),
        has_backtest_rule=False,
    ),
    StrategyDefinition(
        id="dca",
        name="Dollar Cost Averaging",
        category="Passive",
        description="Invest fixed amount at regular intervals regardless of price.",
        risk_level="Low",
        suitable_for=("Long-term investors", "Beginners"),
        parameters=(
            _param("intervalDays", "Investment Interval (days)", "int", "30", "Days between investments"),
        ),
    ),
    StrategyDefinition(
        id="risk_parity",
        name="Risk Parity",
        category="Portfolio Optimization",
        description=(
            "Allocate capital inversely proportional to asset volatility for equal risk contribution."
        ),
        risk_level="Low",
        suitable_for=("Institutional investors", "Balanced portfolios"),
        parameters=(
            _param("volWindow", "Volatility Window", "int", "60", "Days for volatility calculation"),
        ),
        has_backtest_rule=False,
    ),
)


def get_available_strategies() -> List[StrategyDefinition]:
    """Return the strategy catalogue in display order."""
    return list(STRATEGY_CATALOGUE)


def strategy_name(strategy_id: str) -> str:
    """
    Display name of a catalogue strategy, or the id itself when unknown.

    Examples:
        >>> strategy_name("dca")
        'Dollar Cost Averaging'
        >>> strategy_name("custom")
        'custom'
    """
    for definition in STRATEGY_CATALOGUE:
        if definition.id == strategy_id:
            return definition.name
    return strategy_id


@dataclass(frozen=True)
class RegisteredStrategy:
    """Immutable representation of a registered backtest rule.

    Attributes:
        name: Unique strategy identifier.
        func: Rule callable ``(prices, dates, params) -> trades``.
        parameter_model: Pydantic model validating the rule's parameters.
    """

    name: str
    func: Callable
    parameter_model: type[_StrategyParams]


class StrategyRegistry:
    """In-memory registry for backtest rules.

    Provides simple methods to register and retrieve rules. ``resolve``
    applies the SMA crossover fallback for ids without a rule.
    """

    def __init__(self) -> None:
        self._strategies: Dict[str, RegisteredStrategy] = {}
        logger.debug("Initialized StrategyRegistry (empty)")

    def register(
        self,
        name: str,
        func: Callable,
        parameter_model: type[_StrategyParams],
        overwrite: bool = False,
    ) -> RegisteredStrategy:
        """Register a rule callable.

        Args:
            name: Unique identifier.
            func: Rule callable. Must be deterministic given identical inputs.
            parameter_model: Model used to validate caller parameters.
            overwrite: Allow replacing an existing rule with the same name.

        Returns:
            RegisteredStrategy instance.

        Raises:
            ValueError: If name already exists and overwrite=False.
        """
        if name in self._strategies and not overwrite:
            raise ValueError(f"Strategy '{name}' already registered")

        strategy = RegisteredStrategy(
            name=name,
            func=func,
            parameter_model=parameter_model,
        )
        self._strategies[name] = strategy
        logger.debug("Registered strategy name=%s overwrite=%s", name, overwrite)
        return strategy

    def get(self, name: str) -> RegisteredStrategy:
        """Retrieve a registered rule by name.

        Raises:
            KeyError: If strategy name is unknown.
        """
        return self._strategies[name]

    def resolve(self, name: str) -> RegisteredStrategy:
        """Return the rule for ``name``, or the SMA crossover fallback."""
        if name in self._strategies:
            return self._strategies[name]
        logger.info("No backtest rule for strategy %s; using %s", name, FALLBACK_STRATEGY_ID)
        return self._strategies[FALLBACK_STRATEGY_ID]

    def list(self) -> List[RegisteredStrategy]:
        """Return all registered rules preserving insertion order."""
        return list(self._strategies.values())


def build_default_registry(dca_amount: float = 1000.0) -> StrategyRegistry:
    """
    Registry holding the four built-in backtest rules.

    Args:
        dca_amount: Cash invested per dollar-cost-averaging purchase.

    Examples:
        >>> registry = build_default_registry()
        >>> [s.name for s in registry.list()]
        ['sma_crossover', 'mean_reversion', 'momentum', 'dca']
        >>> registry.resolve("risk_parity").name
        'sma_crossover'
    """
    registry = StrategyRegistry()
    registry.register("sma_crossover", run_sma_crossover, SmaCrossoverParameters)
    registry.register("mean_reversion", run_mean_reversion, MeanReversionParameters)
    registry.register("momentum", run_momentum, MomentumParameters)
    registry.register("dca", partial(run_dca, amount=dca_amount), DcaParameters)
    return registry


__all__ = [
    "FALLBACK_STRATEGY_ID",
    "STRATEGY_CATALOGUE",
    "RegisteredStrategy",
    "StrategyRegistry",
    "build_default_registry",
    "get_available_strategies",
    "strategy_name",
]
