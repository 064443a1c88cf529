"""Beta-scaled historical stress scenarios."""

import logging
from collections.abc import Iterable

from portfolio_analytics.config.tables import STRESS_SCENARIOS, StressScenario
from portfolio_analytics.models.risk_report import StressScenarioResult


logger = logging.getLogger(__name__)


def apply_stress_scenarios(
    portfolio_value: float,
    beta: float | None,
    scenarios: Iterable[StressScenario] = STRESS_SCENARIOS,
) -> tuple[StressScenarioResult, ...]:
    """
    Estimate the portfolio impact of each market shock.

    The portfolio move is ``shock * beta``; the loss amount is its absolute
    value times the portfolio value. A missing beta is treated as 1.0.

    Args:
        portfolio_value: Current portfolio value.
        beta: Portfolio beta, or None without benchmark data.
        scenarios: Scenario table.

    Returns:
        One result per scenario, in table order.

    Examples:
        >>> result = apply_stress_scenarios(10_000.0, 1.2)[0]
        >>> round(result.estimated_loss, 2), round(result.estimated_loss_pct, 2)
        (6816.0, -68.16)
    """
    effective_beta = 1.0 if beta is None else beta
    results = []
    for scenario in scenarios:
        loss_fraction = scenario.market_shock_pct * effective_beta / 100.0
        results.append(
            StressScenarioResult(
                name=scenario.name,
                description=scenario.description,
                market_shock_pct=scenario.market_shock_pct,
                estimated_loss=abs(loss_fraction) * portfolio_value,
                estimated_loss_pct=loss_fraction * 100.0,
            )
        )
    logger.debug("Applied %d stress scenarios with beta %.4f", len(results), effective_beta)
    return tuple(results)
