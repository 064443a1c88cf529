"""
Value at Risk, expected shortfall and Monte Carlo simulation.

Loss figures are returned as positive amounts in the currency of
``portfolio_value``. A tail that contains no loss reports 0.

Monte Carlo paths are drawn from a generator created from an explicit
seed, so identical inputs always give bit-identical results and no
process-global random state is touched.
"""

import logging
import math

import numpy as np
from numpy.typing import ArrayLike, NDArray

from portfolio_analytics.config.tables import Z_SCORES, z_score_for
from portfolio_analytics.models.risk_report import MonteCarloDistribution
from portfolio_analytics.timeseries.stats import clamp_index, mean, percentile, stddev


logger = logging.getLogger(__name__)

DEFAULT_SIMULATIONS = 10_000
DEFAULT_SEED = 42


def historical_var(
    returns: ArrayLike,
    confidence: float,
    horizon_days: int,
    portfolio_value: float,
) -> float:
    """
    Historical-simulation VaR.

    Sorts returns ascending and takes the return at index
    ``floor((1 - confidence) * n)`` (clamped), negated and scaled by
    ``sqrt(horizon_days)``.

    Args:
        returns: Daily portfolio returns.
        confidence: Confidence level in (0, 1), e.g. 0.95.
        horizon_days: Holding period in days.
        portfolio_value: Current portfolio value.

    Returns:
        VaR as a positive amount (0 for an empty series).

    Examples:
        >>> historical_var([-0.05, -0.02, 0.01, 0.03], 0.75, 1, 1000.0)
        20.0
    """
    sorted_returns = np.sort(np.asarray(returns, dtype=np.float64))
    n = sorted_returns.size
    if n == 0:
        return 0.0
    index = clamp_index(int(math.floor((1.0 - confidence) * n)), n)
    daily_var = -float(sorted_returns[index])
    return max(0.0, daily_var) * math.sqrt(horizon_days) * portfolio_value


def parametric_var(
    daily_volatility: float,
    confidence: float,
    horizon_days: int,
    portfolio_value: float,
    z_table: tuple[tuple[float, float], ...] = Z_SCORES,
) -> float:
    """
    Variance-covariance VaR: ``z(confidence) * vol * sqrt(h) * V``.

    Examples:
        >>> round(parametric_var(0.01, 0.95, 1, 1000.0), 4)
        16.45
    """
    z_value = z_score_for(confidence, z_table)
    return max(0.0, z_value * daily_volatility * math.sqrt(horizon_days) * portfolio_value)


def simulate_horizon_returns(
    daily_mean: float,
    daily_volatility: float,
    horizon_days: int,
    simulations: int = DEFAULT_SIMULATIONS,
    seed: int = DEFAULT_SEED,
) -> NDArray[np.float64]:
    """
    Simulate cumulative horizon returns with independent normal daily draws.

    Each path is ``sum(mu + sigma * N(0, 1))`` over ``horizon_days`` draws.

    Args:
        daily_mean: Mean daily return (mu).
        daily_volatility: Daily standard deviation (sigma).
        horizon_days: Days per path.
        simulations: Number of paths.
        seed: Seed for ``numpy.random.default_rng``.

    Returns:
        Simulated cumulative returns sorted ascending.
    """
    rng = np.random.default_rng(seed)
    shocks = rng.standard_normal((simulations, max(1, horizon_days)))
    cumulative = (daily_mean + daily_volatility * shocks).sum(axis=1)
    cumulative.sort()
    logger.debug(
        "Simulated %d paths over %d days (mu=%.6f sigma=%.6f seed=%d)",
        simulations,
        horizon_days,
        daily_mean,
        daily_volatility,
        seed,
    )
    return cumulative


def simulate_from_returns(
    returns: ArrayLike,
    horizon_days: int,
    simulations: int = DEFAULT_SIMULATIONS,
    seed: int = DEFAULT_SEED,
) -> NDArray[np.float64]:
    """Simulate horizon returns using the mean and sample stdev of ``returns``."""
    return simulate_horizon_returns(
        mean(returns), stddev(returns), horizon_days, simulations=simulations, seed=seed
    )


def monte_carlo_var(
    sorted_simulated: ArrayLike,
    confidence: float,
    portfolio_value: float,
) -> float:
    """
    Monte Carlo VaR from sorted simulated horizon returns.

    The paths already span the horizon, so no square-root scaling applies.
    """
    simulated = np.asarray(sorted_simulated, dtype=np.float64)
    n = simulated.size
    if n == 0:
        return 0.0
    index = clamp_index(int(math.floor((1.0 - confidence) * n)), n)
    return max(0.0, -float(simulated[index])) * portfolio_value


def conditional_var(
    returns: ArrayLike,
    confidence: float,
    horizon_days: int,
    portfolio_value: float,
) -> float:
    """
    Expected shortfall: average of the worst ``floor((1 - c) * n)`` returns.

    At least one return is always included in the tail.

    Examples:
        >>> round(conditional_var([-0.04, -0.02, 0.01, 0.03], 0.5, 1, 100.0), 6)
        3.0
    """
    sorted_returns = np.sort(np.asarray(returns, dtype=np.float64))
    n = sorted_returns.size
    if n == 0:
        return 0.0
    cutoff = min(n, max(1, int(math.floor((1.0 - confidence) * n))))
    tail_loss = -float(sorted_returns[:cutoff].mean())
    return max(0.0, tail_loss) * math.sqrt(horizon_days) * portfolio_value


def monte_carlo_distribution(
    sorted_simulated: ArrayLike,
    horizon_days: int,
) -> MonteCarloDistribution:
    """Summarize simulated horizon returns by mean and percentiles."""
    simulated = np.asarray(sorted_simulated, dtype=np.float64)
    return MonteCarloDistribution(
        simulations=int(simulated.size),
        horizon_days=horizon_days,
        mean_return=mean(simulated),
        percentile_5=percentile(simulated, 5),
        percentile_25=percentile(simulated, 25),
        median=percentile(simulated, 50),
        percentile_75=percentile(simulated, 75),
        percentile_95=percentile(simulated, 95),
    )
