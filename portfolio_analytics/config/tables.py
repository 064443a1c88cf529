"""
Fixed lookup tables used by the risk and correlation engines.

The values are historical approximations, not derived from data. Engines
receive them as constructor arguments, so an alternative table can be
swapped in without touching any algorithm.
"""

from dataclasses import dataclass
from types import MappingProxyType


@dataclass(frozen=True)
class StressScenario:
    """A historical market shock replayed against the portfolio."""

    name: str
    description: str
    market_shock_pct: float


@dataclass(frozen=True)
class HedgeInstrument:
    """An instrument suggested as a hedge, with its assumed correlation."""

    instrument: str
    description: str
    expected_correlation: float
    hedge_type: str = "Inverse ETF"


# (minimum confidence, z-score), highest threshold first
Z_SCORES: tuple[tuple[float, float], ...] = (
    (0.99, 2.326),
    (0.95, 1.645),
    (0.90, 1.282),
)
DEFAULT_Z_SCORE = 1.645

STRESS_SCENARIOS: tuple[StressScenario, ...] = (
    StressScenario(
        "2008 Financial Crisis",
        "Replays the 2007-2009 subprime mortgage crisis and bank failures",
        -56.8,
    ),
    StressScenario(
        "COVID-19 Crash (2020)",
        "Replays the rapid market selloff of Feb-Mar 2020",
        -33.9,
    ),
    StressScenario(
        "Dot-com Bubble (2000-2002)",
        "Replays the technology bubble burst of the early 2000s",
        -49.1,
    ),
    StressScenario(
        "Black Monday (1987)",
        "Replays the Oct 19, 1987 single-day market crash",
        -22.6,
    ),
    StressScenario(
        "Interest Rate Shock (+300bps)",
        "Replays a sudden 300 basis point increase in interest rates",
        -20.0,
    ),
)

SECTOR_HEDGES: MappingProxyType = MappingProxyType(
    {
        "Technology": HedgeInstrument("SH", "Short S&P 500 ETF, broad market hedge", -0.95),
        "Healthcare": HedgeInstrument("RWM", "Short Russell 2000 ETF, small-cap hedge", -0.85),
        "Financials": HedgeInstrument("SKF", "UltraShort Financials, sector inverse ETF", -0.90),
        "Energy": HedgeInstrument("ERY", "Direxion Daily Energy Bear, energy inverse ETF", -0.90),
        "Consumer Discretionary": HedgeInstrument("SH", "Short S&P 500 ETF, broad consumer hedge", -0.80),
        "Industrials": HedgeInstrument("SH", "Short S&P 500 ETF, broad industrial hedge", -0.80),
        "Materials": HedgeInstrument("SH", "Short S&P 500 ETF, broad materials hedge", -0.75),
        "Utilities": HedgeInstrument("TBT", "Short 20+ Year Treasury, rates inverse", -0.60),
        "Real Estate": HedgeInstrument("SRS", "UltraShort Real Estate, REIT inverse ETF", -0.85),
    }
)

PORTFOLIO_HEDGES: tuple[HedgeInstrument, ...] = (
    HedgeInstrument(
        "VXX",
        "iPath VIX Short-Term Futures, rises when market fear increases",
        -0.80,
        hedge_type="Volatility",
    ),
    HedgeInstrument(
        "GLD",
        "SPDR Gold Trust, historically low correlation with equities",
        -0.10,
        hedge_type="Uncorrelated Asset",
    ),
    HedgeInstrument(
        "TLT",
        "iShares 20+ Year Treasury Bond, traditional equity/bond diversification",
        -0.30,
        hedge_type="Uncorrelated Asset",
    ),
)


def z_score_for(confidence: float, table: tuple[tuple[float, float], ...] = Z_SCORES) -> float:
    """
    Look up the one-sided z-score for a confidence level.

    The highest table threshold not exceeding ``confidence`` wins; levels
    below every threshold use the 95% value.

    Examples:
        >>> z_score_for(0.99)
        2.326
        >>> z_score_for(0.97)
        1.645
        >>> z_score_for(0.5)
        1.645
    """
    for threshold, z_value in table:
        if confidence >= threshold:
            return z_value
    return DEFAULT_Z_SCORE
