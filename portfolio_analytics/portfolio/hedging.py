"""Hedge suggestions for correlated holdings.

Suggestions come from fixed tables: a sector to inverse-instrument map, a
protective put per holding and a few portfolio-wide hedges. Their expected
correlations are configured estimates, not measured values.
"""
import logging
from collections.abc import Mapping

from portfolio_analytics.config.tables import PORTFOLIO_HEDGES, SECTOR_HEDGES, HedgeInstrument
from portfolio_analytics.models.core import HoldingSnapshot
from portfolio_analytics.models.correlation import HedgeSuggestion

logger = logging.getLogger(__name__)

PORTFOLIO_TICKER = "PORTFOLIO"
PORTFOLIO_NAME = "Entire Portfolio"


def suggest_hedges(
    holdings: list[HoldingSnapshot],
    sector_hedges: Mapping[str, HedgeInstrument] = SECTOR_HEDGES,
    portfolio_hedges: tuple[HedgeInstrument, ...] = PORTFOLIO_HEDGES,
) -> list[HedgeSuggestion]:
    """Build hedge suggestions for the analyzed holdings.

    Per holding (in order): the inverse instrument of its sector, when the
    sector is in the table (once per holding and instrument), then a
    protective put. Portfolio-wide hedges follow when any holding exists.

    Args:
        holdings: Holdings included in the correlation matrix
        sector_hedges: Sector to hedge instrument table
        portfolio_hedges: Hedges applied to the whole portfolio

    Returns:
        Ordered list of HedgeSuggestion
    """
    suggestions: list[HedgeSuggestion] = []
    suggested: set[tuple[str, str]] = set()

    for holding in holdings:
        hedge = sector_hedges.get(holding.sector or "Unknown")
        if hedge is not None and (hedge.instrument, holding.ticker) not in suggested:
            suggested.add((hedge.instrument, holding.ticker))
            suggestions.append(
                HedgeSuggestion(
                    holding_ticker=holding.ticker,
                    holding_name=holding.display_name,
                    hedge_type=hedge.hedge_type,
                    instrument=hedge.instrument,
                    description=hedge.description,
                    expected_correlation=hedge.expected_correlation,
                )
            )

        suggestions.append(
            HedgeSuggestion(
                holding_ticker=holding.ticker,
                holding_name=holding.display_name,
                hedge_type="Put Option",
                instrument=f"{holding.ticker} PUT",
                description=(
                    f"Protective put on {holding.ticker}, "
                    "limits downside while preserving upside"
                ),
                expected_correlation=-1.0,
            )
        )

    if holdings:
        for hedge in portfolio_hedges:
            suggestions.append(
                HedgeSuggestion(
                    holding_ticker=PORTFOLIO_TICKER,
                    holding_name=PORTFOLIO_NAME,
                    hedge_type=hedge.hedge_type,
                    instrument=hedge.instrument,
                    description=hedge.description,
                    expected_correlation=hedge.expected_correlation,
                )
            )

    logger.debug("Generated %d hedge suggestions", len(suggestions))
    return suggestions
