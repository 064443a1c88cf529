"""Analytics facade exposed to API layers, the CLI and batch jobs.

``AnalyticsService`` wires the collaborators into the four engines and
offers one method per operation. Every call is independent: the service
holds no per-request state, so one instance may serve concurrent callers.

Holdings are read through the holdings collaborator, which is also where
authorization is enforced; an ``AccessError`` it raises propagates to the
caller unchanged.
"""

import asyncio
import logging
from collections.abc import Mapping
from datetime import date

from portfolio_analytics.backtest.engine import BacktestEngine
from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.config.tables import PORTFOLIO_HEDGES, SECTOR_HEDGES, STRESS_SCENARIOS, Z_SCORES
from portfolio_analytics.io.sources import HoldingsSource, PriceHistorySource, QuoteSource
from portfolio_analytics.models.backtest import BacktestResult, StrategyDefinition
from portfolio_analytics.models.correlation import CorrelationReport
from portfolio_analytics.models.risk_report import RiskReport
from portfolio_analytics.models.signal import AdvisorySummary, PortfolioSignals
from portfolio_analytics.portfolio.correlation_service import CorrelationService
from portfolio_analytics.risk.engine import RiskAnalyticsEngine
from portfolio_analytics.signals.advisor import DEFAULT_POSITION_VALUE, TickerAdvisor
from portfolio_analytics.signals.generator import SignalGenerator
from portfolio_analytics.strategy.registry import StrategyRegistry, get_available_strategies


logger = logging.getLogger(__name__)


class AnalyticsService:
    """Entry point for all analytics operations.

    Args:
        holdings: Holdings collaborator.
        prices: Price-history collaborator.
        quotes: Quote/FX collaborator (optional).
        settings: Engine-wide settings (defaults when omitted).
        scenarios: Stress scenario table.
        z_table: Confidence to z-score table.
        sector_hedges: Sector hedge table.
        portfolio_hedges: Portfolio-wide hedge table.
        registry: Backtest rule registry (built-in rules when omitted).

    Examples:
        >>> from portfolio_analytics.io.memory import InMemoryMarketData
        >>> data = InMemoryMarketData()
        >>> service = AnalyticsService(data, data, data)
        >>> [s.id for s in service.get_available_strategies()][:2]
        ['sma_crossover', 'mean_reversion']
    """

    def __init__(
        self,
        holdings: HoldingsSource,
        prices: PriceHistorySource,
        quotes: QuoteSource | None = None,
        settings: AnalyticsSettings | None = None,
        scenarios=STRESS_SCENARIOS,
        z_table=Z_SCORES,
        sector_hedges=SECTOR_HEDGES,
        portfolio_hedges=PORTFOLIO_HEDGES,
        registry: StrategyRegistry | None = None,
    ):
        self.holdings = holdings
        self.settings = settings or AnalyticsSettings()
        self.risk_engine = RiskAnalyticsEngine(
            prices, quotes, self.settings, scenarios=scenarios, z_table=z_table
        )
        self.correlation_service = CorrelationService(
            prices, self.settings, sector_hedges=sector_hedges, portfolio_hedges=portfolio_hedges
        )
        self.backtest_engine = BacktestEngine(prices, self.settings, registry)
        self.signal_generator = SignalGenerator(prices, quotes, self.settings)
        self.advisor = TickerAdvisor(prices, quotes, self.settings)

    def compute_risk_analytics(
        self,
        portfolio_id: str,
        confidence_level: float = 0.95,
        horizon_days: int = 1,
        lookback_days: int = 252,
        as_of: date | None = None,
    ) -> RiskReport:
        """Compute the risk report of a portfolio."""
        holdings = self.holdings.get_holdings(portfolio_id)
        return self.risk_engine.compute(
            portfolio_id,
            holdings,
            confidence_level=confidence_level,
            horizon_days=horizon_days,
            lookback_days=lookback_days,
            as_of=as_of,
        )

    async def compute_risk_analytics_async(
        self,
        portfolio_id: str,
        confidence_level: float = 0.95,
        horizon_days: int = 1,
        lookback_days: int = 252,
        as_of: date | None = None,
    ) -> RiskReport:
        """Run ``compute_risk_analytics`` in a worker thread.

        The Monte Carlo simulation is CPU-bound; running it off the event
        loop keeps request-serving coroutines responsive.
        """
        return await asyncio.to_thread(
            self.compute_risk_analytics,
            portfolio_id,
            confidence_level,
            horizon_days,
            lookback_days,
            as_of,
        )

    def analyze_correlation(
        self,
        portfolio_id: str,
        lookback_days: int = 252,
        as_of: date | None = None,
    ) -> CorrelationReport:
        """Compute the correlation and diversification report of a portfolio."""
        holdings = self.holdings.get_holdings(portfolio_id)
        return self.correlation_service.analyze(
            portfolio_id, holdings, lookback_days=lookback_days, as_of=as_of
        )

    def backtest(
        self,
        strategy_id: str,
        ticker: str,
        lookback_days: int = 365,
        params: Mapping | None = None,
        as_of: date | None = None,
    ) -> BacktestResult:
        """Backtest a catalogue strategy on one ticker."""
        return self.backtest_engine.run(
            strategy_id, ticker, lookback_days=lookback_days, params=params, as_of=as_of
        )

    def generate_signals(self, portfolio_id: str, as_of: date | None = None) -> PortfolioSignals:
        """Generate ranked trade signals and tax-loss candidates for a portfolio."""
        holdings = self.holdings.get_holdings(portfolio_id)
        return self.signal_generator.generate(portfolio_id, holdings, as_of=as_of)

    def analyze_ticker(
        self,
        ticker: str,
        position_value: float = DEFAULT_POSITION_VALUE,
        lookback_days: int = 365,
        as_of: date | None = None,
    ) -> AdvisorySummary:
        """Build the advisory summary of a single ticker."""
        return self.advisor.analyze(
            ticker, position_value=position_value, lookback_days=lookback_days, as_of=as_of
        )

    def get_available_strategies(self) -> list[StrategyDefinition]:
        return get_available_strategies()
