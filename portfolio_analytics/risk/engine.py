"""Risk analytics engine.

Turns a portfolio's holdings and their daily price history into a
``RiskReport``: VaR by three methods, CVaR, volatility, beta and alpha,
risk-adjusted ratios, max drawdown, stress scenarios and a Monte Carlo
return distribution.

All price reads happen before computation starts. Weights are frozen at
analysis time; the portfolio return series is the weighted sum of the
holding returns after trailing alignment.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta

import numpy as np

from portfolio_analytics.backtest.drawdown import compute_max_drawdown, value_series_from_returns
from portfolio_analytics.config.parameters import AnalyticsSettings
from portfolio_analytics.config.tables import STRESS_SCENARIOS, Z_SCORES, StressScenario
from portfolio_analytics.io.pricing import convert_to_base, resolve_current_price
from portfolio_analytics.io.sources import PriceHistorySource, QuoteSource
from portfolio_analytics.models.core import HoldingSnapshot, PriceSeries
from portfolio_analytics.models.exceptions import DataGapError, InputError
from portfolio_analytics.models.risk_report import DrawdownSummary, HoldingBeta, RiskReport, VaRMetrics
from portfolio_analytics.timeseries.returns import simple_returns, trailing
from portfolio_analytics.timeseries.stats import downside_deviation, mean, ols_beta, stddev
from portfolio_analytics.risk.stress import apply_stress_scenarios
from portfolio_analytics.risk.var import (
    conditional_var,
    historical_var,
    monte_carlo_distribution,
    monte_carlo_var,
    parametric_var,
    simulate_from_returns,
)


logger = logging.getLogger(__name__)

EPSILON = 1e-10


@dataclass(frozen=True)
class _PricedHolding:
    holding: HoldingSnapshot
    series: PriceSeries
    market_value: float


class RiskAnalyticsEngine:
    """Computes portfolio risk reports.

    Attributes:
        prices: Price-history collaborator
        quotes: Quote/FX collaborator (None uses last closes, no FX)
        settings: Engine-wide settings
        scenarios: Stress scenario table
        z_table: Confidence to z-score table for parametric VaR
    """

    def __init__(
        self,
        prices: PriceHistorySource,
        quotes: QuoteSource | None = None,
        settings: AnalyticsSettings | None = None,
        scenarios: tuple[StressScenario, ...] = STRESS_SCENARIOS,
        z_table: tuple[tuple[float, float], ...] = Z_SCORES,
    ):
        self.prices = prices
        self.quotes = quotes
        self.settings = settings or AnalyticsSettings()
        self.scenarios = tuple(scenarios)
        self.z_table = tuple(z_table)

    def compute(
        self,
        portfolio_id: str,
        holdings: list[HoldingSnapshot],
        confidence_level: float = 0.95,
        horizon_days: int = 1,
        lookback_days: int = 252,
        as_of: date | None = None,
        seed: int | None = None,
    ) -> RiskReport:
        """Compute the full risk report for one portfolio.

        Args:
            portfolio_id: Portfolio identifier, carried into the report
            holdings: Holdings of the portfolio
            confidence_level: VaR confidence in (0, 1)
            horizon_days: VaR horizon in days (>= 1)
            lookback_days: Calendar days of price history to use
            as_of: Analysis date (default today)
            seed: Monte Carlo seed override (default from settings)

        Returns:
            Immutable RiskReport

        Raises:
            InputError: If the portfolio is empty, the parameters are out of
                range, or no holding has usable price history
        """
        self._validate(confidence_level, horizon_days, lookback_days)
        if not holdings:
            raise InputError("Portfolio has no holdings", context={"portfolio_id": portfolio_id})

        tickered = [h for h in holdings if h.has_ticker]
        if not tickered:
            raise InputError(
                "Portfolio has no holdings with a ticker for risk analysis",
                context={"portfolio_id": portfolio_id},
            )

        end = as_of or date.today()
        start = end - timedelta(days=lookback_days)
        settings = self.settings
        logger.info(
            "Computing risk for portfolio %s: %d holdings, c=%.3f, h=%d, lookback=%d",
            portfolio_id,
            len(tickered),
            confidence_level,
            horizon_days,
            lookback_days,
        )

        priced, excluded = self._load_holdings(tickered, start, end)
        if not priced:
            raise InputError(
                "Could not fetch historical prices for any holding",
                hint="Sync price history first",
                context={"portfolio_id": portfolio_id},
            )

        total_value = sum(item.market_value for item in priced)
        weights = {
            item.holding.ticker: (item.market_value / total_value if total_value != 0 else 0.0)
            for item in priced
        }

        benchmark = self.prices.get_closing_prices(settings.benchmark_ticker, start, end)
        has_benchmark = len(benchmark) >= 2
        if not has_benchmark:
            logger.warning(
                "No benchmark history for %s; beta, alpha and Treynor omitted",
                settings.benchmark_ticker,
            )

        min_len = min(len(item.series) for item in priced)
        if has_benchmark:
            min_len = min(min_len, len(benchmark))

        holding_returns = {
            item.holding.ticker: simple_returns(trailing(item.series.closes, min_len))
            for item in priced
        }
        observations = min_len - 1
        portfolio_returns = np.zeros(observations, dtype=np.float64)
        for ticker, rets in holding_returns.items():
            portfolio_returns += weights[ticker] * rets

        daily_vol = stddev(portfolio_returns)
        annual_vol = daily_vol * math.sqrt(settings.trading_days_per_year)

        simulated = simulate_from_returns(
            portfolio_returns,
            horizon_days,
            simulations=settings.monte_carlo_simulations,
            seed=settings.monte_carlo_seed if seed is None else seed,
        )
        var = VaRMetrics(
            historical=historical_var(portfolio_returns, confidence_level, horizon_days, total_value),
            parametric=parametric_var(
                daily_vol, confidence_level, horizon_days, total_value, self.z_table
            ),
            monte_carlo=monte_carlo_var(simulated, confidence_level, total_value),
        )

        annual_return = mean(portfolio_returns) * settings.trading_days_per_year
        rf = settings.risk_free_rate

        portfolio_beta = None
        holding_betas: tuple[HoldingBeta, ...] = ()
        alpha = None
        treynor = None
        if has_benchmark:
            bench_returns = trailing(simple_returns(trailing(benchmark.closes, min_len)), observations)
            portfolio_beta = ols_beta(portfolio_returns, bench_returns)
            holding_betas = tuple(
                HoldingBeta(
                    ticker=item.holding.ticker,
                    name=item.holding.display_name,
                    beta=ols_beta(holding_returns[item.holding.ticker], bench_returns),
                    weight=weights[item.holding.ticker],
                )
                for item in priced
            )
            bench_annual = mean(bench_returns) * settings.trading_days_per_year
            alpha = annual_return - (rf + portfolio_beta * (bench_annual - rf))
            if abs(portfolio_beta) > EPSILON:
                treynor = (annual_return - rf) / portfolio_beta

        sharpe = (annual_return - rf) / annual_vol if annual_vol > EPSILON else None
        downside = downside_deviation(portfolio_returns, settings.daily_risk_free_rate) * math.sqrt(
            settings.trading_days_per_year
        )
        sortino = (annual_return - rf) / downside if downside > EPSILON else None

        max_dd, peak_idx, trough_idx = compute_max_drawdown(
            value_series_from_returns(portfolio_returns)
        )
        drawdown = DrawdownSummary(
            max_drawdown=max_dd,
            peak_index=peak_idx,
            trough_index=trough_idx,
            peak_date=start + timedelta(days=peak_idx),
            trough_date=start + timedelta(days=trough_idx),
        )

        report = RiskReport(
            portfolio_id=portfolio_id,
            portfolio_value=total_value,
            base_currency=settings.base_currency,
            confidence_level=confidence_level,
            horizon_days=horizon_days,
            lookback_days=lookback_days,
            var=var,
            cvar_95=conditional_var(portfolio_returns, 0.95, horizon_days, total_value),
            cvar_99=conditional_var(portfolio_returns, 0.99, horizon_days, total_value),
            daily_volatility=daily_vol,
            annualized_volatility=annual_vol,
            max_drawdown=drawdown,
            stress_tests=apply_stress_scenarios(total_value, portfolio_beta, self.scenarios),
            monte_carlo=monte_carlo_distribution(simulated, horizon_days),
            observations=observations,
            weights=weights,
            portfolio_beta=portfolio_beta,
            holding_betas=holding_betas,
            alpha=alpha,
            sharpe_ratio=sharpe,
            sortino_ratio=sortino,
            treynor_ratio=treynor,
            excluded_tickers=tuple(excluded),
        )
        logger.info(
            "Risk report for %s: value=%.2f, hist VaR=%.2f, %d observations, %d excluded",
            portfolio_id,
            total_value,
            var.historical,
            observations,
            len(excluded),
        )
        return report

    def _load_holdings(
        self,
        holdings: list[HoldingSnapshot],
        start: date,
        end: date,
    ) -> tuple[list[_PricedHolding], list[str]]:
        priced: list[_PricedHolding] = []
        excluded: list[str] = []
        for holding in holdings:
            try:
                series = self._fetch_series(holding.ticker, start, end)
            except DataGapError as exc:
                logger.warning("Excluding holding from risk analysis: %s", exc)
                excluded.append(holding.ticker)
                continue

            price = resolve_current_price(holding.ticker, self.quotes, series, holding)
            value = convert_to_base(
                (price or 0.0) * holding.quantity,
                holding.currency,
                self.settings.base_currency,
                self.quotes,
            )
            priced.append(_PricedHolding(holding, series, value))
        return _merge_duplicates(priced), excluded

    def _fetch_series(self, ticker: str, start: date, end: date) -> PriceSeries:
        series = self.prices.get_closing_prices(ticker, start, end)
        if len(series) < 2:
            raise DataGapError("Insufficient price history", ticker=ticker, points=len(series))
        return series

    @staticmethod
    def _validate(confidence_level: float, horizon_days: int, lookback_days: int) -> None:
        if not 0.0 < confidence_level < 1.0:
            raise InputError(
                "Confidence level must be between 0 and 1",
                context={"confidence_level": confidence_level},
            )
        if horizon_days < 1:
            raise InputError("Horizon must be at least 1 day", context={"horizon_days": horizon_days})
        if lookback_days < 2:
            raise InputError(
                "Lookback must be at least 2 days", context={"lookback_days": lookback_days}
            )


def _merge_duplicates(priced: list[_PricedHolding]) -> list[_PricedHolding]:
    """Combine lots of the same ticker into one position."""
    merged: dict[str, _PricedHolding] = {}
    for item in priced:
        existing = merged.get(item.holding.ticker)
        if existing is None:
            merged[item.holding.ticker] = item
        else:
            merged[item.holding.ticker] = _PricedHolding(
                existing.holding, existing.series, existing.market_value + item.market_value
            )
    return list(merged.values())
