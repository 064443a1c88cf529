"""Single-ticker strategy backtest engine.

Loads one ticker's closing prices for the lookback window, runs the
registered rule for the requested strategy and aggregates trade statistics
together with the ticker's own buy-and-hold performance figures and its
return relative to the benchmark.
"""

import logging
from collections.abc import Mapping
from datetime import date, timedelta

from portfolio_analytics.config.parameters import AnalyticsSettings, load_strategy_parameters
from portfolio_analytics.indicators.basic import validate_indicator_inputs
from portfolio_analytics.io.sources import PriceHistorySource
from portfolio_analytics.models.backtest import BacktestResult
from portfolio_analytics.models.exceptions import DataIntegrityError, InputError
from portfolio_analytics.strategy.registry import StrategyRegistry, build_default_registry, strategy_name
from portfolio_analytics.timeseries.returns import simple_returns, total_return_pct
from portfolio_analytics.backtest.drawdown import compute_max_drawdown
from portfolio_analytics.backtest.metrics import annualized_sharpe, annualized_sortino, cagr_pct, compute_trade_stats


logger = logging.getLogger(__name__)


class BacktestEngine:
    """Runs strategy rules over a ticker's price history.

    Attributes:
        prices: Price-history collaborator
        settings: Engine-wide settings (benchmark, risk-free rate, minimum history)
        registry: Rule registry; defaults to the built-in rules
    """

    def __init__(
        self,
        prices: PriceHistorySource,
        settings: AnalyticsSettings | None = None,
        registry: StrategyRegistry | None = None,
    ):
        self.prices = prices
        self.settings = settings or AnalyticsSettings()
        self.registry = registry or build_default_registry(self.settings.dca_amount)

    def run(
        self,
        strategy_id: str,
        ticker: str,
        lookback_days: int = 365,
        params: Mapping | None = None,
        as_of: date | None = None,
    ) -> BacktestResult:
        """
        Backtest ``strategy_id`` on ``ticker``.

        Args:
            strategy_id: Catalogue id; ids without a rule run SMA crossover (20, 50).
            ticker: Instrument symbol.
            lookback_days: Calendar days of history ending at ``as_of``.
            params: Strategy parameters keyed by camelCase name. Invalid
                values fall back to their defaults.
            as_of: Last day of the window (default: today).

        Returns:
            BacktestResult with trades and aggregate statistics.

        Raises:
            InputError: If the ticker is blank, the lookback is not positive
                or fewer than the minimum number of prices is available.
        """
        settings = self.settings
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise InputError("Ticker is required")
        if lookback_days < 1:
            raise InputError(
                "Lookback must be at least 1 day", context={"lookback_days": lookback_days}
            )

        end = as_of or date.today()
        start = end - timedelta(days=lookback_days)
        series = self.prices.get_closing_prices(ticker, start, end)
        if len(series) < settings.min_backtest_points:
            raise InputError(
                f"Insufficient price data for {ticker} ({len(series)} records)",
                hint="Sync price history first",
            )

        closes = series.closes
        dates = series.dates
        try:
            validate_indicator_inputs(closes, period=1, min_length=settings.min_backtest_points)
        except ValueError as exc:
            raise DataIntegrityError(str(exc), context={"ticker": ticker}) from exc

        registered = self.registry.resolve(strategy_id)
        notes: list[str] = []
        if registered.name == strategy_id:
            rule_params = load_strategy_parameters(registered.parameter_model, dict(params or {}))
        else:
            rule_params = registered.parameter_model()
            notes.append(
                f"No backtest rule for {strategy_id}; ran {strategy_name(registered.name)} "
                "with default parameters"
            )

        logger.info(
            "Backtesting %s on %s: %d prices %s..%s",
            strategy_id,
            ticker,
            len(series),
            dates[0],
            dates[-1],
        )
        trades = registered.func(closes, dates, rule_params)
        stats = compute_trade_stats(trades)

        total_return = total_return_pct(closes)
        years = lookback_days / settings.trading_days_per_year
        max_dd, _, _ = compute_max_drawdown(closes)
        returns = simple_returns(closes)
        rf = settings.risk_free_rate
        days = settings.trading_days_per_year

        benchmark_return = None
        alpha = None
        benchmark = self.prices.get_closing_prices(settings.benchmark_ticker, start, end)
        if len(benchmark) > 1:
            benchmark_return = total_return_pct(benchmark.closes)
            alpha = total_return - benchmark_return
        else:
            logger.warning(
                "No benchmark history for %s; alpha omitted", settings.benchmark_ticker
            )

        result = BacktestResult(
            strategy_id=strategy_id,
            strategy_name=strategy_name(strategy_id),
            ticker=ticker,
            lookback_days=lookback_days,
            parameters=rule_params.as_dict(),
            trades=tuple(trades),
            winning_trades=stats.winning_trades,
            losing_trades=stats.losing_trades,
            win_rate_pct=stats.win_rate_pct,
            avg_win_pct=stats.avg_win_pct,
            avg_loss_pct=stats.avg_loss_pct,
            profit_factor=stats.profit_factor,
            total_return_pct=total_return,
            cagr_pct=cagr_pct(total_return, years),
            max_drawdown_pct=max_dd * 100.0,
            sharpe_ratio=annualized_sharpe(returns, rf, days),
            sortino_ratio=annualized_sortino(returns, rf, days),
            benchmark_return_pct=benchmark_return,
            alpha_pct=alpha,
            price_points=len(series),
            notes=tuple(notes),
        )
        logger.info(
            "Backtest %s on %s: %d trades, win_rate=%.2f%%, total_return=%.2f%%",
            strategy_id,
            ticker,
            result.total_trades,
            result.win_rate_pct,
            result.total_return_pct,
        )
        return result
