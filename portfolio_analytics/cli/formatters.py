"""
Output formatters for analytics results.

Every result can be rendered either as rich tables for the terminal or as
indented JSON for programmatic use. JSON output is built by walking the
frozen result dataclasses field by field; read-only mappings become plain
dicts, dates become ISO strings and numpy values plain numbers.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum

import numpy as np
from rich.console import Console
from rich.table import Table

from portfolio_analytics.models.backtest import BacktestResult, StrategyDefinition
from portfolio_analytics.models.correlation import CorrelationReport
from portfolio_analytics.models.risk_report import RiskReport
from portfolio_analytics.models.signal import AdvisorySummary, PortfolioSignals


logger = logging.getLogger(__name__)


def _json_default(value):
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _plain(value):
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def to_dict(result) -> dict | list:
    """
    Convert a result (or list of results) into JSON-ready data.

    Correlation matrices are rounded to 4 decimals and derived counts
    (``total_trades``, ``holding_count``) are included.
    """
    if isinstance(result, (list, tuple)):
        return [to_dict(item) for item in result]
    if not is_dataclass(result):
        raise TypeError(f"Cannot format {type(result).__name__}")

    data = _plain(result)
    if isinstance(result, CorrelationReport):
        data["matrix"] = result.rounded_matrix()
        data["holding_count"] = result.holding_count
    elif isinstance(result, BacktestResult):
        data["total_trades"] = result.total_trades
    return data


def format_json(result) -> str:
    """
    Render a result as indented JSON.

    Examples:
        >>> from portfolio_analytics.models.backtest import StrategyParameterSpec
        >>> print(format_json(StrategyParameterSpec("period", "Period", "int", "20", "Window")))
        {
          "key": "period",
          "label": "Period",
          "type": "int",
          "default": "20",
          "description": "Window"
        }
    """
    return json.dumps(to_dict(result), indent=2, default=_json_default)


def _fmt(value: float | None, spec: str = ".4f", suffix: str = "") -> str:
    return "N/A" if value is None else f"{value:{spec}}{suffix}"


def _metric_table(title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Metric", style="cyan", width=28)
    table.add_column("Value", style="green", justify="right")
    return table


def print_risk_report(report: RiskReport, console: Console) -> None:
    table = _metric_table(f"Risk Report: {report.portfolio_id}")
    table.add_row("Portfolio Value", f"{report.portfolio_value:,.2f} {report.base_currency}")
    table.add_row("Confidence / Horizon", f"{report.confidence_level:.0%} / {report.horizon_days}d")
    table.add_row("Observations", str(report.observations))
    table.add_row("Historical VaR", f"{report.var.historical:,.2f}")
    table.add_row("Parametric VaR", f"{report.var.parametric:,.2f}")
    table.add_row("Monte Carlo VaR", f"{report.var.monte_carlo:,.2f}")
    table.add_row("CVaR 95%", f"{report.cvar_95:,.2f}")
    table.add_row("CVaR 99%", f"{report.cvar_99:,.2f}")
    table.add_row("Daily Volatility", f"{report.daily_volatility:.4%}")
    table.add_row("Annualized Volatility", f"{report.annualized_volatility:.2%}")
    table.add_row("Beta", _fmt(report.portfolio_beta))
    table.add_row("Alpha", _fmt(report.alpha))
    table.add_row("Sharpe Ratio", _fmt(report.sharpe_ratio))
    table.add_row("Sortino Ratio", _fmt(report.sortino_ratio))
    table.add_row("Treynor Ratio", _fmt(report.treynor_ratio))
    table.add_row("Max Drawdown", f"{report.max_drawdown.max_drawdown:.2%}")
    console.print(table)

    stress = Table(title="Stress Scenarios", header_style="bold magenta")
    stress.add_column("Scenario", style="cyan")
    stress.add_column("Shock", justify="right")
    stress.add_column("Estimated Loss", justify="right", style="red")
    for scenario in report.stress_tests:
        stress.add_row(
            scenario.name,
            f"{scenario.market_shock_pct:.1f}%",
            f"{scenario.estimated_loss:,.2f} ({scenario.estimated_loss_pct:.1f}%)",
        )
    console.print(stress)

    mc = report.monte_carlo
    console.print(
        f"Monte Carlo ({mc.simulations:,} paths, {mc.horizon_days}d): "
        f"p5={mc.percentile_5:.4%} median={mc.median:.4%} p95={mc.percentile_95:.4%}"
    )
    if report.excluded_tickers:
        console.print(f"[yellow]Excluded (no history): {', '.join(report.excluded_tickers)}[/yellow]")


def print_correlation_report(report: CorrelationReport, console: Console) -> None:
    matrix = Table(title=f"Correlation Matrix: {report.portfolio_id}", header_style="bold magenta")
    matrix.add_column("", style="cyan")
    for ticker in report.tickers:
        matrix.add_column(ticker, justify="right")
    for ticker, row in zip(report.tickers, report.rounded_matrix(2)):
        matrix.add_row(ticker, *(f"{value:.2f}" for value in row))
    console.print(matrix)

    pairs = Table(title="Notable Pairs", header_style="bold magenta")
    pairs.add_column("Pair", style="cyan")
    pairs.add_column("Correlation", justify="right")
    pairs.add_column("Level")
    for pair in report.highly_correlated_pairs + report.negatively_correlated_pairs:
        pairs.add_row(f"{pair.ticker_1}/{pair.ticker_2}", f"{pair.correlation:.4f}", pair.risk_level)
    console.print(pairs)

    hedges = Table(title="Hedge Suggestions", header_style="bold magenta")
    hedges.add_column("Holding", style="cyan")
    hedges.add_column("Type")
    hedges.add_column("Instrument")
    hedges.add_column("Exp. Corr", justify="right")
    for hedge in report.hedge_suggestions:
        hedges.add_row(
            hedge.holding_ticker, hedge.hedge_type, hedge.instrument, f"{hedge.expected_correlation:.2f}"
        )
    console.print(hedges)

    console.print(
        f"Diversification score: [bold]{report.diversification_score:.1f}[/bold] "
        f"({report.diversification_rating.value})"
    )


def print_backtest_result(result: BacktestResult, console: Console) -> None:
    table = _metric_table(f"{result.strategy_name} on {result.ticker}")
    table.add_row("Price Points", str(result.price_points))
    table.add_row("Total Trades", str(result.total_trades))
    table.add_row("Winning Trades", str(result.winning_trades))
    table.add_row("Losing Trades", str(result.losing_trades))
    table.add_row("Win Rate", f"{result.win_rate_pct:.2f}%")
    table.add_row("Avg Win", f"{result.avg_win_pct:.2f}%")
    table.add_row("Avg Loss", f"{result.avg_loss_pct:.2f}%")
    table.add_row("Profit Factor", f"{result.profit_factor:.2f}")
    table.add_row("Total Return", f"{result.total_return_pct:.2f}%")
    table.add_row("CAGR", f"{result.cagr_pct:.2f}%")
    table.add_row("Max Drawdown", f"{result.max_drawdown_pct:.2f}%")
    table.add_row("Sharpe Ratio", _fmt(result.sharpe_ratio, ".3f"))
    table.add_row("Sortino Ratio", _fmt(result.sortino_ratio, ".3f"))
    table.add_row("Benchmark Return", _fmt(result.benchmark_return_pct, ".2f", "%"))
    table.add_row("Alpha", _fmt(result.alpha_pct, ".2f", "%"))
    console.print(table)

    trades = Table(title="Trades", header_style="bold magenta")
    for column in ("Entry", "Exit", "Entry Price", "Exit Price", "Return"):
        trades.add_column(column, justify="right")
    for trade in result.trades:
        trades.add_row(
            trade.entry_date.isoformat(),
            trade.exit_date.isoformat(),
            f"{trade.entry_price:.2f}",
            f"{trade.exit_price:.2f}",
            f"{trade.return_pct:.2f}%",
        )
    console.print(trades)
    for note in result.notes:
        console.print(f"[dim]{note}[/dim]")


def print_signals(result: PortfolioSignals, console: Console) -> None:
    table = Table(title=f"Signals: {result.portfolio_id}", header_style="bold magenta")
    table.add_column("Ticker", style="cyan")
    table.add_column("Action")
    table.add_column("Source")
    table.add_column("Conf.", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Stop", justify="right")
    table.add_column("Rationale")
    for signal in result.signals:
        table.add_row(
            signal.ticker,
            signal.action.value,
            signal.strategy_source,
            f"{signal.confidence:.2f}",
            f"{signal.current_price:.2f}",
            _fmt(signal.target_price, ".2f"),
            _fmt(signal.stop_loss, ".2f"),
            signal.rationale,
        )
    console.print(table)

    harvest = Table(title="Tax-Loss Candidates", header_style="bold magenta")
    harvest.add_column("Ticker", style="cyan")
    harvest.add_column("Loss", justify="right", style="red")
    harvest.add_column("Loss %", justify="right", style="red")
    harvest.add_column("Suggestion")
    for candidate in result.tax_loss_candidates:
        harvest.add_row(
            candidate.ticker,
            f"{candidate.unrealized_loss:,.2f}",
            f"{candidate.unrealized_loss_pct:.2f}%",
            candidate.suggestion,
        )
    console.print(harvest)


def print_advisory(summary: AdvisorySummary, console: Console) -> None:
    table = _metric_table(f"Advisory: {summary.ticker}")
    table.add_row("Current Price", f"{summary.current_price:.2f}")
    table.add_row("Change", _fmt(summary.change_pct, ".2f", "%"))
    table.add_row("SMA20", f"{summary.indicators.sma20:.2f}")
    table.add_row("EMA20", f"{summary.indicators.ema20:.2f}")
    table.add_row("RSI14", f"{summary.indicators.rsi14:.1f}")
    table.add_row("MACD", f"{summary.indicators.macd:.4f}")
    table.add_row("Annualized Volatility", f"{summary.indicators.annualized_volatility:.2%}")
    table.add_row("VaR 95% (1d)", f"{summary.risk.var_95:,.2f}")
    table.add_row("VaR 99% (1d)", f"{summary.risk.var_99:,.2f}")
    table.add_row("Recommendation", summary.recommendation.value)
    console.print(table)
    console.print(summary.rationale)


def print_strategies(strategies: list[StrategyDefinition], console: Console) -> None:
    table = Table(title="Available Strategies", header_style="bold magenta")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Risk")
    table.add_column("Parameters")
    for strategy in strategies:
        params = ", ".join(f"{p.key}={p.default}" for p in strategy.parameters)
        table.add_row(strategy.id, strategy.name, strategy.category, strategy.risk_level, params)
    console.print(table)


_PRINTERS = (
    (RiskReport, print_risk_report),
    (CorrelationReport, print_correlation_report),
    (BacktestResult, print_backtest_result),
    (PortfolioSignals, print_signals),
    (AdvisorySummary, print_advisory),
)


def print_text(result, console: Console) -> None:
    """Print any analytics result as rich tables."""
    if isinstance(result, list):
        print_strategies(result, console)
        return
    for result_type, printer in _PRINTERS:
        if isinstance(result, result_type):
            printer(result, console)
            return
    raise TypeError(f"Cannot format {type(result).__name__}")
